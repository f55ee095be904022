"""
Task Process - 声明式任务流程引擎

从结构化定义(YAML/JSON/XML)加载任务列表, 每个任务按固定生命周期执行:
介绍消息 -> 前置条件 -> 任务步骤 -> 后置条件 -> 退出消息。
所有片段在独立的执行上下文中运行, 宿主与上下文之间只通过导入/导出变量交换数据。

基本用法:
    from task_process import TaskProcessEngine, Logger

    logger = Logger(log_dir="logs")
    engine = TaskProcessEngine.initialize("build.yaml", {'logger': logger})

    host_scope = {'BuildNumber': 42}
    result = engine.run(host_scope)
    print(result.success, host_scope.get('PackagePath'))
"""

__version__ = "1.0.0"

from task_process.core.config import Config
from task_process.core.logger import Logger
from task_process.core.context import ExecutionContext, VariablePair
from task_process.core.engine import RunResult, TaskProcessEngine
from task_process.core.errors import (
    ActionFailedError,
    CommandFailedError,
    ConditionStructureError,
    DefinitionError,
    EngineStateError,
    MissingContextVariableError,
    MissingHostVariableError,
    PostConditionFailedError,
    TaskProcessError,
    VariableMarshallingError,
)
from task_process.tasks import (
    ActionUnit,
    ConditionGroup,
    ConditionOutcome,
    FragmentFactory,
    Task,
    TaskList,
    TaskProcessDefinition,
    TaskState,
    load_definition,
)
from task_process.utils.notifier import Notifier

__all__ = [
    'Config',
    'Logger',
    'ExecutionContext',
    'VariablePair',
    'RunResult',
    'TaskProcessEngine',
    'ActionUnit',
    'ConditionGroup',
    'ConditionOutcome',
    'FragmentFactory',
    'Task',
    'TaskList',
    'TaskProcessDefinition',
    'TaskState',
    'load_definition',
    'Notifier',
    'TaskProcessError',
    'DefinitionError',
    'EngineStateError',
    'VariableMarshallingError',
    'MissingHostVariableError',
    'MissingContextVariableError',
    'ActionFailedError',
    'ConditionStructureError',
    'PostConditionFailedError',
    'CommandFailedError',
]
