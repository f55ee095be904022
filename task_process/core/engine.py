"""
任务流程引擎

负责一次完整运行: 校验定义 -> 导入变量 -> 按顺序执行任务 -> 导出变量
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Union

from task_process.core.context import ExecutionContext
from task_process.core.errors import EngineStateError, MissingContextVariableError, TaskProcessError
from task_process.tasks.loader import TaskProcessDefinition, load_definition
from task_process.tasks.task import TaskState


@dataclass
class RunResult:
    """一次运行的结果"""

    success: bool
    error: Optional[TaskProcessError] = None
    task_states: Dict[str, TaskState] = field(default_factory=dict)
    exported: List[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


class TaskProcessEngine:
    """任务流程引擎(每个实例只运行一次)"""

    def __init__(self, definition: TaskProcessDefinition, components: Dict[str, Any]):
        """
        初始化任务流程引擎

        Args:
            definition: 已校验的任务定义
            components: 共享组件(logger 必填, notifier/config 可选)
        """
        self.definition = definition
        self.components = components
        self.logger = components['logger']
        self.notifier = components.get('notifier')
        self.config = components.get('config')

        self.run_id = datetime.now().strftime('%Y%m%d_%H%M%S')
        self._started = False

        # 执行统计
        self.processed_tasks: List[str] = []
        self.skipped_tasks: List[str] = []
        self.failed_tasks: List[str] = []

    @classmethod
    def initialize(cls, source: Union[str, Path, Mapping[str, Any]],
                   components: Dict[str, Any]) -> 'TaskProcessEngine':
        """
        加载并校验任务定义, 创建引擎

        Args:
            source: 定义字典、文本或文件路径
            components: 共享组件

        Returns:
            TaskProcessEngine

        Raises:
            DefinitionError: 定义结构不合法
        """
        definition = load_definition(source)
        logger = components['logger']
        logger.info(
            f"任务定义加载完成: {len(definition.tasks)} 个任务, "
            f"导入变量 {len(definition.import_variables)} 个, "
            f"导出变量 {len(definition.export_variables)} 个"
        )
        return cls(definition, components)

    def run(self, host_scope: MutableMapping[str, Any]) -> RunResult:
        """
        执行任务流程

        Args:
            host_scope: 宿主作用域, 导入时读取, 成功完成后写回导出变量

        Returns:
            RunResult

        Raises:
            EngineStateError: 引擎已经运行过
        """
        if self._started:
            raise EngineStateError("引擎实例只能运行一次, 请重新创建引擎")
        self._started = True

        tasks = self.definition.tasks
        result = RunResult(success=False)
        self.logger.info(f"开始执行任务流程 (run_id: {self.run_id}), 共 {len(tasks)} 个任务")

        with ExecutionContext(self.logger) as context:
            try:
                context.import_variables(host_scope, self.definition.import_variables)
                if self.definition.import_variables:
                    self.logger.info(f"已导入 {len(self.definition.import_variables)} 个变量")

                for idx, task in enumerate(tasks, 1):
                    self.logger.info(f"[{idx}/{len(tasks)}] 开始执行任务: {task.name}")
                    try:
                        with self.logger.indent():
                            state = task.execute(context, self.logger)
                    finally:
                        result.task_states[task.name] = task.state

                    if state is TaskState.PRE_SKIPPED:
                        self.skipped_tasks.append(task.name)
                        self.logger.info(f"[{idx}/{len(tasks)}] 任务跳过: {task.name}")
                    else:
                        self.processed_tasks.append(task.name)
                        self.logger.info(f"[{idx}/{len(tasks)}] 任务完成: {task.name}")

                result.exported = context.export_variables(host_scope, self.definition.export_variables)
                if result.exported:
                    self.logger.info(f"已导出 {len(result.exported)} 个变量: {', '.join(result.exported)}")
                result.success = True

            except TaskProcessError as e:
                result.error = e
                if isinstance(e, MissingContextVariableError):
                    result.exported = list(e.exported)
                failed = [task.name for task in tasks if task.error]
                self.failed_tasks.extend(failed)
                self.logger.error(f"任务流程中断: {e}")
                if e.__cause__ is not None:
                    self.logger.debug(f"原始异常: {e.__cause__!r}")

        for task in tasks:
            result.task_states.setdefault(task.name, task.state)

        self._log_summary(result)
        self._send_notification(result)
        return result

    def _log_summary(self, result: RunResult):
        """记录任务流程执行摘要"""
        total = len(self.definition.tasks)
        not_run = total - len(self.processed_tasks) - len(self.skipped_tasks) - len(self.failed_tasks)

        self.logger.info("=" * 60)
        self.logger.info("任务流程执行完成" if result.success else "任务流程执行失败")
        self.logger.info(f"总任务数: {total}")
        self.logger.info(f"已完成: {len(self.processed_tasks)}")
        self.logger.info(f"跳过: {len(self.skipped_tasks)}")
        self.logger.info(f"失败: {len(self.failed_tasks)}")
        self.logger.info(f"未执行: {not_run}")

        if not result.success:
            self.logger.error("任务状态:")
            for name, state in result.task_states.items():
                self.logger.error(f"  - {name}: {state.value}")
            self.logger.error(f"错误: {result.error}")

        self.logger.info("=" * 60)

    def _send_notification(self, result: RunResult):
        """
        发送运行结果通知

        Args:
            result: 运行结果
        """
        if not self.notifier:
            return

        notify_on_success = getattr(self.config, 'notify_on_success', False)
        notify_on_failure = getattr(self.config, 'notify_on_failure', True)
        title = self.definition.source or "任务流程"

        try:
            if result.success and notify_on_success:
                self.notifier.send_success(
                    title,
                    f"完成 {len(self.processed_tasks)} 个任务, 跳过 {len(self.skipped_tasks)} 个"
                )
            elif not result.success and notify_on_failure:
                self.notifier.send_failure(title, str(result.error))
        except Exception as e:
            self.logger.error(f"发送通知异常: {str(e)}")
