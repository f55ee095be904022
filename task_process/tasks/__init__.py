"""
任务模块 - 自动注册所有片段类型
"""

from task_process.tasks.factory import FragmentFactory
from task_process.tasks.fragments import CommandFragment, Fragment, MessageFragment, PythonFragment
from task_process.tasks.action import UNSET, ActionUnit
from task_process.tasks.condition import ConditionGroup, ConditionOutcome
from task_process.tasks.task import Task, TaskList, TaskState
from task_process.tasks.loader import TaskProcessDefinition, load_definition

# 注册内置片段类型
FragmentFactory.register('python', PythonFragment, 'code')
FragmentFactory.register('message', MessageFragment, 'text')
FragmentFactory.register('command', CommandFragment, 'command')

__all__ = [
    'FragmentFactory',
    'Fragment',
    'PythonFragment',
    'MessageFragment',
    'CommandFragment',
    'UNSET',
    'ActionUnit',
    'ConditionGroup',
    'ConditionOutcome',
    'Task',
    'TaskList',
    'TaskState',
    'TaskProcessDefinition',
    'load_definition',
]
