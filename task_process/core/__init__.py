"""
核心引擎模块
"""

from task_process.core.config import Config
from task_process.core.logger import Logger
from task_process.core.context import ExecutionContext, VariablePair
from task_process.core.engine import RunResult, TaskProcessEngine

__all__ = [
    'Config',
    'Logger',
    'ExecutionContext',
    'VariablePair',
    'RunResult',
    'TaskProcessEngine',
]
