"""
工具模块
"""

from task_process.utils.notifier import Notifier

__all__ = [
    'Notifier',
]
