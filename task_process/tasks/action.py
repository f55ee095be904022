"""
动作单元

一个延迟执行的片段及其执行结果
"""

from typing import Any, Optional

from task_process.tasks.fragments import Fragment


class _Unset:
    """结果未设置的占位符"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()


class ActionUnit:
    """动作单元"""

    def __init__(self, name: str, fragment: Fragment):
        """
        初始化动作单元

        Args:
            name: 单元名称(如 "Tasks[1].TaskSteps[2]")
            fragment: 已编译的片段
        """
        self.name = name
        self.fragment = fragment

        self.executed = False
        self.result: Any = UNSET
        self.failed = False
        self.error_detail: Optional[BaseException] = None

    @property
    def has_result(self) -> bool:
        return self.result is not UNSET

    def evaluate(self, context) -> Any:
        """
        在执行上下文中执行片段

        同一单元只执行一次, 再次调用直接返回已记录的结果。
        片段抛出的异常不会向外传播, 而是记录在 failed/error_detail 中。

        Args:
            context: ExecutionContext

        Returns:
            片段结果, 失败时为 UNSET
        """
        if self.executed:
            return self.result

        self.executed = True
        try:
            self.result = self.fragment.evaluate(context)
        # sys.exit() 也算片段失败, KeyboardInterrupt 继续向外传播
        except (Exception, SystemExit) as e:
            self.failed = True
            self.error_detail = e
        return self.result

    def __repr__(self) -> str:
        return (
            f"<ActionUnit {self.name} executed={self.executed} "
            f"failed={self.failed} result={self.result!r}>"
        )
