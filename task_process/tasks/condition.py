"""
条件组

一组必须全部返回布尔值 True 的动作单元
"""

from enum import Enum
from typing import List, Optional, Sequence

from task_process.tasks.action import ActionUnit


class ConditionOutcome(Enum):
    """条件组求值结果"""

    PASSED = "passed"
    FAILED = "failed"
    STRUCTURAL_ERROR = "structural_error"


class ConditionGroup:
    """条件组"""

    def __init__(self, name: str, units: Sequence[ActionUnit] = ()):
        """
        初始化条件组

        Args:
            name: 条件组名称(如 "PreConditions")
            units: 条件动作单元列表, 为空表示无条件通过
        """
        self.name = name
        self.units: List[ActionUnit] = list(units)
        self.passed: Optional[bool] = None
        self.error: Optional[str] = None
        # 导致失败或结构错误的单元
        self.failed_unit: Optional[ActionUnit] = None

    def __len__(self) -> int:
        return len(self.units)

    def evaluate(self, context) -> ConditionOutcome:
        """
        依次求值每个条件, 遇到 False 或结构错误立即停止

        Args:
            context: ExecutionContext

        Returns:
            ConditionOutcome
        """
        for unit in self.units:
            result = unit.evaluate(context)

            if unit.failed:
                self.failed_unit = unit
                self.error = f"条件 {unit.name} 执行异常: {unit.error_detail!r}"
                return ConditionOutcome.STRUCTURAL_ERROR

            # 1 和 "true" 不是布尔值
            if not isinstance(result, bool):
                self.failed_unit = unit
                self.error = f"条件 {unit.name} 返回了非布尔值: {result!r} ({type(result).__name__})"
                return ConditionOutcome.STRUCTURAL_ERROR

            if result is False:
                self.failed_unit = unit
                self.passed = False
                return ConditionOutcome.FAILED

        self.passed = True
        return ConditionOutcome.PASSED
