"""
异常定义

任务流程引擎的所有致命错误都继承自 TaskProcessError
"""

from typing import Any, List, Optional


class TaskProcessError(Exception):
    """任务流程错误基类"""


class DefinitionError(TaskProcessError):
    """任务定义结构错误(加载阶段检测, 不会执行任何任务)"""

    def __init__(self, message: str, section: Optional[str] = None):
        self.section = section
        if section:
            message = f"{section}: {message}"
        super().__init__(message)


class EngineStateError(TaskProcessError):
    """引擎状态错误(例如同一个引擎实例被重复运行)"""


class VariableMarshallingError(TaskProcessError):
    """变量导入/导出错误"""


class MissingHostVariableError(VariableMarshallingError):
    """导入时宿主作用域中不存在指定变量"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"宿主作用域中不存在变量: {name}")


class MissingContextVariableError(VariableMarshallingError):
    """导出时执行上下文中不存在指定变量"""

    def __init__(self, names: List[str], exported: Optional[List[str]] = None):
        self.names = list(names)
        # 缺失变量之外已经写回宿主的变量名
        self.exported = list(exported or [])
        super().__init__(f"执行上下文中不存在变量: {', '.join(self.names)}")


class ActionFailedError(TaskProcessError):
    """介绍消息、任务步骤或退出消息执行失败"""

    def __init__(self, task_name: str, phase: str, unit_name: str, detail: Any):
        self.task_name = task_name
        self.phase = phase
        self.unit_name = unit_name
        self.detail = detail
        super().__init__(f"任务 {task_name} 的 {phase} 执行失败 ({unit_name}): {detail}")


class ConditionStructureError(TaskProcessError):
    """条件组结构错误: 条件执行异常或返回了非布尔值"""

    def __init__(self, task_name: str, group_name: str, detail: str):
        self.task_name = task_name
        self.group_name = group_name
        self.detail = detail
        super().__init__(f"任务 {task_name} 的 {group_name} 结构错误: {detail}")


class PostConditionFailedError(TaskProcessError):
    """后置条件返回 False"""

    def __init__(self, task_name: str, unit_name: str):
        self.task_name = task_name
        self.unit_name = unit_name
        super().__init__(f"任务 {task_name} 的后置条件未满足: {unit_name}")


class CommandFailedError(TaskProcessError):
    """命令片段执行失败"""

    def __init__(self, message: str, exit_code: Optional[int] = None, output: str = ""):
        self.exit_code = exit_code
        self.output = output
        super().__init__(message)
