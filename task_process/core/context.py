"""
执行上下文

每次运行创建一个独立的变量环境, 所有动作单元都在其中执行。
宿主作用域与执行上下文之间只能通过变量对(VariablePair)传递数据。
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, MutableMapping, Optional

from task_process.core.errors import (
    EngineStateError,
    MissingContextVariableError,
    MissingHostVariableError,
)


@dataclass(frozen=True)
class VariablePair:
    """宿主变量名与上下文变量名的映射"""

    host_name: str
    context_name: str


class ExecutionContext:
    """隔离的执行上下文"""

    def __init__(self, logger=None):
        """
        初始化执行上下文

        Args:
            logger: 日志记录器(可选)
        """
        self.logger = logger
        self._namespace: Optional[Dict[str, Any]] = {}

    def __enter__(self) -> 'ExecutionContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self._namespace is None

    @property
    def namespace(self) -> Dict[str, Any]:
        """
        片段执行时使用的命名空间(作为 globals 传给 exec/eval)

        Returns:
            命名空间字典
        """
        if self._namespace is None:
            raise EngineStateError("执行上下文已关闭")
        return self._namespace

    @property
    def variables(self) -> Dict[str, Any]:
        """
        获取上下文中的用户变量(不含 __builtins__ 等双下划线名称)

        Returns:
            变量字典的副本
        """
        return {
            key: value for key, value in self.namespace.items()
            if not (key.startswith('__') and key.endswith('__'))
        }

    def get(self, name: str, default: Any = None) -> Any:
        return self.namespace.get(name, default)

    def set(self, name: str, value: Any):
        self.namespace[name] = value

    def has(self, name: str) -> bool:
        return name in self.namespace

    def import_variables(self, host_scope: MutableMapping[str, Any], pairs: Iterable[VariablePair]):
        """
        从宿主作用域导入变量

        Args:
            host_scope: 宿主作用域
            pairs: 导入变量对

        Raises:
            MissingHostVariableError: 宿主作用域中不存在指定变量
        """
        for pair in pairs:
            if pair.host_name not in host_scope:
                raise MissingHostVariableError(pair.host_name)
            self.set(pair.context_name, host_scope[pair.host_name])
            if self.logger:
                self.logger.debug(f"导入变量: {pair.host_name} -> {pair.context_name}")

    def export_variables(self, host_scope: MutableMapping[str, Any], pairs: Iterable[VariablePair]) -> List[str]:
        """
        将上下文变量导出到宿主作用域

        先写回所有存在的变量, 最后再报告缺失的变量, 已写回的值不会回滚。

        Args:
            host_scope: 宿主作用域
            pairs: 导出变量对

        Returns:
            已写入的宿主变量名列表(按写入顺序)

        Raises:
            MissingContextVariableError: 至少一个上下文变量不存在
        """
        exported = []
        missing = []
        for pair in pairs:
            if not self.has(pair.context_name):
                missing.append(pair.context_name)
                if self.logger:
                    self.logger.error(f"导出变量失败, 上下文中不存在: {pair.context_name}")
                continue
            host_scope[pair.host_name] = self.get(pair.context_name)
            exported.append(pair.host_name)
            if self.logger:
                self.logger.debug(f"导出变量: {pair.context_name} -> {pair.host_name}")

        if missing:
            raise MissingContextVariableError(missing, exported)
        return exported

    def close(self):
        """销毁上下文"""
        if self._namespace is not None:
            self._namespace.clear()
            self._namespace = None
