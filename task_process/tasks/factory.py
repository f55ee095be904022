"""
片段工厂

根据片段类型创建片段实例
"""

from typing import Any, Dict, Type

from task_process.core.errors import DefinitionError
from task_process.tasks.fragments import Fragment


class FragmentFactory:
    """片段工厂,根据类型创建片段实例"""

    DEFAULT_TYPE = 'python'

    # 各类型片段的主字段, 纯文本定义(字符串或XML元素文本)会放入该字段
    _source_keys = {
        'python': 'code',
        'message': 'text',
        'command': 'command',
    }

    _fragment_registry: Dict[str, Type[Fragment]] = {}

    @classmethod
    def register(cls, fragment_type: str, fragment_class: Type[Fragment], source_key: str = 'code'):
        """
        注册片段类型

        Args:
            fragment_type: 片段类型标识
            fragment_class: 片段类
            source_key: 纯文本定义对应的配置字段
        """
        cls._fragment_registry[fragment_type] = fragment_class
        cls._source_keys.setdefault(fragment_type, source_key)

    @classmethod
    def source_key(cls, fragment_type: str) -> str:
        return cls._source_keys.get(fragment_type, 'code')

    @classmethod
    def create(cls, raw: Any, name: str) -> Fragment:
        """
        创建片段实例

        Args:
            raw: 片段定义, 字符串(Python代码)或带 type 字段的字典
            name: 片段名称

        Returns:
            片段实例

        Raises:
            DefinitionError: 未知的片段类型或定义格式错误
        """
        if isinstance(raw, str):
            config = {'type': cls.DEFAULT_TYPE, 'code': raw}
        elif isinstance(raw, dict):
            config = dict(raw)
        else:
            raise DefinitionError(f"片段定义必须是字符串或字典, 实际为: {type(raw).__name__}", name)

        fragment_type = config.get('type', cls.DEFAULT_TYPE)
        if fragment_type not in cls._fragment_registry:
            raise DefinitionError(f"未知的片段类型: {fragment_type}", name)

        fragment_class = cls._fragment_registry[fragment_type]
        return fragment_class(name, config)

    @classmethod
    def list_types(cls) -> list:
        """
        列出所有已注册的片段类型

        Returns:
            片段类型列表
        """
        return list(cls._fragment_registry.keys())
