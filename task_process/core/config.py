"""
配置管理模块

从YAML文件加载配置信息
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional


class Config:
    """配置管理器"""

    def __init__(self, config_path: Optional[str] = "config.yaml"):
        """
        初始化配置管理器

        Args:
            config_path: 配置文件路径，为None时使用空配置
        """
        self.config_path = Path(config_path) if config_path is not None else None
        self._config: Dict[str, Any] = {}
        if self.config_path is not None:
            self.load()

    def load(self) -> None:
        """加载配置文件"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"配置文件不存在: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"配置文件格式错误: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"配置文件顶层必须是字典: {self.config_path}")
        self._config = data

    def get(self, key: str, default: Any = None) -> Any:
        """
        获取配置值（支持点号分隔的嵌套键）

        Args:
            key: 配置键，支持点号分隔（如 "logger.level"）
            default: 默认值

        Returns:
            配置值
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        获取配置节

        Args:
            section: 配置节名称

        Returns:
            配置节字典
        """
        return self._config.get(section) or {}

    def get_all(self) -> Dict[str, Any]:
        """
        获取所有配置

        Returns:
            完整配置字典
        """
        return self._config.copy()

    @property
    def definition(self) -> Optional[str]:
        """获取任务定义文件路径（相对路径基于配置文件所在目录）"""
        path = self.get('definition')
        if not path:
            return None
        if self.config_path is not None and not Path(path).is_absolute():
            return str(self.config_path.parent / path)
        return path

    @property
    def variables(self) -> Dict[str, Any]:
        """获取宿主作用域的初始变量"""
        return dict(self.get_section('variables'))

    @property
    def notifier_api_url(self) -> str:
        """获取通知API URL"""
        return self.get('notifier.api_url', '')

    @property
    def notifier_timeout(self) -> int:
        """获取通知超时时间"""
        return self.get('notifier.timeout', 10)

    @property
    def notifier_verify_ssl(self) -> bool:
        """获取是否验证SSL"""
        return self.get('notifier.verify_ssl', False)

    @property
    def notify_on_success(self) -> bool:
        """获取运行成功时是否发送通知"""
        return self.get('notifier.notify_on_success', False)

    @property
    def notify_on_failure(self) -> bool:
        """获取运行失败时是否发送通知"""
        return self.get('notifier.notify_on_failure', True)

    @property
    def log_dir(self) -> str:
        """获取日志目录"""
        return self.get('logger.log_dir', 'logs')

    @property
    def log_name(self) -> Optional[str]:
        """获取日志文件名"""
        return self.get('logger.log_name')

    @property
    def log_level(self) -> str:
        """获取日志级别"""
        return self.get('logger.level', 'INFO')
