"""
日志管理器模块

提供统一的日志记录功能，支持文件和控制台双输出，以及按层级缩进的消息。
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional


class Logger:
    """日志管理器"""

    INDENT = "  "

    def __init__(
        self,
        log_dir: Optional[str] = "logs",
        log_name: Optional[str] = None,
        level: str = "INFO"
    ):
        """
        初始化日志管理器

        Args:
            log_dir: 日志目录，为None时只输出到控制台
            log_name: 日志文件名，默认为 task_process_时间戳.log
            level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        self.log_file: Optional[Path] = None
        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            if log_name is None:
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                log_name = f"task_process_{timestamp}.log"
            elif not log_name.endswith('.log'):
                log_name = f"{log_name}.log"

            self.log_file = log_path / log_name

        self.level = level.upper()
        self._indent_level = 0

        self._setup_logger()

    def _setup_logger(self):
        """配置日志记录器"""
        self.logger = logging.getLogger(__name__)
        self.logger.setLevel(getattr(logging, self.level))

        # 避免重复添加handler
        if self.logger.handlers:
            for handler in list(self.logger.handlers):
                handler.close()
            self.logger.handlers.clear()

        formatter = logging.Formatter(
            fmt='[%(asctime)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if self.log_file is not None:
            file_handler = logging.FileHandler(
                self.log_file,
                encoding='utf-8',
                mode='a'
            )
            file_handler.setLevel(getattr(logging, self.level))
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, self.level))
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

    def _format(self, message: str) -> str:
        if not self._indent_level:
            return message
        prefix = self.INDENT * self._indent_level
        return "\n".join(prefix + line for line in str(message).splitlines() or [""])

    @contextmanager
    def indent(self) -> Iterator['Logger']:
        """
        在 with 块内增加一级缩进

        用法:
            with logger.indent():
                logger.info("子步骤")
        """
        self._indent_level += 1
        try:
            yield self
        finally:
            self._indent_level -= 1

    def log(self, message: str, level: str = "INFO"):
        """
        记录日志

        Args:
            message: 日志消息
            level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        log_method = getattr(self.logger, level.lower(), self.logger.info)
        log_method(self._format(message))

    def debug(self, message: str):
        """记录DEBUG级别日志"""
        self.logger.debug(self._format(message))

    def info(self, message: str):
        """记录INFO级别日志"""
        self.logger.info(self._format(message))

    def warning(self, message: str):
        """记录WARNING级别日志"""
        self.logger.warning(self._format(message))

    def error(self, message: str):
        """记录ERROR级别日志"""
        self.logger.error(self._format(message))

    def critical(self, message: str):
        """记录CRITICAL级别日志"""
        self.logger.critical(self._format(message))

    def exception(self, message: str):
        """
        记录异常信息，包含堆栈跟踪

        Args:
            message: 异常描述信息
        """
        self.logger.exception(self._format(message))

    def get_log_file(self) -> Optional[Path]:
        """
        获取日志文件路径

        Returns:
            日志文件的Path对象，仅控制台输出时为None
        """
        return self.log_file

    def set_level(self, level: str):
        """
        动态设置日志级别

        Args:
            level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        level = level.upper()
        self.level = level
        self.logger.setLevel(getattr(logging, level))
        for handler in self.logger.handlers:
            handler.setLevel(getattr(logging, level))
