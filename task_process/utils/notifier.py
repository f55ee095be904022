"""
通知发送器模块

通过HTTP API发送任务流程运行结果通知。
"""

import json
import socket
from datetime import datetime
from typing import Optional

import requests


class Notifier:
    """通知发送器"""

    def __init__(
        self,
        api_url: str,
        logger=None,
        timeout: int = 10,
        verify_ssl: bool = False
    ):
        """
        初始化通知发送器

        Args:
            api_url: 通知API的URL
            logger: 日志记录器实例
            timeout: 请求超时时间（秒）
            verify_ssl: 是否验证SSL证书
        """
        self.api_url = api_url
        self.logger = logger
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    @classmethod
    def from_config(cls, config, logger=None) -> Optional['Notifier']:
        """
        根据配置创建通知发送器

        Args:
            config: Config 实例
            logger: 日志记录器实例

        Returns:
            未配置 notifier.api_url 时返回 None
        """
        if not config.notifier_api_url:
            return None
        return cls(
            api_url=config.notifier_api_url,
            logger=logger,
            timeout=config.notifier_timeout,
            verify_ssl=config.notifier_verify_ssl
        )

    def send_notification(
        self,
        title: str,
        body: str,
        description: Optional[str] = None,
        extra_data: Optional[dict] = None
    ) -> bool:
        """
        发送通知

        Args:
            title: 通知标题
            body: 通知正文
            description: 通知详情，默认与正文相同
            extra_data: 额外的数据字典

        Returns:
            发送是否成功
        """
        if self.logger:
            self.logger.info(f"发送通知: {title}")

        payload = {
            "title": title,
            "body": body,
            "description": description or body,
            "host": socket.gethostname(),
            "time": datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        }
        if extra_data:
            payload.update(extra_data)

        try:
            response = requests.post(
                self.api_url,
                headers={"Content-Type": "application/json; charset=utf-8"},
                data=json.dumps(payload, ensure_ascii=False).encode('utf-8'),
                verify=self.verify_ssl,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            self._log_error(f"通知发送超时（超过{self.timeout}秒）")
            return False
        except requests.exceptions.RequestException as e:
            self._log_error(f"通知发送连接错误: {str(e)}")
            return False

        if response.status_code == 200:
            if self.logger:
                self.logger.info("通知发送成功")
            return True

        if self.logger:
            self.logger.warning(
                f"通知发送失败: HTTP {response.status_code}, "
                f"响应: {response.text[:200]}"
            )
        return False

    def send_success(self, process_name: str, details: Optional[str] = None) -> bool:
        """
        发送成功通知（快捷方法）

        Args:
            process_name: 任务流程名称
            details: 详细信息

        Returns:
            发送是否成功
        """
        return self.send_notification(
            title=f"{process_name}成功",
            body=f"{process_name}执行成功",
            description=details,
            extra_data={"status": "success"}
        )

    def send_failure(self, process_name: str, error_msg: Optional[str] = None) -> bool:
        """
        发送失败通知（快捷方法）

        Args:
            process_name: 任务流程名称
            error_msg: 错误信息

        Returns:
            发送是否成功
        """
        return self.send_notification(
            title=f"{process_name}失败",
            body=f"{process_name}执行失败",
            description=error_msg,
            extra_data={"status": "failure"}
        )

    def _log_error(self, message: str):
        if self.logger:
            self.logger.error(message)
