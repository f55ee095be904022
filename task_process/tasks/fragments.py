"""
可执行片段

片段是任务定义中的一段可执行逻辑, 加载时编译, 运行时在执行上下文中求值。
内置三种类型:
- python: Python 表达式或语句块
- message: Jinja2 消息模板
- command: 本地 shell 命令
"""

import ast
import subprocess
import textwrap
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from task_process.core.errors import CommandFailedError, DefinitionError

_jinja_env = Environment(undefined=StrictUndefined, keep_trailing_newline=False)


class Fragment(ABC):
    """片段基类"""

    kind = ""

    def __init__(self, name: str, config: Dict[str, Any]):
        """
        初始化片段

        Args:
            name: 片段名称(用于日志和错误信息)
            config: 片段配置

        Raises:
            DefinitionError: 片段无法编译
        """
        self.name = name
        self.config = config

    @abstractmethod
    def evaluate(self, context) -> Any:
        """
        在执行上下文中求值

        Args:
            context: ExecutionContext

        Returns:
            片段的结果值

        Raises:
            Exception: 片段执行失败
        """

    def _source(self, key: str) -> str:
        source = self.config.get(key)
        if not isinstance(source, str) or not source.strip():
            raise DefinitionError(f"{self.kind} 片段缺少 {key}", self.name)
        return textwrap.dedent(source).strip()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


class PythonFragment(Fragment):
    """Python 片段: 单个表达式返回其值, 语句块返回最后一个表达式语句的值"""

    kind = "python"

    def __init__(self, name: str, config: Dict[str, Any]):
        super().__init__(name, config)
        self.source = self._source('code')
        self._expression = None
        self._body = None
        self._tail = None

        try:
            self._expression = compile(self.source, self.name, 'eval')
            return
        except SyntaxError:
            pass

        try:
            module = ast.parse(self.source, filename=self.name, mode='exec')
            tail = None
            if module.body and isinstance(module.body[-1], ast.Expr):
                tail = ast.Expression(body=module.body.pop().value)
            self._body = compile(module, self.name, 'exec')
            if tail is not None:
                self._tail = compile(tail, self.name, 'eval')
        except (SyntaxError, ValueError) as e:
            raise DefinitionError(f"Python 代码无法编译: {e}", self.name)

    def evaluate(self, context) -> Any:
        namespace = context.namespace
        if self._expression is not None:
            return eval(self._expression, namespace)

        exec(self._body, namespace)
        if self._tail is not None:
            return eval(self._tail, namespace)
        return None


class MessageFragment(Fragment):
    """消息片段: 用上下文变量渲染 Jinja2 模板"""

    kind = "message"

    def __init__(self, name: str, config: Dict[str, Any]):
        super().__init__(name, config)
        self.source = self._source('text')
        try:
            self._template = _jinja_env.from_string(self.source)
        except TemplateSyntaxError as e:
            raise DefinitionError(f"消息模板语法错误: {e}", self.name)

    def evaluate(self, context) -> str:
        return self._template.render(**context.variables)


class CommandFragment(Fragment):
    """命令片段: 渲染并执行本地 shell 命令"""

    kind = "command"

    def __init__(self, name: str, config: Dict[str, Any]):
        super().__init__(name, config)
        self.source = self._source('command')
        try:
            self._template = _jinja_env.from_string(self.source)
        except TemplateSyntaxError as e:
            raise DefinitionError(f"命令模板语法错误: {e}", self.name)

        try:
            timeout = config.get('timeout')
            self.timeout: Optional[int] = int(timeout) if timeout not in (None, '') else None
        except (TypeError, ValueError):
            raise DefinitionError(f"无效的 timeout: {config.get('timeout')}", self.name)

        self.shell: Optional[str] = config.get('shell')
        self.check_exit_code = _as_bool(config.get('check_exit_code', True))
        self.error_keywords: List[str] = _as_list(config.get('error_keywords'))
        self.result_variable: Optional[str] = config.get('result_variable')

    def evaluate(self, context) -> str:
        command = self._template.render(**context.variables).strip()
        if context.logger:
            context.logger.info(f"执行本地命令: {command}")

        try:
            result = subprocess.run(
                command,
                shell=True,
                executable=self.shell,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            raise CommandFailedError(f"命令执行超时 ({self.timeout}秒): {command}")

        output = (result.stdout or '') + (result.stderr or '')

        if self.check_exit_code and result.returncode != 0:
            raise CommandFailedError(
                f"命令退出码异常: {result.returncode}",
                exit_code=result.returncode,
                output=output
            )

        for keyword in self.error_keywords:
            if keyword in output:
                raise CommandFailedError(
                    f"输出中发现错误关键词: {keyword}",
                    exit_code=result.returncode,
                    output=output
                )

        output = output.strip()
        if self.result_variable:
            context.set(self.result_variable, output)
        return output


def _as_bool(value: Any) -> bool:
    # XML 属性都是字符串
    if isinstance(value, str):
        return value.strip().lower() not in ('false', '0', 'no', 'off', '')
    return bool(value)


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(',') if item.strip()]
    return [str(item) for item in value]
