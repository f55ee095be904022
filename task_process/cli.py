"""
Task Process 命令行接口

提供 task-process-run 命令用于执行任务定义文件
"""

import sys
import argparse
from pathlib import Path
from typing import Any, Dict, List

import yaml

from task_process import Config, Logger, Notifier, TaskProcessEngine
from task_process.core.errors import DefinitionError
from task_process.tasks.loader import dump_definition


def parse_variables(items: List[str]) -> Dict[str, Any]:
    """
    解析 --var NAME=VALUE 参数, 值按 YAML 标量解析(数字、布尔等)

    Args:
        items: NAME=VALUE 字符串列表

    Returns:
        变量字典

    Raises:
        ValueError: 格式错误
    """
    variables = {}
    for item in items or []:
        name, sep, value = item.partition('=')
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"变量格式错误(应为 NAME=VALUE): {item}")
        try:
            variables[name] = yaml.safe_load(value) if value else ''
        except yaml.YAMLError:
            variables[name] = value
    return variables


def main(argv=None):
    """
    task-process-run 命令行入口函数

    使用方法:
        task-process-run --config config.yaml
        task-process-run --definition build.yaml --var BuildNumber=42
        task-process-run --definition build.xml --validate-only
    """
    parser = argparse.ArgumentParser(
        description='Task Process 引擎 - 执行声明式任务定义',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  task-process-run --config config.yaml                    使用配置文件中的定义
  task-process-run --definition build.yaml                 直接执行任务定义
  task-process-run --definition build.yaml --var Env=prod  设置宿主变量
  task-process-run --definition build.xml --validate-only  只校验定义
        """
    )

    parser.add_argument(
        '--config',
        default=None,
        help='配置文件路径 (默认: 当前目录存在 config.yaml 时使用)'
    )
    parser.add_argument(
        '--definition',
        help='任务定义文件路径 (覆盖配置文件中的 definition)'
    )
    parser.add_argument(
        '--var',
        action='append',
        default=[],
        metavar='NAME=VALUE',
        help='宿主作用域变量, 可重复指定'
    )
    parser.add_argument(
        '--validate-only',
        action='store_true',
        help='只加载并校验任务定义, 不执行'
    )
    parser.add_argument(
        '--export-file',
        metavar='FILE',
        help='运行成功后将导出变量写入YAML文件'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='日志级别 (默认: 配置文件中的 logger.level 或 INFO)'
    )

    args = parser.parse_args(argv)

    config_path = args.config
    if config_path is None and Path('config.yaml').exists():
        config_path = 'config.yaml'
    if config_path is not None and not Path(config_path).exists():
        print(f"错误: 配置文件不存在: {config_path}")
        print("请创建配置文件或使用 --config 参数指定正确的配置文件路径")
        return 1

    # 初始化配置和日志
    try:
        config = Config(config_path)
        logger = Logger(
            log_dir=config.log_dir,
            log_name=config.log_name,
            level=args.log_level or config.log_level
        )
    except Exception as e:
        print(f"初始化配置或日志失败: {str(e)}")
        return 1

    definition = args.definition or config.definition
    if not definition:
        logger.error("未指定任务定义, 请使用 --definition 或在配置文件中设置 definition")
        return 1

    try:
        host_scope = config.variables
        host_scope.update(parse_variables(args.var))
    except ValueError as e:
        logger.error(str(e))
        return 1

    components = {
        'config': config,
        'logger': logger,
        'notifier': Notifier.from_config(config, logger),
    }

    logger.info(f"加载任务定义: {definition}")
    try:
        engine = TaskProcessEngine.initialize(definition, components)
    except DefinitionError as e:
        logger.error(f"任务定义校验失败: {e}")
        return 1

    if args.validate_only:
        logger.info("任务定义校验通过")
        print(dump_definition(engine.definition))
        return 0

    try:
        result = engine.run(host_scope)
    except KeyboardInterrupt:
        logger.warning("用户中断执行")
        return 130

    if result.success and args.export_file:
        exported = {name: host_scope[name] for name in result.exported}
        try:
            with open(args.export_file, 'w', encoding='utf-8') as f:
                yaml.safe_dump(exported, f, allow_unicode=True, default_flow_style=False)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"写入导出变量文件失败: {e}")
            return 1
        logger.info(f"导出变量已写入: {args.export_file}")

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
