#!/usr/bin/env python3
"""
基础任务流程执行示例

运行方法:
    python examples/run_basic.py
"""

import sys
import os

# 添加父目录到路径以便导入 task_process
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from task_process import Config, Logger, TaskProcessEngine


def main():
    """主函数"""
    config_file = os.path.join(os.path.dirname(__file__), "config.yaml")
    config = Config(config_file)

    logger = Logger(
        log_dir=config.log_dir,
        level=config.log_level
    )

    logger.info("=" * 60)
    logger.info("Task Process - 基础示例")
    logger.info("=" * 60)

    components = {
        'logger': logger,
        'config': config
    }

    engine = TaskProcessEngine.initialize(config.definition, components)

    # 宿主作用域: 导入变量从这里读取, 导出变量写回这里
    host_scope = config.variables
    result = engine.run(host_scope)

    logger.info("=" * 60)
    if result.success:
        logger.info("任务流程执行成功!")
        logger.info(f"BuildSummary = {host_scope.get('BuildSummary')}")
    else:
        logger.error(f"任务流程执行失败: {result.error}")
    logger.info("=" * 60)

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
