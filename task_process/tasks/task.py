"""
任务

一个完整的生命周期单元: 介绍消息 -> 前置条件 -> 任务步骤 -> 后置条件 -> 退出消息
"""

from enum import Enum
from typing import Iterator, List, Optional, Sequence

from task_process.core.errors import (
    ActionFailedError,
    ConditionStructureError,
    PostConditionFailedError,
    TaskProcessError,
)
from task_process.tasks.action import ActionUnit
from task_process.tasks.condition import ConditionGroup, ConditionOutcome


class TaskState(Enum):
    """任务状态"""

    PENDING = "pending"
    INTRO_RAN = "intro_ran"
    PRE_SKIPPED = "pre_skipped"
    PRE_FAILED = "pre_failed"
    PRE_PASSED = "pre_passed"
    STEPS_RAN = "steps_ran"
    POST_FAILED = "post_failed"
    POST_PASSED = "post_passed"
    DONE = "done"
    ERROR = "error"


class Task:
    """任务"""

    def __init__(
        self,
        name: str,
        intro: ActionUnit,
        steps: Sequence[ActionUnit],
        pre_conditions: Optional[ConditionGroup] = None,
        post_conditions: Optional[ConditionGroup] = None,
        exit: Optional[ActionUnit] = None
    ):
        """
        初始化任务

        Args:
            name: 任务名称
            intro: 介绍消息
            steps: 任务步骤(至少一个, 由加载器保证)
            pre_conditions: 前置条件组
            post_conditions: 后置条件组
            exit: 退出消息
        """
        self.name = name
        self.intro = intro
        self.steps: List[ActionUnit] = list(steps)
        self.pre_conditions = pre_conditions or ConditionGroup("PreConditions")
        self.post_conditions = post_conditions or ConditionGroup("PostConditions")
        self.exit = exit

        self.state = TaskState.PENDING
        self.processed = False
        self.error = False
        self.failure: Optional[TaskProcessError] = None

    def execute(self, context, logger) -> TaskState:
        """
        执行任务的完整生命周期

        Args:
            context: ExecutionContext
            logger: 日志记录器

        Returns:
            TaskState.DONE 或 TaskState.PRE_SKIPPED

        Raises:
            TaskProcessError: 任何致命错误, 此时任务状态为 ERROR
        """
        try:
            return self._execute(context, logger)
        except TaskProcessError as e:
            self.state = TaskState.ERROR
            self.error = True
            self.failure = e
            raise

    def _execute(self, context, logger) -> TaskState:
        self._run_action(self.intro, "IntroMessage", context, logger)
        self.state = TaskState.INTRO_RAN

        outcome = self.pre_conditions.evaluate(context)
        if outcome is ConditionOutcome.FAILED:
            self.state = TaskState.PRE_FAILED
            logger.info(f"前置条件未满足 ({self.pre_conditions.failed_unit.name}), 跳过任务: {self.name}")
            self.state = TaskState.PRE_SKIPPED
            return self.state
        if outcome is ConditionOutcome.STRUCTURAL_ERROR:
            raise ConditionStructureError(self.name, self.pre_conditions.name, self.pre_conditions.error)
        if self.pre_conditions.units:
            logger.info(f"前置条件通过 ({len(self.pre_conditions)} 项)")
        self.state = TaskState.PRE_PASSED

        for idx, step in enumerate(self.steps, 1):
            logger.debug(f"执行步骤 {idx}/{len(self.steps)}: {step.name}")
            self._run_action(step, "TaskSteps", context, logger)
        self.state = TaskState.STEPS_RAN

        outcome = self.post_conditions.evaluate(context)
        if outcome is ConditionOutcome.FAILED:
            self.state = TaskState.POST_FAILED
            logger.error(f"后置条件未满足: {self.post_conditions.failed_unit.name}")
            raise PostConditionFailedError(self.name, self.post_conditions.failed_unit.name)
        if outcome is ConditionOutcome.STRUCTURAL_ERROR:
            raise ConditionStructureError(self.name, self.post_conditions.name, self.post_conditions.error)
        if self.post_conditions.units:
            logger.info(f"后置条件通过 ({len(self.post_conditions)} 项)")
        self.state = TaskState.POST_PASSED

        if self.exit is not None:
            self._run_action(self.exit, "ExitMessage", context, logger)

        self.state = TaskState.DONE
        self.processed = True
        return self.state

    def _run_action(self, unit: ActionUnit, phase: str, context, logger):
        result = unit.evaluate(context)
        if unit.failed:
            raise ActionFailedError(self.name, phase, unit.name, unit.error_detail) from unit.error_detail
        if result is not None:
            logger.info(str(result))

    def __repr__(self) -> str:
        return f"<Task {self.name} state={self.state.value}>"


class TaskList:
    """按文档顺序排列的只读任务序列"""

    def __init__(self, tasks: Sequence[Task]):
        self._tasks = tuple(tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __getitem__(self, index) -> Task:
        return self._tasks[index]

    @property
    def names(self) -> List[str]:
        return [task.name for task in self._tasks]
