import pytest

from task_process.core.errors import (
    ActionFailedError,
    ConditionStructureError,
    PostConditionFailedError,
)
from task_process.tasks import ConditionGroup, Task, TaskList, TaskState

from conftest import make_unit


def build_task(intro="'intro'", pre=(), steps=("done = True",), post=(), exit=None, name="build"):
    return Task(
        name=name,
        intro=make_unit(intro, "intro"),
        steps=[make_unit(src, f"step{i}") for i, src in enumerate(steps, 1)],
        pre_conditions=ConditionGroup("PreConditions", [make_unit(s, f"pre{i}") for i, s in enumerate(pre, 1)]),
        post_conditions=ConditionGroup("PostConditions", [make_unit(s, f"post{i}") for i, s in enumerate(post, 1)]),
        exit=make_unit(exit, "exit") if exit else None,
    )


def test_full_lifecycle_reaches_done(context, logger):
    task = build_task(
        pre=("True",),
        steps=("a = 1", "b = a + 1"),
        post=("b == 2",),
        exit="'finished'",
    )
    assert task.execute(context, logger) is TaskState.DONE
    assert task.state is TaskState.DONE
    assert task.processed is True
    assert task.error is False
    assert context.get("b") == 2
    assert "intro" in logger.messages("INFO")
    assert "finished" in logger.messages("INFO")


def test_defaults_to_empty_condition_groups(context, logger):
    task = Task("t", make_unit("None"), [make_unit("x = 1")])
    assert task.execute(context, logger) is TaskState.DONE


def test_step_output_is_logged(context, logger):
    task = build_task(steps=("'compiled 3 files'",))
    task.execute(context, logger)
    assert "compiled 3 files" in logger.messages("INFO")


def test_pre_condition_false_skips_task(context, logger):
    task = build_task(pre=("False",), steps=("touched = True",), exit="'bye'")
    assert task.execute(context, logger) is TaskState.PRE_SKIPPED
    assert task.state is TaskState.PRE_SKIPPED
    assert task.processed is False
    assert task.error is False
    assert task.steps[0].executed is False
    assert task.exit.executed is False
    assert not context.has("touched")
    assert any("跳过" in msg for msg in logger.messages("INFO"))


def test_pre_condition_structural_error_is_fatal(context, logger):
    task = build_task(pre=("'yes'",))
    with pytest.raises(ConditionStructureError):
        task.execute(context, logger)
    assert task.state is TaskState.ERROR
    assert task.error is True
    assert task.steps[0].executed is False


def test_intro_failure_aborts_before_conditions(context, logger):
    task = build_task(intro="1 / 0", pre=("True",))
    with pytest.raises(ActionFailedError) as excinfo:
        task.execute(context, logger)
    assert excinfo.value.phase == "IntroMessage"
    assert task.pre_conditions.units[0].executed is False
    assert task.error is True
    assert task.failure is excinfo.value


def test_step_failure_stops_remaining_steps(context, logger):
    task = build_task(steps=("a = 1", "raise RuntimeError('compiler crashed')", "c = 3"))
    with pytest.raises(ActionFailedError) as excinfo:
        task.execute(context, logger)
    assert excinfo.value.phase == "TaskSteps"
    assert excinfo.value.unit_name == "step2"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert task.steps[2].executed is False
    assert not context.has("c")
    assert task.state is TaskState.ERROR
    assert task.processed is False


def test_post_condition_false_is_fatal(context, logger):
    task = build_task(post=("False",), exit="'bye'")
    with pytest.raises(PostConditionFailedError):
        task.execute(context, logger)
    assert task.state is TaskState.ERROR
    assert task.exit.executed is False
    assert task.processed is False


def test_post_condition_structural_error_is_fatal(context, logger):
    task = build_task(post=("42",))
    with pytest.raises(ConditionStructureError):
        task.execute(context, logger)
    assert task.error is True


def test_exit_failure_is_fatal(context, logger):
    task = build_task(exit="1 / 0")
    with pytest.raises(ActionFailedError) as excinfo:
        task.execute(context, logger)
    assert excinfo.value.phase == "ExitMessage"
    assert task.processed is False


def test_task_list_is_ordered_and_read_only():
    first, second = build_task(name="first"), build_task(name="second")
    tasks = TaskList([first, second])
    assert len(tasks) == 2
    assert tasks[0] is first
    assert list(tasks) == [first, second]
    assert tasks.names == ["first", "second"]
    assert not hasattr(tasks, "append")
