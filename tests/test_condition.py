import pytest

from task_process.tasks import ConditionGroup, ConditionOutcome

from conftest import make_unit


def group(*sources):
    return ConditionGroup("PreConditions", [make_unit(src, f"c{i}") for i, src in enumerate(sources, 1)])


def test_empty_group_passes(context):
    empty = ConditionGroup("PreConditions")
    assert empty.evaluate(context) is ConditionOutcome.PASSED
    assert empty.passed is True


def test_all_true_passes(context):
    conditions = group("True", "1 < 2")
    assert conditions.evaluate(context) is ConditionOutcome.PASSED
    assert conditions.passed is True
    assert all(unit.executed for unit in conditions.units)


def test_false_fails_and_short_circuits(context):
    conditions = group("True", "False", "True")
    assert conditions.evaluate(context) is ConditionOutcome.FAILED
    assert conditions.passed is False
    assert conditions.failed_unit.name == "c2"
    assert conditions.units[2].executed is False


@pytest.mark.parametrize("source", ["1", "0", "'true'", "None", "[]", "[True]"])
def test_non_boolean_result_is_structural_error(context, source):
    conditions = group(source)
    assert conditions.evaluate(context) is ConditionOutcome.STRUCTURAL_ERROR
    assert conditions.passed is None
    assert conditions.error


def test_exception_is_structural_error(context):
    conditions = group("undefined_name == 1", "True")
    assert conditions.evaluate(context) is ConditionOutcome.STRUCTURAL_ERROR
    assert conditions.passed is None
    assert conditions.failed_unit.name == "c1"
    assert conditions.units[1].executed is False


def test_order_decides_between_failed_and_structural_error(context):
    assert group("False", "1").evaluate(context) is ConditionOutcome.FAILED
    assert group("1", "False").evaluate(context) is ConditionOutcome.STRUCTURAL_ERROR


def test_conditions_read_context_variables(context):
    context.set("env", "prod")
    assert group("env == 'prod'").evaluate(context) is ConditionOutcome.PASSED
    assert group("env == 'dev'").evaluate(context) is ConditionOutcome.FAILED
