import pytest
from jinja2 import UndefinedError

from task_process.core.errors import CommandFailedError, DefinitionError
from task_process.tasks import CommandFragment, FragmentFactory, MessageFragment, PythonFragment


def test_plain_string_is_python_fragment():
    fragment = FragmentFactory.create("1 + 2", "f")
    assert isinstance(fragment, PythonFragment)


def test_python_expression_returns_value(context):
    assert FragmentFactory.create("1 + 2", "f").evaluate(context) == 3


def test_python_block_returns_last_expression(context):
    fragment = FragmentFactory.create("x = 2\ny = x * 10\ny + 1", "f")
    assert fragment.evaluate(context) == 21
    assert context.get("x") == 2
    assert context.get("y") == 20


def test_python_block_without_trailing_expression_returns_none(context):
    assert FragmentFactory.create("x = 5", "f").evaluate(context) is None
    assert context.get("x") == 5


def test_python_source_is_dedented(context):
    fragment = FragmentFactory.create("    a = 1\n    a + 1\n", "f")
    assert fragment.evaluate(context) == 2


def test_python_functions_see_context_names(context):
    source = "base = 10\ndef add(n):\n    return base + n\nadd(5)"
    assert FragmentFactory.create(source, "f").evaluate(context) == 15


def test_python_names_do_not_leak_into_caller_globals(context):
    FragmentFactory.create("leak_marker = 1", "f").evaluate(context)
    assert "leak_marker" not in globals()
    assert context.get("leak_marker") == 1


def test_python_syntax_error_is_definition_error():
    with pytest.raises(DefinitionError) as excinfo:
        FragmentFactory.create("def (:", "Tasks[1].TaskSteps[1]")
    assert excinfo.value.section == "Tasks[1].TaskSteps[1]"


def test_python_runtime_error_propagates(context):
    fragment = FragmentFactory.create("1 / 0", "f")
    with pytest.raises(ZeroDivisionError):
        fragment.evaluate(context)


def test_message_renders_context_variables(context):
    context.set("name", "World")
    fragment = FragmentFactory.create({"type": "message", "text": "Hello {{ name }}"}, "m")
    assert isinstance(fragment, MessageFragment)
    assert fragment.evaluate(context) == "Hello World"


def test_message_with_undefined_variable_fails_on_evaluate(context):
    fragment = FragmentFactory.create({"type": "message", "text": "{{ missing }}"}, "m")
    with pytest.raises(UndefinedError):
        fragment.evaluate(context)


def test_message_syntax_error_is_definition_error():
    with pytest.raises(DefinitionError):
        FragmentFactory.create({"type": "message", "text": "{{ oops"}, "m")


def test_missing_source_field_is_definition_error():
    with pytest.raises(DefinitionError):
        FragmentFactory.create({"type": "message"}, "m")


def test_unknown_type_is_definition_error():
    with pytest.raises(DefinitionError):
        FragmentFactory.create({"type": "sql", "code": "select 1"}, "f")


def test_non_string_non_mapping_is_definition_error():
    with pytest.raises(DefinitionError):
        FragmentFactory.create(42, "f")


def test_list_types_includes_builtins():
    assert {"python", "message", "command"} <= set(FragmentFactory.list_types())


def test_command_returns_output_and_stores_result_variable(context):
    context.set("n", 5)
    fragment = FragmentFactory.create(
        {"type": "command", "command": "echo value-{{ n }}", "result_variable": "out"}, "c"
    )
    assert isinstance(fragment, CommandFragment)
    assert fragment.evaluate(context) == "value-5"
    assert context.get("out") == "value-5"


def test_command_nonzero_exit_raises(context):
    fragment = FragmentFactory.create({"type": "command", "command": "exit 3"}, "c")
    with pytest.raises(CommandFailedError) as excinfo:
        fragment.evaluate(context)
    assert excinfo.value.exit_code == 3


def test_command_exit_code_check_can_be_disabled(context):
    fragment = FragmentFactory.create(
        {"type": "command", "command": "echo partial; exit 1", "check_exit_code": "false"}, "c"
    )
    assert fragment.evaluate(context) == "partial"


def test_command_error_keyword_raises(context):
    fragment = FragmentFactory.create(
        {"type": "command", "command": "echo 'ERROR: disk full'", "error_keywords": "ERROR:,FATAL"}, "c"
    )
    with pytest.raises(CommandFailedError):
        fragment.evaluate(context)


def test_command_invalid_timeout_is_definition_error():
    with pytest.raises(DefinitionError):
        FragmentFactory.create({"type": "command", "command": "true", "timeout": "soon"}, "c")
