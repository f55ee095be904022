from contextlib import contextmanager

import pytest

from task_process.core.context import ExecutionContext
from task_process.tasks import ActionUnit, FragmentFactory


class RecordingLogger:
    """Collects log calls in memory; mirrors the Logger interface the engine uses."""

    def __init__(self):
        self.records = []
        self.depth = 0

    def _add(self, level, message):
        self.records.append((level, "  " * self.depth + str(message)))

    def debug(self, message):
        self._add("DEBUG", message)

    def info(self, message):
        self._add("INFO", message)

    def warning(self, message):
        self._add("WARNING", message)

    def error(self, message):
        self._add("ERROR", message)

    def exception(self, message):
        self._add("ERROR", message)

    @contextmanager
    def indent(self):
        self.depth += 1
        try:
            yield self
        finally:
            self.depth -= 1

    def messages(self, level=None):
        return [msg for lvl, msg in self.records if level is None or lvl == level]

    def text(self):
        return "\n".join(self.messages())


def make_unit(raw, name="unit"):
    return ActionUnit(name, FragmentFactory.create(raw, name))


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def context(logger):
    ctx = ExecutionContext(logger)
    yield ctx
    ctx.close()
