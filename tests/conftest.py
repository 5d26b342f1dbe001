import random
import logging

import pytest

import config
from quiz_engine import QuizEngine
from quiz_log import logger as action_logger, setup_logging
from quiz_shell import BaseConsole
from quiz_store import CsvStore, MemoryStore, SqlStore


class ScriptedConsole(BaseConsole):
    """Console fed from a list of lines; records everything written."""

    def __init__(self, lines):
        super().__init__()
        self.lines = list(lines)
        self.prompts = []
        self.output = []

    def _read(self, text):
        self.prompts.append(text)
        return self.lines.pop(0) if self.lines else None

    def _emit(self, text):
        self.output.append(text)

    @property
    def text(self):
        return "\n".join(self.output)


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setattr(config, "COLOR", False)


@pytest.fixture(params=["memory", "csv", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        yield MemoryStore()
    elif request.param == "csv":
        yield CsvStore(str(tmp_path / "quizzes.csv"))
    else:
        s = SqlStore(f"sqlite:///{tmp_path / 'quiz.db'}")
        yield s
        s.close()


@pytest.fixture
def engine(store):
    return QuizEngine(store, rng=random.Random(1234))


@pytest.fixture
def capitals(engine):
    return [
        engine.add("Capital of Italy", "Rome"),
        engine.add("Capital of France", "Paris"),
        engine.add("Capital of Spain", "Madrid"),
    ]


@pytest.fixture
def make_console():
    return ScriptedConsole


@pytest.fixture
def action_log(tmp_path):
    setup_logging(str(tmp_path / "logs"))
    yield tmp_path / "logs" / "quiz.log"
    for h in list(action_logger.handlers):
        action_logger.removeHandler(h)
        h.close()
    action_logger.setLevel(logging.NOTSET)
