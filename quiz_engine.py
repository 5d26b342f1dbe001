"""
Quiz engine: the semantics of every quiz command, independent of any terminal.

The engine only talks to a QuizStore and, for play, to an `ask` callable that
returns one line of user input. Failures are raised as QuizError subclasses
and rendered by the shell.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from quiz_errors import MissingParameter, NotANumber, NotFound, ValidationError
from quiz_store import QuizRecord


def validate_id(raw) -> int:
    """Parse the raw <id> command parameter into an int."""
    if raw is None:
        raise MissingParameter("id")
    try:
        return int(str(raw).strip())
    except ValueError:
        raise NotANumber(raw) from None


def is_correct(submitted: str, expected: str) -> bool:
    # only the submission is trimmed
    return submitted.strip().lower() == expected.lower()


def _check_text(question: str, answer: str):
    errors = []
    if not question or not question.strip():
        errors.append("The question must not be empty.")
    if not answer or not answer.strip():
        errors.append("The answer must not be empty.")
    if errors:
        raise ValidationError(errors)


# ----------------- Play session -----------------
class State(Enum):
    AWAITING_SNAPSHOT = "awaiting_snapshot"
    SELECTING = "selecting"
    AWAITING_ANSWER = "awaiting_answer"
    FINISHED = "finished"


class Outcome(Enum):
    WIN = "win"        # every question answered correctly
    LOSS = "loss"      # a wrong answer ended the game
    EMPTY = "empty"    # nothing to ask


@dataclass
class PlayResult:
    score: int
    outcome: Outcome
    asked: List[QuizRecord] = field(default_factory=list)


class PlaySession:
    """
    One run of the play command.

    The pool is a snapshot of the store taken by start(). Each call to
    next_question() draws uniformly from whatever is left in the pool and
    removes the drawn record immediately, so no question is ever repeated.

    :param store: QuizStore to snapshot
    :param rng: random.Random used for selection (injectable for tests)
    """

    def __init__(self, store, rng: Optional[random.Random] = None):
        self._store = store
        self._rng = rng or random.Random()
        self.state = State.AWAITING_SNAPSHOT
        self.remaining: List[QuizRecord] = []
        self.score = 0
        self.outcome: Optional[Outcome] = None
        self.asked: List[QuizRecord] = []
        self.current: Optional[QuizRecord] = None

    @property
    def finished(self) -> bool:
        return self.state is State.FINISHED

    def start(self):
        self._expect(State.AWAITING_SNAPSHOT)
        self.remaining = list(self._store.find_all())
        self.score = 0
        if not self.remaining:
            self._finish(Outcome.EMPTY)
        else:
            self.state = State.SELECTING

    def next_question(self) -> Optional[QuizRecord]:
        """Draw the next record, or finish with a win if the pool is empty."""
        self._expect(State.SELECTING)
        if not self.remaining:
            self._finish(Outcome.WIN)
            return None
        self.current = self.remaining.pop(self._rng.randrange(len(self.remaining)))
        self.asked.append(self.current)
        self.state = State.AWAITING_ANSWER
        return self.current

    def answer(self, text: str) -> bool:
        self._expect(State.AWAITING_ANSWER)
        ok = is_correct(text, self.current.answer)
        if ok:
            self.score += 1
            self.state = State.SELECTING
        else:
            self._finish(Outcome.LOSS)
        return ok

    def result(self) -> PlayResult:
        self._expect(State.FINISHED)
        return PlayResult(self.score, self.outcome, list(self.asked))

    def _finish(self, outcome: Outcome):
        self.outcome = outcome
        self.current = None
        self.state = State.FINISHED

    def _expect(self, state: State):
        if self.state is not state:
            raise RuntimeError(f"play session is {self.state.value}, expected {state.value}")


# ----------------- Engine -----------------
class QuizEngine:
    """Command semantics over one store. Holds no per-user state."""

    def __init__(self, store, rng: Optional[random.Random] = None):
        self.store = store
        self._rng = rng

    def list(self) -> List[QuizRecord]:
        return sorted(self.store.find_all(), key=lambda r: r.id)

    def show(self, quiz_id: int) -> QuizRecord:
        record = self.store.find_by_id(quiz_id)
        if record is None:
            raise NotFound(quiz_id)
        return record

    def add(self, question: str, answer: str) -> QuizRecord:
        _check_text(question, answer)
        return self.store.create(question.strip(), answer.strip())

    def delete(self, quiz_id: int):
        if not self.store.delete_by_id(quiz_id):
            raise NotFound(quiz_id)

    def edit(self, quiz_id: int, question: str, answer: str) -> QuizRecord:
        record = self.show(quiz_id)
        _check_text(question, answer)
        record.question = question.strip()
        record.answer = answer.strip()
        updated = self.store.update(record)
        # deleted by another session in between
        if updated is None:
            raise NotFound(quiz_id)
        return updated

    def test(self, quiz_id: int, answer: str) -> bool:
        return is_correct(answer, self.show(quiz_id).answer)

    def new_session(self) -> PlaySession:
        return PlaySession(self.store, self._rng)

    def play(
        self,
        ask: Callable[[QuizRecord], str],
        on_correct: Optional[Callable[[int], None]] = None,
    ) -> PlayResult:
        """
        Run a whole play session.

        :param ask: called with each drawn record, returns the user's answer
        :param on_correct: called with the running score after each correct answer
        :return: PlayResult with final score, outcome and the asked records
        """
        session = self.new_session()
        session.start()
        while not session.finished:
            record = session.next_question()
            if record is None:
                break
            if session.answer(ask(record)) and on_correct:
                on_correct(session.score)
        return session.result()
