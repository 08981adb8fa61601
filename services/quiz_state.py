# services/quiz_state.py - the in-memory quiz round shared by every request
import threading
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class QuestionSnapshot:
    """Copy of a question row taken when the quiz started."""

    id: int
    question: str
    correct_answer: str
    img_url: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row.id,
            question=row.question or "",
            correct_answer=row.correct_answer or "",
            img_url=row.img_url,
        )


@dataclass(frozen=True)
class QuizSession:
    """An immutable batch of questions; positions are 1-based."""

    questions: Tuple[QuestionSnapshot, ...] = ()

    @property
    def total(self) -> int:
        return len(self.questions)

    def question_at(self, position: int) -> Optional[QuestionSnapshot]:
        if self.total == 0 or position < 1 or position > self.total:
            return None
        return self.questions[position - 1]


class QuizState:
    """Owns the current QuizSession and swaps it as a whole.

    Readers call current() once per request and keep working on that
    snapshot, so a quiz starting concurrently never shows them a
    half-loaded batch.
    """

    def __init__(self, session: Optional[QuizSession] = None):
        self._lock = threading.Lock()
        self._session = session or QuizSession()

    def current(self) -> QuizSession:
        with self._lock:
            return self._session

    def replace(self, session: QuizSession) -> QuizSession:
        with self._lock:
            self._session = session
        return session

    def clear(self) -> QuizSession:
        return self.replace(QuizSession())
