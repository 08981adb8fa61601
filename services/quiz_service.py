import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError

from models import Question, db
from services.quiz_state import QuestionSnapshot, QuizSession, QuizState

logger = logging.getLogger(__name__)

DEFAULT_QUIZ_SIZE = 5


@dataclass(frozen=True)
class Verdict:
    question: QuestionSnapshot
    correct: bool
    user_answer: str
    correct_answer: str

    @property
    def outcome(self) -> str:
        return "correct" if self.correct else "incorrect"


def normalize_answer(text: Optional[str]) -> str:
    return (text or "").strip()


def answers_match(user_answer: Optional[str], correct_answer: Optional[str]) -> bool:
    """Case-insensitive exact comparison after trimming; no fuzzy matching."""
    return normalize_answer(user_answer).lower() == normalize_answer(correct_answer).lower()


# ---------- store helpers (need an application context) ----------


def count_questions() -> int:
    return db.session.scalar(select(func.count()).select_from(Question)) or 0


def select_unused_questions(limit: int) -> List[QuestionSnapshot]:
    """Pick up to `limit` questions with used = 0 in random order."""
    stmt = select(Question).where(Question.used == 0).order_by(func.random()).limit(limit)
    return [QuestionSnapshot.from_row(row) for row in db.session.scalars(stmt)]


def mark_question_used(question_id: int) -> bool:
    """Set used = 1 for one question. Best effort: failures are logged and reported as False."""
    try:
        db.session.execute(update(Question).where(Question.id == question_id).values(used=1))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Failed to update used flag for question %s: %s", question_id, e)
        return False
    logger.info("Question %s marked as used (correct answer)", question_id)
    return True


def reset_all_questions() -> int:
    """Make every question eligible again; returns the number of rows touched."""
    result = db.session.execute(update(Question).values(used=0))
    db.session.commit()
    return result.rowcount


class QuizService:
    """Starts quiz rounds from the questions table and grades answers against them."""

    def __init__(
        self,
        state: Optional[QuizState] = None,
        quiz_size: int = DEFAULT_QUIZ_SIZE,
        reset_on_start: bool = False,
    ):
        self.state = state or QuizState()
        self.quiz_size = max(1, quiz_size)
        self.reset_on_start = reset_on_start

    def current_quiz(self) -> QuizSession:
        return self.state.current()

    def start_new_quiz(self) -> QuizSession:
        """Load a fresh batch of unused questions and install it as the current quiz.

        Never raises on store errors: the quiz degrades to zero questions.
        """
        try:
            if self.reset_on_start:
                reset_all_questions()

            available = count_questions()
            if available == 0:
                return self.state.clear()

            limit = min(self.quiz_size, available)
            questions = select_unused_questions(limit)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Error starting quiz")
            return self.state.clear()

        session = self.state.replace(QuizSession(tuple(questions)))
        logger.info(
            "New quiz started: %s fresh questions loaded (only correct answers mark them as used).",
            session.total,
        )
        return session

    def get_question_by_position(
        self, position: int, quiz: Optional[QuizSession] = None
    ) -> Optional[QuestionSnapshot]:
        quiz = quiz if quiz is not None else self.current_quiz()
        return quiz.question_at(position)

    def grade_answer(
        self, position: int, user_answer: Optional[str], quiz: Optional[QuizSession] = None
    ) -> Optional[Verdict]:
        """Grade `user_answer` for the question at `position`; None if the position is invalid."""
        question = self.get_question_by_position(position, quiz)
        if question is None:
            return None

        verdict = Verdict(
            question=question,
            correct=answers_match(user_answer, question.correct_answer),
            user_answer=normalize_answer(user_answer),
            correct_answer=normalize_answer(question.correct_answer),
        )
        if verdict.correct:
            # Writes use the database id, never the position
            mark_question_used(question.id)
        return verdict
