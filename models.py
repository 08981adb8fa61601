import logging

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

db = SQLAlchemy()

logger = logging.getLogger(__name__)


class DatabaseUnavailableError(RuntimeError):
    """Raised at startup when the questions database cannot be reached."""


class Question(db.Model):
    __tablename__ = "questions"

    id = db.Column(db.Integer, primary_key=True)
    question = db.Column(db.Text, nullable=False)
    correct_answer = db.Column(db.Text, nullable=True)
    # Column keeps its historical camelCase name in the shared table
    img_url = db.Column("imgUrl", db.Text, nullable=True)
    # 0 = eligible for selection, 1 = answered correctly and excluded
    used = db.Column(db.Integer, default=0, server_default="0", nullable=False)

    def __repr__(self):
        return f"<Question id={self.id} used={self.used}>"


def close_database(app):
    """Release the shared database handle for *app*. Errors are logged, not raised."""
    with app.app_context():
        try:
            db.session.remove()
            db.engine.dispose()
            logger.info("Database connection closed gracefully.")
        except SQLAlchemyError as e:
            logger.error("Error closing database connection: %s", e)
