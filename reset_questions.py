"""
Mark every question as unused again.
Questions answered correctly stay out of new quizzes until this is run.
"""
from sqlalchemy.exc import SQLAlchemyError

from models import db
from services.quiz_service import reset_all_questions


def reset_all_questions_in(app):
    """Reset the used flag on all questions; returns the row count, or None on failure."""
    with app.app_context():
        try:
            num_questions = reset_all_questions()
        except SQLAlchemyError as e:
            db.session.rollback()
            print(f"❌ Error resetting questions: {e}")
            return None

    print(f"✅ Reset {num_questions} question(s) to unused.")
    print("🎉 Every question can appear in the next quiz again!")
    return num_questions


if __name__ == "__main__":
    from app import create_app

    response = input("⚠️  This will make ALL questions eligible again. Are you sure? (yes/no): ")
    if response.lower() == "yes":
        reset_all_questions_in(create_app())
    else:
        print("❌ Operation cancelled.")
