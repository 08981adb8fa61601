"""Functional page-by-page verification script.
Run inside the virtual environment:
  python functional_check.py
Seeds an in-memory database, walks the quiz flow and outputs
(status_code, heuristic_content_ok) per step.
"""

from app import create_app
from models import Question, db

SAMPLE_QUESTIONS = [
    {"question": "2+2?", "correct_answer": "4", "img_url": None},
    {"question": "Capital of France?", "correct_answer": "Paris", "img_url": None},
    {"question": "Color of sky?", "correct_answer": "Blue", "img_url": "http://x/img.png"},
]


def run_checks():
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"})
    results = {}

    with app.app_context():
        db.session.add_all(Question(**q) for q in SAMPLE_QUESTIONS)
        db.session.commit()

    with app.test_client() as c:
        # Home starts the quiz and redirects to the first question
        home = c.get("/")
        results["home"] = (home.status_code, home.headers.get("Location", "").endswith("/question/1"))

        quiz = app.extensions["quiz"].current_quiz()
        results["quiz_size"] = (200, quiz.total == len(SAMPLE_QUESTIONS))

        # First question shows its prompt but not its answer
        first = quiz.question_at(1)
        q1 = c.get("/question/1")
        body = q1.get_data(as_text=True)
        results["question_get"] = (
            q1.status_code,
            first is not None and first.question in body and f'"{first.correct_answer}"' not in body,
        )

        # Answer every question correctly; each one should be marked used
        last_resp = None
        for position in range(1, quiz.total + 1):
            answer = quiz.question_at(position).correct_answer
            last_resp = c.post(f"/question/{position}", data={"user_answer": f"  {answer.upper()} "})
        results["answers"] = (
            getattr(last_resp, "status_code", 0),
            last_resp is not None and "Correct!" in last_resp.get_data(as_text=True),
        )

        with app.app_context():
            remaining = db.session.query(Question).filter_by(used=0).count()
        results["db_saved"] = (200, remaining == 0)

        # Everything mastered: the next quiz has nothing to ask
        again = c.get("/")
        results["no_questions"] = (again.status_code, "No questions in database." in again.get_data(as_text=True))

        # Invalid positions
        notf = c.get("/question/99")
        results["404"] = (notf.status_code, notf.status_code == 404)

        # Security headers
        health = c.get("/healthz")
        results["security_headers"] = (
            health.status_code,
            bool(health.headers.get("Content-Security-Policy"))
            and health.headers.get("X-Frame-Options") == "DENY",
        )

    return results


if __name__ == "__main__":
    for k, v in run_checks().items():
        print(f"{k}: {v}")
