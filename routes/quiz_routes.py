# routes/quiz_routes.py - one question per page, answer submission and grading
from flask import Blueprint, current_app, render_template, request

quiz_bp = Blueprint("quiz", __name__)


def _parse_position(raw):
    """Return the 1-based position in the URL, or None unless it is plain ASCII digits."""
    if not raw or not raw.isascii() or not raw.isdigit():
        return None
    return int(raw, 10)


def _invalid_question():
    return (
        render_template(
            "message.html", title="Invalid question", heading="Invalid question", show_restart=True
        ),
        404,
    )


@quiz_bp.route("/question/<position>", methods=["GET", "POST"])
def show_question(position):
    """GET shows the question at `position`; POST grades the submitted `user_answer`."""
    service = current_app.extensions["quiz"]
    # One snapshot for the whole request; a concurrent quiz start swaps it, never mutates it
    quiz = service.current_quiz()

    pos = _parse_position(position)
    question = service.get_question_by_position(pos, quiz) if pos is not None else None
    if question is None:
        return _invalid_question()

    context = dict(
        position=pos,
        total=quiz.total,
        question=question,
        reset_on_start=service.reset_on_start,
    )

    if request.method == "POST":
        verdict = service.grade_answer(pos, request.form.get("user_answer", ""), quiz)
        current_app.logger.info("question position=%s id=%s graded %s", pos, question.id, verdict.outcome)
        return render_template("result.html", verdict=verdict, **context)

    return render_template("question.html", **context)
