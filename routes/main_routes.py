# routes/main_routes.py - homepage / start a new quiz round
from flask import Blueprint, current_app, redirect, render_template, url_for

main_bp = Blueprint("main", __name__)


@main_bp.route("/", methods=["GET"])
def index():
    """Start a new quiz and jump to its first question."""
    quiz = current_app.extensions["quiz"].start_new_quiz()
    if quiz.total == 0:
        return render_template("message.html", title="Smart Quiz", heading="No questions in database.")
    return redirect(url_for("quiz.show_question", position=1))
