from functional_check import run_checks


def test_functional_check_runs_and_all_steps_pass():
    results = run_checks()
    assert isinstance(results, dict)
    for key in ["home", "quiz_size", "question_get", "answers", "db_saved", "no_questions", "404"]:
        assert key in results
        status, ok = results[key]
        assert isinstance(status, int)
        assert ok, f"functional check step {key!r} failed: {results[key]}"
