import threading
from types import SimpleNamespace

from services.quiz_state import QuestionSnapshot, QuizSession, QuizState


def _snap(i, img=None):
    return QuestionSnapshot(id=100 + i, question=f"Q{i}?", correct_answer=f"A{i}", img_url=img)


def test_empty_session_has_no_positions():
    session = QuizSession()
    assert session.total == 0
    assert session.question_at(0) is None
    assert session.question_at(1) is None


def test_question_at_is_one_based():
    session = QuizSession((_snap(1), _snap(2), _snap(3)))
    assert session.total == 3
    assert session.question_at(1).id == 101
    assert session.question_at(3).id == 103
    assert session.question_at(4) is None
    assert session.question_at(-1) is None


def test_snapshot_from_row_normalizes_nulls():
    row = SimpleNamespace(id=7, question=None, correct_answer=None, img_url=None)
    snap = QuestionSnapshot.from_row(row)
    assert snap == QuestionSnapshot(id=7, question="", correct_answer="", img_url=None)


def test_state_starts_empty_and_swaps_whole_sessions():
    state = QuizState()
    assert state.current().total == 0

    first = QuizSession((_snap(1),))
    assert state.replace(first) is first
    assert state.current() is first

    held = state.current()
    state.replace(QuizSession((_snap(2), _snap(3))))
    # a reader's snapshot is unaffected by later swaps
    assert held.total == 1 and held.question_at(1).id == 101
    assert state.current().total == 2

    state.clear()
    assert state.current().total == 0


def test_concurrent_readers_never_see_torn_sessions():
    state = QuizState()
    sessions = [QuizSession(tuple(_snap(i * 10 + j) for j in range(n))) for i, n in enumerate([1, 5, 3, 0, 2])]
    valid = {id(s) for s in sessions} | {id(state.current())}
    seen_bad = []
    stop = threading.Event()

    def writer():
        for _ in range(200):
            for s in sessions:
                state.replace(s)
        stop.set()

    def reader():
        while not stop.is_set():
            current = state.current()
            if id(current) not in valid or current.total != len(current.questions):
                seen_bad.append(current)

    threads = [threading.Thread(target=reader) for _ in range(4)] + [threading.Thread(target=writer)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert seen_bad == []
