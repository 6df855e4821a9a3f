import pytest

from authoring import ManualTestBuilder, validate_test_setup, validate_test_totals
from models import ManualQuestion


@pytest.mark.parametrize(
    ("name", "marks", "count", "message"),
    [
        ("  ", "10", "2", "Please enter a test name"),
        ("Quiz", "", "2", "Please enter total marks for the test"),
        ("Quiz", "0", "2", "Please enter valid total marks (1-10000)"),
        ("Quiz", "10001", "2", "Please enter valid total marks (1-10000)"),
        ("Quiz", "ten", "2", "Please enter valid total marks (1-10000)"),
        ("Quiz", "10", "0", "Please select a valid number of questions (1-100)"),
        ("Quiz", "10", 101, "Please select a valid number of questions (1-100)"),
        ("Quiz", "inf", "2", "Please enter valid total marks (1-10000)"),
        ("Quiz", float("nan"), "2", "Please enter valid total marks (1-10000)"),
        ("Quiz", "10", "1e400", "Please select a valid number of questions (1-100)"),
    ],
)
def test_setup_validation_failures(name, marks, count, message) -> None:
    result = validate_test_setup(name, marks, count)
    assert not result
    assert result.message == message


def test_setup_validation_accepts_valid_values() -> None:
    assert validate_test_setup("Chapter 5 quiz", "100", 10).ok
    assert not validate_test_setup("x" * 101, "100", 10)


def test_save_and_next_walks_through_questions() -> None:
    builder = ManualTestBuilder("Quiz", total_marks=3, total_questions=2)
    builder.editor.set_total_marks(2)

    assert builder.save_and_next().ok
    assert builder.current_question == 2
    assert builder.editor.question_number == 2
    assert builder.editor.question.question_text == "Question 2"
    assert builder.running_total() == 3
    assert builder.remaining_marks() == 1
    assert builder.is_marks_valid()

    assert builder.save_and_next().ok
    assert builder.complete
    assert builder.current_question == 2
    assert builder.validate_for_finalize().ok


def test_invalid_question_blocks_next() -> None:
    builder = ManualTestBuilder("Quiz", total_marks=2, total_questions=2)
    builder.editor.add_option()
    builder.editor.set_total_marks(2)

    result = builder.save_and_next()
    assert not result
    assert result.title == "Weight Mismatch"
    assert builder.current_question == 1
    assert builder.questions == []


def test_previous_keeps_unvalidated_edits() -> None:
    builder = ManualTestBuilder("Quiz", total_marks=2, total_questions=2)
    builder.save_and_next()
    builder.editor.set_question_text("Edited second")

    assert builder.go_previous()
    assert builder.current_question == 1
    assert len(builder.questions) == 2

    builder.save_and_next()
    assert builder.editor.question.question_text == "Edited second"


def test_previous_on_first_question_is_noop() -> None:
    builder = ManualTestBuilder("Quiz", total_marks=1, total_questions=1)
    assert not builder.go_previous()
    assert builder.questions == []


def test_total_marks_mismatch_blocks_finalize() -> None:
    builder = ManualTestBuilder("Quiz", total_marks=5, total_questions=2)
    builder.save_and_next()
    builder.save_and_next()

    result = builder.validate_for_finalize()
    assert not result
    assert result.title == "Marks Validation Failed"
    assert "(2)" in result.message
    assert "(5)" in result.message


def test_finalize_requires_every_question() -> None:
    builder = ManualTestBuilder("Quiz", total_marks=2, total_questions=2)
    builder.save_and_next()
    assert not builder.validate_for_finalize()


def test_rehydrates_stored_questions_and_working_copy() -> None:
    stored = [
        ManualQuestion(question_number=1, question_text="First", total_marks=2),
    ]
    working = ManualQuestion(
        question_number=2,
        is_multiple_choice=False,
        single_correct_answer="42",
        total_marks=3,
    )
    builder = ManualTestBuilder(
        "Quiz",
        total_marks=5,
        total_questions=2,
        questions=stored,
        current_question=2,
        working=working,
    )
    assert builder.editor.question.single_correct_answer == "42"
    assert builder.running_total() == 5

    builder.go_previous()
    assert builder.editor.question.question_text == "First"


def test_validate_test_totals_tolerance() -> None:
    questions = [
        ManualQuestion(question_number=1, total_marks=3.333),
        ManualQuestion(question_number=2, total_marks=6.67),
    ]
    assert validate_test_totals(questions, 10).ok
    assert not validate_test_totals(questions, 10.5)


def test_build_payload_shape() -> None:
    builder = ManualTestBuilder("Quiz", total_marks=1, total_questions=1)
    builder.save_and_next()

    payload = builder.build_payload()
    assert payload["testName"] == "Quiz"
    assert payload["totalMarks"] == 1
    question = payload["questions"][0]
    assert question["questionNumber"] == 1
    assert question["options"] == [
        {"id": "A", "text": "A", "isCorrect": True, "weight": 1.0}
    ]
