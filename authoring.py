"""Manual test wizard: one question per step, marks tallied across the test."""
from __future__ import annotations

import logging
import math
from typing import Iterable, List

from models import ManualQuestion, ValidationResult
from serialization import serialize_manual_test
from weightage import (
    MARKS_TOLERANCE,
    WeightageQuestionModel,
    format_marks,
)

log = logging.getLogger(__name__)


MAX_TEST_NAME_LENGTH = 100
MIN_TEST_MARKS = 1
MAX_TEST_MARKS = 10000
MIN_QUESTIONS = 1
MAX_QUESTIONS = 100


def parse_whole_number(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        raw = value.strip()
        try:
            return int(raw)
        except ValueError:
            try:
                return int(float(raw))
            except (ValueError, OverflowError):
                return None
    return None


def validate_test_setup(
    test_name: str, total_marks: object, question_count: object
) -> ValidationResult:
    """Check the values entered before the first question is authored."""
    if not isinstance(test_name, str) or not test_name.strip():
        return ValidationResult.failure("Please enter a test name")
    if len(test_name.strip()) > MAX_TEST_NAME_LENGTH:
        return ValidationResult.failure(
            f"Test name must be at most {MAX_TEST_NAME_LENGTH} characters"
        )

    if total_marks is None or (isinstance(total_marks, str) and not total_marks.strip()):
        return ValidationResult.failure("Please enter total marks for the test")

    marks = parse_whole_number(total_marks)
    if not marks or marks < MIN_TEST_MARKS or marks > MAX_TEST_MARKS:
        return ValidationResult.failure(
            f"Please enter valid total marks ({MIN_TEST_MARKS}-{MAX_TEST_MARKS})"
        )

    count = parse_whole_number(question_count)
    if not count or count < MIN_QUESTIONS or count > MAX_QUESTIONS:
        return ValidationResult.failure(
            f"Please select a valid number of questions ({MIN_QUESTIONS}-{MAX_QUESTIONS})"
        )
    return ValidationResult.success()


def sum_question_marks(questions: Iterable[ManualQuestion]) -> float:
    return sum(question.total_marks for question in questions)


def validate_test_totals(
    questions: Iterable[ManualQuestion], test_total_marks: float
) -> ValidationResult:
    calculated = sum_question_marks(questions)
    if abs(calculated - test_total_marks) > MARKS_TOLERANCE:
        return ValidationResult.failure(
            f"The sum of all question marks ({format_marks(calculated)}) must equal "
            f"the total test marks ({format_marks(test_total_marks)}). "
            "Please adjust the marks for individual questions.",
            title="Marks Validation Failed",
        )
    return ValidationResult.success()


class ManualTestBuilder:
    """
    Walks the author through questions ``1..total_questions``.

    ``questions`` holds what "next"/"previous" stored so far; the question
    being edited lives in ``editor`` until one of them is called.
    """

    def __init__(
        self,
        test_name: str,
        total_marks: float,
        total_questions: int,
        questions: List[ManualQuestion] | None = None,
        current_question: int = 1,
        working: ManualQuestion | None = None,
    ):
        if total_questions < 1:
            raise ValueError("total_questions must be at least 1")
        self.test_name = test_name
        self.total_marks = float(total_marks)
        self.total_questions = total_questions
        self.questions: List[ManualQuestion] = list(questions or [])
        self.current_question = min(max(current_question, 1), total_questions)
        self.complete = False
        if working is not None and working.question_number == self.current_question:
            self.editor = WeightageQuestionModel(working)
        else:
            self.editor = self._load_step(self.current_question)

    def _load_step(self, question_number: int) -> WeightageQuestionModel:
        if len(self.questions) >= question_number:
            return WeightageQuestionModel(self.questions[question_number - 1])
        return WeightageQuestionModel(question_number=question_number)

    def _store_current(self) -> None:
        index = self.current_question - 1
        question = self.editor.to_question()
        if index < len(self.questions):
            self.questions[index] = question
        else:
            self.questions.append(question)

    def _other_questions(self) -> List[ManualQuestion]:
        return [
            question
            for question in self.questions
            if question.question_number != self.current_question
        ]

    def running_total(self) -> float:
        return sum_question_marks(self._other_questions()) + self.editor.total_marks

    def remaining_marks(self) -> float:
        return self.total_marks - sum_question_marks(self._other_questions())

    def is_marks_valid(self) -> bool:
        return abs(self.running_total() - self.total_marks) < MARKS_TOLERANCE

    @property
    def is_last_question(self) -> bool:
        return self.current_question >= self.total_questions

    def save_and_next(self) -> ValidationResult:
        """Validate and store the current question, then move forward."""
        result = self.editor.validate()
        if not result:
            return result

        self._store_current()
        log.debug(
            "Saved question %s of %s for %r",
            self.current_question,
            self.total_questions,
            self.test_name,
        )
        if self.is_last_question:
            self.complete = True
            return result

        self.current_question += 1
        self.editor = self._load_step(self.current_question)
        return result

    def go_previous(self) -> bool:
        if self.current_question <= 1:
            return False
        self._store_current()
        self.current_question -= 1
        self.complete = False
        self.editor = self._load_step(self.current_question)
        return True

    def validate_totals(self) -> ValidationResult:
        return validate_test_totals(self.questions, self.total_marks)

    def validate_for_finalize(self) -> ValidationResult:
        """All questions must be stored and valid, and their marks must add up."""
        if not self.complete or len(self.questions) < self.total_questions:
            return ValidationResult.failure(
                f"Only {len(self.questions)} of {self.total_questions} questions are saved"
            )
        for question in self.questions:
            result = WeightageQuestionModel(question).validate()
            if not result:
                return ValidationResult.failure(
                    f"Question {question.question_number}: {result.message}",
                    title=result.title,
                )
        return self.validate_totals()

    def build_payload(self) -> dict[str, object]:
        return serialize_manual_test(self.test_name, self.total_marks, self.questions)
