"""
Weightage-based question editing.

A question's correct options each carry a partial mark ("weight"); the
weights of the correct options must add up to the question's total marks
before the question can be saved. All checks are reported as
``ValidationResult`` values, never raised.
"""
from __future__ import annotations

import copy
import logging
import math
from typing import List

from models import ManualQuestion, QuestionOption, ValidationResult

log = logging.getLogger(__name__)


MAX_OPTIONS = 8
MARKS_TOLERANCE = 0.01
DEFAULT_QUESTION_MARKS = 1.0


def option_letter(index: int) -> str:
    return chr(ord("A") + index)


def round_marks(value: float) -> float:
    return round(value, 2)


def format_marks(value: float) -> str:
    """Render marks the way users type them: ``1`` not ``1.0``."""
    text = f"{round_marks(value):.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def parse_marks(value: object) -> float | None:
    """
    Coerce user input to a non-negative mark value.
    Empty input is 0; negative, non-numeric or non-finite input is None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return 0.0
        try:
            number = float(raw)
        except ValueError:
            return None
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def default_question(question_number: int) -> ManualQuestion:
    return ManualQuestion(
        question_number=question_number,
        question_text=f"Question {question_number}",
        is_multiple_choice=True,
        options=[
            QuestionOption(
                id="A", text="A", is_correct=True, weight=DEFAULT_QUESTION_MARKS
            )
        ],
        total_marks=DEFAULT_QUESTION_MARKS,
        single_correct_answer="",
    )


class WeightageQuestionModel:
    """Authoring state of one question in the manual test wizard."""

    def __init__(self, question: ManualQuestion | None = None, question_number: int = 1):
        if question is None:
            question = default_question(question_number)
        self.question = copy.deepcopy(question)
        self._relabel()
        self._sync_single_correct_weight()

    @property
    def question_number(self) -> int:
        return self.question.question_number

    @property
    def options(self) -> List[QuestionOption]:
        return self.question.options

    @property
    def total_marks(self) -> float:
        return self.question.total_marks

    def correct_options(self) -> List[QuestionOption]:
        return self.question.correct_options()

    def find_option(self, option_id: str) -> QuestionOption | None:
        key = (option_id or "").strip().upper()
        for option in self.question.options:
            if option.id == key:
                return option
        return None

    def to_question(self) -> ManualQuestion:
        return copy.deepcopy(self.question)

    def _relabel(self) -> None:
        for index, option in enumerate(self.question.options):
            option.id = option_letter(index)

    def _sync_single_correct_weight(self) -> None:
        # A lone correct option always carries the full question marks.
        correct = self.correct_options()
        if len(correct) == 1:
            correct[0].weight = self.question.total_marks

    def add_option(self) -> QuestionOption | None:
        """Append the next lettered option; returns None past MAX_OPTIONS."""
        options = self.question.options
        if len(options) >= MAX_OPTIONS:
            log.debug(
                "Question %s already has %s options", self.question_number, MAX_OPTIONS
            )
            return None

        letter = option_letter(len(options))
        weight = self.question.total_marks if not self.correct_options() else 0.0
        option = QuestionOption(id=letter, text=letter, is_correct=True, weight=weight)
        options.append(option)
        self._sync_single_correct_weight()
        return option

    def remove_option(self, option_id: str) -> ValidationResult:
        option = self.find_option(option_id)
        if option is None:
            return ValidationResult.failure(f"Option {option_id} not found")

        if option.is_correct and len(self.correct_options()) <= 1:
            return ValidationResult.failure(
                "You must have at least one correct option", title="Cannot Remove"
            )

        self.question.options.remove(option)
        self._relabel()
        self._sync_single_correct_weight()
        return ValidationResult.success()

    def update_option_text(self, option_id: str, text: str) -> bool:
        option = self.find_option(option_id)
        if option is None:
            return False
        option.text = text if text is not None else ""
        return True

    def update_option_weight(self, option_id: str, weight: object) -> bool:
        """Set an option weight; invalid input leaves the weight unchanged."""
        option = self.find_option(option_id)
        if option is None:
            return False
        parsed = parse_marks(weight)
        if parsed is None:
            return False
        option.weight = parsed
        self._sync_single_correct_weight()
        return True

    def toggle_correct(self, option_id: str) -> bool:
        option = self.find_option(option_id)
        if option is None:
            return False
        option.is_correct = not option.is_correct
        self._sync_single_correct_weight()
        return True

    def set_question_text(self, text: str) -> None:
        self.question.question_text = text if text is not None else ""

    def set_multiple_choice(self, value: bool) -> None:
        self.question.is_multiple_choice = bool(value)

    def set_single_correct_answer(self, answer: str) -> None:
        self.question.single_correct_answer = answer if answer is not None else ""

    def set_total_marks(self, value: object) -> bool:
        parsed = parse_marks(value)
        if parsed is None:
            return False
        self.question.total_marks = parsed
        self._sync_single_correct_weight()
        return True

    def auto_distribute_marks(self, carry_remainder: bool = False) -> None:
        """
        Split total marks equally across correct options, rounded to 2 places.

        The plain split can miss the total by a few hundredths (1 mark over 3
        options gives 0.99); ``carry_remainder`` puts the difference on the
        last correct option instead.
        """
        correct = self.correct_options()
        if not correct:
            return

        share = round_marks(self.question.total_marks / len(correct))
        for option in correct:
            option.weight = share
        if carry_remainder:
            remainder = self.question.total_marks - share * len(correct)
            correct[-1].weight = round_marks(share + remainder)

    def calculate_total_weight(self) -> float:
        return round_marks(sum(option.weight or 0.0 for option in self.correct_options()))

    def validate(self) -> ValidationResult:
        question = self.question
        if question.total_marks <= 0:
            return ValidationResult.failure("Total marks should be greater than 0")

        if not question.is_multiple_choice:
            if not (question.single_correct_answer or "").strip():
                return ValidationResult.failure("Please enter the correct answer")
            return ValidationResult.success()

        correct = self.correct_options()
        if not correct:
            return ValidationResult.failure("Please add at least one correct option")

        if any(not (option.text or "").strip() for option in correct):
            return ValidationResult.failure("Please fill in all correct option texts")

        total_weight = self.calculate_total_weight()
        total_marks = round_marks(question.total_marks)
        if abs(total_weight - total_marks) > MARKS_TOLERANCE:
            return ValidationResult.failure(
                f"Total weightage of correct options ({format_marks(total_weight)}) "
                f"must equal total marks ({format_marks(total_marks)})",
                title="Weight Mismatch",
            )
        return ValidationResult.success()
