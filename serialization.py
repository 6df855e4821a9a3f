from __future__ import annotations

import re
from typing import Any, Iterable

from models import ManualQuestion, QuestionOption
from weightage import DEFAULT_QUESTION_MARKS, MAX_OPTIONS, option_letter, parse_marks


QUESTION_TYPES = ("traditional", "omr", "mixed", "fill_blanks")
FORMAT_MULTIPLE_CHOICE = "multiple_choice"
FORMAT_TEXT = "text"

OPTION_LETTERS = tuple(option_letter(index) for index in range(MAX_OPTIONS))

_NUMERIC_KEY = re.compile(r"^\d+$")


def _as_int(value: object, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _marks(value: object, default: float = 0.0) -> float:
    parsed = parse_marks(value)
    return default if parsed is None else parsed


def option_to_dict(option: QuestionOption) -> dict[str, Any]:
    return {
        "id": option.id,
        "text": option.text,
        "isCorrect": option.is_correct,
        "weight": option.weight,
    }


def question_to_dict(question: ManualQuestion) -> dict[str, Any]:
    return {
        "questionNumber": question.question_number,
        "questionText": question.question_text,
        "isMultipleChoice": question.is_multiple_choice,
        "options": [option_to_dict(option) for option in question.options],
        "totalMarks": question.total_marks,
        "singleCorrectAnswer": question.single_correct_answer,
    }


def question_from_dict(
    data: dict[str, Any], question_number: int | None = None
) -> ManualQuestion:
    """Rebuild a question from its camelCase form; ids are reassigned by position."""
    raw_options = data.get("options")
    options = []
    if isinstance(raw_options, list):
        for raw in raw_options[:MAX_OPTIONS]:
            if not isinstance(raw, dict):
                continue
            letter = option_letter(len(options))
            options.append(
                QuestionOption(
                    id=letter,
                    text=_as_text(raw.get("text", letter)),
                    is_correct=bool(raw.get("isCorrect")),
                    weight=_marks(raw.get("weight")),
                )
            )

    number = question_number
    if number is None:
        number = _as_int(data.get("questionNumber"), 1)

    return ManualQuestion(
        question_number=number,
        question_text=_as_text(data.get("questionText")),
        is_multiple_choice=bool(data.get("isMultipleChoice", True)),
        options=options,
        total_marks=_marks(data.get("totalMarks", DEFAULT_QUESTION_MARKS)),
        single_correct_answer=_as_text(data.get("singleCorrectAnswer")),
    )


def serialize_manual_test(
    test_name: str,
    total_marks: float,
    questions: Iterable[ManualQuestion],
) -> dict[str, Any]:
    return {
        "testName": test_name,
        "totalMarks": total_marks,
        "questions": [question_to_dict(question) for question in questions],
    }


def parse_manual_test(payload: dict[str, Any]) -> tuple[str, float, list[ManualQuestion]]:
    """Read a manual-test payload; questions are renumbered by position."""
    raw_questions = payload.get("questions")
    if not isinstance(raw_questions, list):
        raise ValueError("Manual test payload has no question list")
    questions = [
        question_from_dict(raw, question_number=index)
        for index, raw in enumerate(
            (item for item in raw_questions if isinstance(item, dict)), start=1
        )
    ]
    return (
        _as_text(payload.get("testName")).strip(),
        _marks(payload.get("totalMarks")),
        questions,
    )


def serialize_question_payload(
    question: ManualQuestion,
    page_number: int = 1,
    question_type: str = "traditional",
) -> dict[str, Any]:
    """Build the create/update body for a question attached to a paper."""
    if question_type not in QUESTION_TYPES:
        raise ValueError(f"Unknown question type: {question_type}")

    correct = question.correct_options()
    payload: dict[str, Any] = {
        "question_number": question.question_number,
        "question_text": question.question_text,
        "page_number": page_number,
        "question_type": question_type,
        "points_per_blank": question.total_marks,
        "weightages": {},
        "options": None,
    }

    if not question.is_multiple_choice:
        payload["correct_option"] = question.single_correct_answer.strip()
        payload["question_format"] = FORMAT_TEXT
        return payload

    payload["weightages"] = {option.id: option.weight for option in correct}
    payload["question_format"] = FORMAT_MULTIPLE_CHOICE
    if len(correct) > 1:
        letters = [option.id for option in correct]
        payload["correct_option"] = ",".join(letters)
        payload["correct_options"] = letters
    else:
        payload["correct_option"] = correct[0].id if correct else ""
        payload["options"] = {option.id: option.text for option in question.options}
    return payload


def normalize_option_keys(options: object) -> tuple[dict[str, str], bool]:
    """
    Map legacy option containers to letter keys.

    Accepts ``["x", "y"]``, ``{"0": "x", "1": "y"}`` or ``{"A": "x"}``.
    Returns the letter map and whether numeric keys were converted.
    """
    converted: dict[str, str] = {}
    if isinstance(options, list):
        for index, text in enumerate(options[:MAX_OPTIONS]):
            converted[OPTION_LETTERS[index]] = _as_text(text)
        return converted, True

    if not isinstance(options, dict):
        return converted, False

    numeric = sorted(
        ((int(key), value) for key, value in options.items() if _NUMERIC_KEY.match(str(key))),
        key=lambda item: item[0],
    )
    if numeric:
        for index, (_, text) in enumerate(numeric[:MAX_OPTIONS]):
            converted[OPTION_LETTERS[index]] = _as_text(text)
        for key, value in options.items():
            letter = str(key).upper()
            if letter in OPTION_LETTERS and value:
                converted[letter] = _as_text(value)
        return converted, True

    for key, value in options.items():
        letter = str(key).strip().upper()
        if letter in OPTION_LETTERS:
            converted[letter] = _as_text(value)
    return converted, False


def _answer_letters(answers: list[str], numeric_keys: bool) -> list[str]:
    letters = []
    for answer in answers:
        cleaned = answer.strip()
        if not cleaned:
            continue
        if numeric_keys and cleaned.isdigit() and int(cleaned) < MAX_OPTIONS:
            cleaned = OPTION_LETTERS[int(cleaned)]
        letters.append(cleaned.upper())
    return letters


def parse_question_payload(data: dict[str, Any]) -> ManualQuestion:
    """Rebuild an editable question from a paper question returned by the API."""
    option_texts, numeric_keys = normalize_option_keys(data.get("options") or {})

    raw_correct = data.get("correct_options")
    if isinstance(raw_correct, list) and raw_correct:
        answers = [_as_text(item) for item in raw_correct]
    else:
        answers = _as_text(data.get("correct_option")).split(",")
    letters = _answer_letters(answers, numeric_keys)

    weightages = data.get("weightages")
    if not isinstance(weightages, dict):
        weightages = {}

    total_marks = _marks(data.get("points_per_blank")) or DEFAULT_QUESTION_MARKS
    question = ManualQuestion(
        question_number=_as_int(data.get("question_number"), 1),
        question_text=_as_text(data.get("question_text")),
        total_marks=total_marks,
    )

    choice_letters = all(letter in OPTION_LETTERS for letter in letters)
    is_multiple_choice = bool(option_texts) or (
        bool(letters)
        and choice_letters
        and (len(letters) > 1 or data.get("question_format") == FORMAT_MULTIPLE_CHOICE)
    )
    if not is_multiple_choice:
        question.is_multiple_choice = False
        question.single_correct_answer = _as_text(data.get("correct_option")).strip()
        return question

    # Multi-correct payloads carry no option texts; fall back to the letters.
    keys = sorted(set(option_texts) | {letter for letter in letters if letter in OPTION_LETTERS})
    for index, key in enumerate(keys[:MAX_OPTIONS]):
        question.options.append(
            QuestionOption(
                id=option_letter(index),
                text=option_texts.get(key, key),
                is_correct=key in letters,
                weight=_marks(weightages.get(key)),
            )
        )
    return question
