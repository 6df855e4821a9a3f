from __future__ import annotations
from dataclasses import dataclass, field
from typing import List


@dataclass
class QuestionOption:
    id: str  # "A".."H", positional
    text: str
    is_correct: bool = True
    weight: float = 0.0


@dataclass
class ManualQuestion:
    question_number: int
    question_text: str = ""
    is_multiple_choice: bool = True
    options: List[QuestionOption] = field(default_factory=list)
    total_marks: float = 1.0
    single_correct_answer: str = ""

    def correct_options(self) -> List[QuestionOption]:
        return [option for option in self.options if option.is_correct]


@dataclass
class ValidationResult:
    ok: bool
    message: str = ""
    title: str = "Error"

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str, title: str = "Error") -> ValidationResult:
        return cls(ok=False, message=message, title=title)
