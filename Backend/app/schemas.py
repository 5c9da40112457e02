from enum import Enum
from typing import Optional

from pydantic import BaseModel, StrictInt, field_validator, model_validator

OPTIONS_PER_QUESTION = 4

class QuizSource(str, Enum):
    MATERIAL = "material"  # study notes, generate fresh questions
    QUIZ = "quiz"  # an existing quiz to reformat

class UploadedFile(BaseModel):
    stored_path: str
    original_name: str
    declared_mime_type: str

class QuizQuestion(BaseModel):
    question: str
    options: list[str]
    correct: StrictInt

    @field_validator("options")
    @classmethod
    def check_option_count(cls, options: list[str]) -> list[str]:
        if len(options) != OPTIONS_PER_QUESTION:
            raise ValueError(
                f"expected exactly {OPTIONS_PER_QUESTION} options, got {len(options)}"
            )
        return options

    @model_validator(mode="after")
    def check_correct_index(self):
        if not 0 <= self.correct < len(self.options):
            raise ValueError(f"correct index {self.correct} is out of range")
        return self

class Quiz(BaseModel):
    id: int
    title: str
    questions: list[QuizQuestion]
    totalQuestions: int

    @model_validator(mode="after")
    def check_totals(self):
        if not self.questions:
            raise ValueError("quiz has no questions")
        if self.totalQuestions != len(self.questions):
            raise ValueError("totalQuestions does not match the number of questions")
        return self

    @classmethod
    def build(cls, quiz_id: int, filename: str, questions: list) -> "Quiz":
        return cls(
            id=quiz_id,
            title=f"Quiz for {filename}",
            questions=questions,
            totalQuestions=len(questions),
        )

class QuizEnvelope(BaseModel):
    success: bool = True
    filename: str
    quiz: Quiz

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
