from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

class DocumentFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"

class GenerationRequest(BaseModel):
    difficulty: Difficulty
    question_count: int = Field(gt=0)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _lower_difficulty(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

class PromptPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    system: str
    prompt: str
    max_tokens: int = 3000
    temperature: float = 0.7

# Quiz models mirror the JSON contract handed to the model and to the client,
# so field aliases keep the camelCase keys.

class QuizOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    A: StrictStr
    B: StrictStr
    C: StrictStr
    D: StrictStr

class Question(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: StrictInt
    question: StrictStr
    options: QuizOptions
    correct_answer: Literal["A", "B", "C", "D"] = Field(alias="correctAnswer")
    explanation: Optional[StrictStr] = None

class Quiz(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Optional[StrictStr] = None
    difficulty: Optional[StrictStr] = None
    total_questions: Optional[StrictInt] = Field(default=None, alias="totalQuestions")
    questions: list[Question]

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)

class QuizMetadata(BaseModel):
    filename: str
    difficulty: Difficulty
    question_count: int = Field(alias="questionCount")
    extracted_text_length: int = Field(alias="extractedTextLength")
    generated_at: datetime = Field(alias="generatedAt")

    model_config = ConfigDict(populate_by_name=True)

class QuizResult(BaseModel):
    quiz: Quiz
    metadata: QuizMetadata
