import json
import logging
from typing import Any, Optional, Tuple

from pydantic import ValidationError

from quizme.errors import InvalidQuizStructure, UnparsableResponse
from quizme.schemas import Difficulty, Quiz
from quizme.services.llm_client import CompletionClient
from quizme.services.prompt_builder import build_prompt
from quizme.utils.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

OPTION_LABELS = ("A", "B", "C", "D")
RAW_EXCERPT_CHARS = 500

def find_object_span(text: str) -> Optional[Tuple[int, int]]:
    """Return (start, end) of the first balanced top-level {...} in text.

    Braces inside JSON string literals are ignored. Returns None when there is
    no opening brace or it is never closed.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return start, i + 1
    return None

def parse_response(text: str) -> Any:
    """Extract JSON from LLM response text"""
    try:
        # Try direct parsing first
        return json.loads(text)
    except (TypeError, json.JSONDecodeError):
        pass

    # Handle wrapped JSON (prose, code fences)
    span = find_object_span(text or "")
    if span:
        try:
            return json.loads(text[span[0]:span[1]])
        except json.JSONDecodeError:
            pass

    logger.error(f"Failed to extract JSON from: {(text or '')[:RAW_EXCERPT_CHARS]}")
    raise UnparsableResponse(
        "Failed to parse quiz JSON from OpenAI response",
        details=(text or "")[:RAW_EXCERPT_CHARS],
    )

def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

def validate_quiz(quiz_data: Any) -> Quiz:
    """Check the quiz structure and return it as a Quiz, failing on the first problem."""
    if not isinstance(quiz_data, dict):
        raise InvalidQuizStructure("Quiz must be a valid object")

    questions = quiz_data.get("questions")
    if not isinstance(questions, list):
        raise InvalidQuizStructure("Quiz must contain a questions array")
    if not questions:
        raise InvalidQuizStructure("Quiz must contain at least one question")

    seen_ids = []
    for number, question in enumerate(questions, start=1):
        if not isinstance(question, dict) or any(
            _is_blank(question.get(field)) for field in ("id", "question", "options", "correctAnswer")
        ):
            raise InvalidQuizStructure(f"Question {number} is missing required fields")

        if question["id"] in seen_ids:
            raise InvalidQuizStructure(f"Question {number} has a duplicate id")
        seen_ids.append(question["id"])

        options = question["options"]
        if not isinstance(options, dict) or any(_is_blank(options.get(label)) for label in OPTION_LABELS):
            raise InvalidQuizStructure(f"Question {number} must have options A, B, C, and D")

        if question["correctAnswer"] not in OPTION_LABELS:
            raise InvalidQuizStructure(f"Question {number} must have a correct answer of A, B, C, or D")

    try:
        return Quiz.model_validate(quiz_data)
    except ValidationError as e:
        logger.error(f"Quiz validation failed: {e}")
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidQuizStructure(f"Quiz field {location} is invalid", details=first["msg"]) from e

class QuizService:
    def __init__(self, client: CompletionClient = None, settings: Settings = None):
        self.settings = settings or default_settings
        self.client = client or CompletionClient(self.settings)

    def generate_quiz(self, context: str, difficulty: Difficulty, question_count: int) -> Quiz:
        """Generate one quiz from study text. Every failure propagates; nothing is retried."""
        difficulty = Difficulty(difficulty)
        logger.info(f"Starting quiz generation: difficulty={difficulty.value} questions={question_count} text_length={len(context)}")
        payload = build_prompt(
            context,
            difficulty,
            question_count,
            max_chars=self.settings.max_document_chars,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
        )
        raw = self.client.complete(payload)
        quiz = validate_quiz(parse_response(raw))
        logger.info(f"Quiz validated with {len(quiz.questions)} questions")
        return quiz
