import logging
from datetime import datetime, timezone

from pydantic import ValidationError

from quizme.errors import InsufficientText, InvalidParameters
from quizme.schemas import GenerationRequest, QuizMetadata, QuizResult
from quizme.services.document_service import DocumentService
from quizme.services.quiz_service import QuizService

logger = logging.getLogger(__name__)

def parse_generation_request(difficulty, question_count) -> GenerationRequest:
    """Validate difficulty and question count before any work is done."""
    if difficulty in (None, "") or question_count in (None, ""):
        raise InvalidParameters("Missing required parameters: difficulty and questionCount")
    try:
        return GenerationRequest(difficulty=difficulty, question_count=question_count)
    except ValidationError as e:
        first = e.errors()[0]
        field = first["loc"][0] if first["loc"] else "request"
        raise InvalidParameters(f"Invalid value for {field}", details=first["msg"]) from e

class QuizPipeline:
    """Document upload to validated quiz: extract, gate, then generate.

    Stages run in order and the first failure ends the request.
    """

    def __init__(self, document_service: DocumentService, quiz_service: QuizService):
        self.document_service = document_service
        self.quiz_service = quiz_service

    def run(self, file_bytes: bytes, filename: str, difficulty, question_count) -> QuizResult:
        request = parse_generation_request(difficulty, question_count)

        text = self.document_service.extract_text(file_bytes, filename)
        if not text:
            logger.warning(f"No text extracted from {filename}")
            raise InsufficientText("Could not extract text from the document")
        if not self.document_service.is_sufficient(text):
            logger.warning(f"Extracted text too short ({len(text)} characters) in {filename}")
            raise InsufficientText(
                "Document does not contain enough text for quiz generation "
                f"(minimum {self.document_service.settings.min_text_length} characters required)"
            )

        quiz = self.quiz_service.generate_quiz(text, request.difficulty, request.question_count)
        return QuizResult(
            quiz=quiz,
            metadata=QuizMetadata(
                filename=filename,
                difficulty=request.difficulty,
                question_count=request.question_count,
                extracted_text_length=len(text),
                generated_at=datetime.now(timezone.utc),
            ),
        )
