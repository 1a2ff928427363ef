import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quizme.errors import FileTooLarge, MissingDocument, QuizMeError
from quizme.schemas import Difficulty
from quizme.services.document_service import DocumentService
from quizme.services.llm_client import CompletionClient
from quizme.services.pipeline import QuizPipeline
from quizme.services.quiz_service import QuizService
from quizme.utils.config import settings

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

SAMPLE_TEXT = (
    "The sun is a star. It provides light and heat to Earth. "
    "The Earth orbits around the sun once every year."
)

app = FastAPI(title="Quiz Me API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

@lru_cache
def get_pipeline() -> QuizPipeline:
    """Build the services once per process and share them across requests."""
    quiz_service = QuizService(CompletionClient(settings), settings)
    return QuizPipeline(DocumentService(settings), quiz_service)

def _error_body(message: str, details: Optional[str]) -> dict:
    body = {"error": message}
    if details and settings.expose_error_details:
        body["details"] = details
    return body

@app.exception_handler(QuizMeError)
async def quizme_error_handler(request: Request, exc: QuizMeError):
    logger.error(f"{exc.code} on {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.details))

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content=_error_body("Internal server error", str(exc)))

@app.get("/api/health")
async def health():
    return {
        "status": "OK",
        "message": "Quiz Me API is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@app.get("/api/test-openai")
async def test_openai(pipeline: QuizPipeline = Depends(get_pipeline)):
    logger.info("Testing OpenAI connection...")
    quiz = await run_in_threadpool(pipeline.quiz_service.generate_quiz, SAMPLE_TEXT, Difficulty.EASY, 1)
    return {
        "success": True,
        "message": "OpenAI connection working!",
        "sampleQuiz": quiz.to_dict(),
    }

@app.post("/api/upload-document")
async def upload_document(
    document: Optional[UploadFile] = File(None),
    difficulty: Optional[str] = Form(None),
    question_count: Optional[str] = Form(None, alias="questionCount"),
    pipeline: QuizPipeline = Depends(get_pipeline),
):
    if document is None or not document.filename:
        raise MissingDocument("No file uploaded")

    too_large = FileTooLarge(f"File too large. Maximum size is {settings.max_upload_mb}MB.")
    if document.size is not None and document.size > settings.max_upload_bytes:
        raise too_large
    # size is unknown for some clients, so never read past the limit
    file_bytes = await document.read(settings.max_upload_bytes + 1)
    if len(file_bytes) > settings.max_upload_bytes:
        raise too_large

    logger.info(f"Document upload received: {document.filename} ({len(file_bytes)} bytes) difficulty={difficulty} questionCount={question_count}")
    result = await run_in_threadpool(pipeline.run, file_bytes, document.filename, difficulty, question_count)
    logger.info(f"Quiz generated successfully for {document.filename}")

    return {
        "success": True,
        "quiz": result.quiz.to_dict(),
        "metadata": result.metadata.model_dump(by_alias=True, mode="json"),
    }

def run():
    import uvicorn

    uvicorn.run("quizme.main:app", host=settings.host, port=settings.port)
