"""
Shared pytest fixtures for the quizme test suite.
Documents are built in-process; the chat completion model is always mocked.
"""

import io
import json
import os
from unittest.mock import MagicMock

import httpx
import openai
import pytest

os.environ.setdefault("ENVIRONMENT", "development")

from langchain_core.messages import AIMessage

from quizme.services.document_service import DocumentService
from quizme.services.llm_client import CompletionClient
from quizme.services.pipeline import QuizPipeline
from quizme.services.quiz_service import QuizService
from quizme.utils.config import Settings

SUN_TEXT = (
    "The sun is a star. It provides light and heat to Earth. "
    "The Earth orbits around the sun once every year."
)

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def make_pdf(text: str) -> bytes:
    import fitz

    doc = fitz.open()
    page = doc.new_page()
    page.insert_textbox(fitz.Rect(50, 50, 550, 800), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(*paragraphs: str) -> bytes:
    from docx import Document

    doc = Document()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def api_status_error(status: int, error_cls=openai.APIStatusError):
    """Build the exception the openai SDK raises for a non-2xx reply."""
    body = {"error": {"message": f"remote said {status}"}}
    request = httpx.Request("POST", OPENAI_URL)
    response = httpx.Response(status, request=request, json=body)
    return error_cls(f"remote said {status}", response=response, body=body)


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, openai_api_key="sk-test-key", environment="development")


@pytest.fixture
def valid_quiz():
    return {
        "title": "Quiz from Study Material",
        "difficulty": "easy",
        "totalQuestions": 1,
        "questions": [
            {
                "id": 1,
                "question": "What is the sun?",
                "options": {"A": "A star", "B": "A planet", "C": "A moon", "D": "A comet"},
                "correctAnswer": "A",
                "explanation": "The material states that the sun is a star.",
            }
        ],
    }


@pytest.fixture
def fake_chat(monkeypatch):
    """Replace ChatOpenAI inside the completion client; returns the mocked class."""
    chat_cls = MagicMock(name="ChatOpenAI")
    monkeypatch.setattr("quizme.services.llm_client.ChatOpenAI", chat_cls)
    return chat_cls


@pytest.fixture
def reply_with(fake_chat):
    """Make the mocked model answer with the given text."""
    def _reply(content):
        if not isinstance(content, str):
            content = json.dumps(content)
        fake_chat.return_value.invoke.return_value = AIMessage(content=content)
        return fake_chat
    return _reply


@pytest.fixture
def pipeline(test_settings):
    quiz_service = QuizService(CompletionClient(test_settings), test_settings)
    return QuizPipeline(DocumentService(test_settings), quiz_service)


@pytest.fixture
def sun_text():
    return SUN_TEXT


@pytest.fixture
def pdf_bytes():
    return make_pdf


@pytest.fixture
def docx_bytes():
    return make_docx


@pytest.fixture
def status_error():
    return api_status_error
