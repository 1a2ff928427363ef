import logging

import openai
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from quizme.errors import (
    CompletionTimeout,
    InvalidCredential,
    MissingCredential,
    QuotaExceeded,
    RateLimited,
    RemoteFailure,
    Unauthorized,
)
from quizme.schemas import PromptPayload
from quizme.utils.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

API_KEY_PREFIX = "sk-"

# Remote statuses the caller sees as their own error kind; anything else is a RemoteFailure.
STATUS_ERRORS = {
    401: (Unauthorized, "Invalid OpenAI API key. Please check your API key."),
    402: (QuotaExceeded, "OpenAI API quota exceeded. Please check your billing."),
    429: (RateLimited, "OpenAI API rate limit exceeded. Please try again later."),
}

class CompletionClient:
    """Single-shot chat completion against an OpenAI compatible endpoint.

    Every call makes exactly one request with a fixed deadline and no retries.
    Transport and HTTP failures come back as quizme.errors types.
    """

    def __init__(self, settings: Settings = None):
        self.settings = settings or default_settings

    def _check_credential(self) -> str:
        api_key = self.settings.openai_api_key
        if not api_key:
            raise MissingCredential("OpenAI API key is not set in environment variables")
        if not api_key.startswith(API_KEY_PREFIX):
            raise InvalidCredential(f"OpenAI API key appears to be invalid (should start with {API_KEY_PREFIX})")
        return api_key

    def _build_llm(self, api_key: str, payload: PromptPayload) -> ChatOpenAI:
        return ChatOpenAI(
            model=self.settings.openai_model,
            api_key=api_key,
            base_url=self.settings.openai_api_url,
            timeout=self.settings.request_timeout,
            max_retries=0,
            max_tokens=payload.max_tokens,
            temperature=payload.temperature,
        )

    def complete(self, payload: PromptPayload) -> str:
        api_key = self._check_credential()
        llm = self._build_llm(api_key, payload)
        messages = [
            SystemMessage(content=payload.system),
            HumanMessage(content=payload.prompt),
        ]

        logger.info(f"Calling {self.settings.openai_model} (prompt length {len(payload.prompt)})")
        try:
            response = llm.invoke(messages)
        except openai.APITimeoutError as e:
            logger.error(f"OpenAI request timed out after {self.settings.request_timeout}s")
            raise CompletionTimeout("OpenAI API request timed out. Please try again.", details=str(e)) from e
        except openai.APIStatusError as e:
            raise self._classify_status(e) from e
        except openai.APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            raise RemoteFailure("Quiz generation failed", details=str(e)) from e

        content = response.content if isinstance(response.content, str) else ""
        logger.info(f"OpenAI response preview: {content[:200]}")
        return content

    def _classify_status(self, error: openai.APIStatusError):
        status = error.status_code
        logger.error(f"OpenAI API error response: status={status} body={error.body}")
        if status in STATUS_ERRORS:
            error_type, message = STATUS_ERRORS[status]
            return error_type(message, details=error.message)
        return RemoteFailure(
            "Quiz generation failed",
            details=f"OpenAI API returned {status}: {error.message}",
            status=status,
        )
