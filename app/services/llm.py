import functools
import logging
from typing import Any, Callable

from google.api_core.exceptions import GoogleAPICallError
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import convert_to_messages
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_google_genai.chat_models import ChatGoogleGenerativeAIError

from app import config
from app.schemas import ChatMessage, CompletionOptions

logger = logging.getLogger(__name__)

NO_ANSWER = "No answer generated."
NO_SUMMARY = "No summary generated"
UPSTREAM_ERROR = "Completion service error"

ChatModelFactory = Callable[[str, str, CompletionOptions], BaseChatModel]


class MissingAPIKeyError(Exception):
    def __init__(self, message: str = "Missing API key"):
        super().__init__(message)
        self.message = message


class CompletionServiceError(Exception):
    """The completion service answered with an error."""

    def __init__(self, message: str = UPSTREAM_ERROR):
        super().__init__(message)
        self.message = message


def _without_retry(generate_content: Callable[..., Any]) -> Callable[..., Any]:
    """Call the Google client with its built-in retry policy switched off."""

    @functools.wraps(generate_content)
    def call(*args: Any, **kwargs: Any) -> Any:
        kwargs["retry"] = None
        return generate_content(*args, **kwargs)

    return call


def _gemini_chat_model(api_key: str, model: str, options: CompletionOptions) -> BaseChatModel:
    llm = ChatGoogleGenerativeAI(
        model=model,
        google_api_key=api_key,
        # stop_after_attempt(1): langchain makes one attempt.
        max_retries=1,
        **options.model_dump(exclude_none=True),
    )
    # The generated client retries 503s on its own unless told otherwise.
    llm.client.generate_content = _without_retry(llm.client.generate_content)
    return llm


def _upstream_message(exc: Exception) -> str:
    # langchain wraps some API errors; the Google error underneath carries the payload message.
    for err in (exc.__cause__, exc):
        if isinstance(err, GoogleAPICallError) and err.message:
            return err.message
    if isinstance(exc, ChatGoogleGenerativeAIError) and str(exc).strip():
        return str(exc)
    return UPSTREAM_ERROR


class CompletionClient:
    """Sends chat messages to the completion service and returns the reply text.

    The API key is supplied at construction; it is only checked when a
    completion is requested so that input validation errors are reported
    first.
    """

    def __init__(self, api_key: str, chat_model_factory: ChatModelFactory | None = None):
        self.api_key = api_key
        self._chat_model_factory = chat_model_factory or _gemini_chat_model

    def complete(
        self,
        model: str,
        messages: list[ChatMessage],
        options: CompletionOptions | None = None,
        fallback: str = NO_ANSWER,
    ) -> str:
        if not self.api_key:
            raise MissingAPIKeyError()

        options = options or CompletionOptions()
        llm = self._chat_model_factory(self.api_key, model, options)
        prompt = convert_to_messages([(m.role, m.content) for m in messages])

        try:
            result = llm.generate([prompt])
        except (ChatGoogleGenerativeAIError, GoogleAPICallError) as exc:
            logger.error("Completion service error for model %s: %s", model, exc)
            raise CompletionServiceError(_upstream_message(exc)) from exc

        candidates = result.generations[0] if result.generations else []
        if not candidates:
            logger.info("Completion service returned no candidates for model %s", model)
            return fallback

        # Surrounding whitespace is dropped; a blank reply counts as no candidate.
        text = (candidates[0].text or "").strip()
        return text or fallback


def get_completion_client() -> CompletionClient:
    """FastAPI dependency; tests override it with a fake client."""
    return CompletionClient(api_key=config.GEMINI_API_KEY)
