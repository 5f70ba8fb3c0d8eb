from langchain_core.prompts import PromptTemplate

from app.config import PREVIEW_CHARS, SUMMARY_INPUT_CHARS
from app.schemas import ChatMessage

SUMMARY_SYSTEM_PROMPT = "You are a helpful assistant that provides concise summaries."

_summary_prompt = PromptTemplate.from_template(
    "Briefly summarize the following text in 3 to 6 sentences:\n\n{text}"
)


def truncate(text: str, limit: int) -> str:
    # str slicing counts code points, so a cut never splits a character.
    return text[:limit]


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """The slice of extracted text returned to the browser."""
    return truncate(text, limit)


def build_summary_prompt(text: str, limit: int = SUMMARY_INPUT_CHARS) -> str:
    """Wrap document text in the summary instruction.

    Text beyond ``limit`` characters is dropped without notice to keep the
    request within the model's context window.
    """
    return _summary_prompt.format(text=truncate(text, limit))


def build_summary_messages(text: str, limit: int = SUMMARY_INPUT_CHARS) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SUMMARY_SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_summary_prompt(text, limit)),
    ]
