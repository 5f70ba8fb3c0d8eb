from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class CompletionOptions(BaseModel):
    max_output_tokens: int | None = None
    temperature: float | None = None


class AskRequest(BaseModel):
    # Optional so a missing question maps to a 400 instead of a validation error.
    question: str | None = None


class AskResponse(BaseModel):
    answer: str


class UploadResponse(BaseModel):
    summary: str
    text: str
    filename: str | None


class ErrorResponse(BaseModel):
    error: str
