import io
import time

import pytest
from docx import Document
from fastapi.testclient import TestClient
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from app.main import app
from app.services.llm import CompletionClient, get_completion_client


class ScriptedChatModel(BaseChatModel):
    """Chat model double: replies with ``reply``, no candidates when it is None, or raises ``error``.

    ``delay`` makes each call block for that many seconds.
    """

    reply: str | None = "Fake reply"
    error: Exception | None = None
    delay: float = 0.0
    calls: list = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.calls.append(messages)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.reply is None:
            return ChatResult(generations=[])
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content=self.reply))])


class RecordingFactory:
    def __init__(self, chat_model: ScriptedChatModel):
        self.chat_model = chat_model
        self.requests = []

    def __call__(self, api_key, model, options):
        self.requests.append({"api_key": api_key, "model": model, "options": options})
        return self.chat_model


@pytest.fixture
def chat_model():
    return ScriptedChatModel()


@pytest.fixture
def factory(chat_model):
    return RecordingFactory(chat_model)


@pytest.fixture
def completion_client(factory):
    return CompletionClient(api_key="test-key", chat_model_factory=factory)


@pytest.fixture
def client(completion_client):
    app.dependency_overrides[get_completion_client] = lambda: completion_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def keyless_client(factory):
    app.dependency_overrides[get_completion_client] = lambda: CompletionClient(
        api_key="", chat_model_factory=factory
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_pdf(text: str) -> bytes:
    """Build a one-page PDF showing ``text`` in Helvetica."""
    content = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


def make_docx(*paragraphs: str, table: list[list[str]] | None = None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table:
        tbl = doc.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                tbl.cell(r, c).text = value
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


@pytest.fixture
def pdf_bytes():
    return make_pdf("Quarterly revenue grew by twelve percent")


@pytest.fixture
def docx_bytes():
    return make_docx(
        "Meeting notes",
        "The launch moves to March.",
        table=[["Owner", "Task"], ["Ana", "Release plan"]],
    )
