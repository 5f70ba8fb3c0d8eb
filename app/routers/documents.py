import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.config import SUMMARY_MAX_OUTPUT_TOKENS, SUMMARY_MODEL, SUMMARY_TEMPERATURE
from app.schemas import CompletionOptions, ErrorResponse, UploadResponse
from app.services.llm import (
    NO_SUMMARY,
    CompletionClient,
    CompletionServiceError,
    MissingAPIKeyError,
    get_completion_client,
)
from app.services.parser import ExtractionError, extract_text
from app.services.prompts import build_summary_messages, preview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_SUMMARY_OPTIONS = CompletionOptions(
    max_output_tokens=SUMMARY_MAX_OUTPUT_TOKENS,
    temperature=SUMMARY_TEMPERATURE,
)


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def upload(
    file: UploadFile | None = File(None),
    document: UploadFile | None = File(None),
    client: CompletionClient = Depends(get_completion_client),
):
    """Upload a document (PDF, DOCX, or TXT), extract its text, and summarize it."""
    upload_file = file or document
    if upload_file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        data = await upload_file.read()
        logger.info(
            "Received %r (%s, %d bytes)",
            upload_file.filename, upload_file.content_type, len(data),
        )

        try:
            text = await run_in_threadpool(
                extract_text, data, upload_file.content_type, upload_file.filename
            )
        except ExtractionError:
            text = ""
        if not text.strip():
            raise HTTPException(status_code=400, detail="Could not extract text")

        logger.info("Extracted %d characters from %r", len(text), upload_file.filename)
        summary = await run_in_threadpool(
            client.complete,
            SUMMARY_MODEL,
            build_summary_messages(text),
            _SUMMARY_OPTIONS,
            fallback=NO_SUMMARY,
        )
    except HTTPException:
        raise
    except MissingAPIKeyError as exc:
        logger.error("Completion service API key is not configured")
        raise HTTPException(status_code=500, detail=exc.message)
    except CompletionServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message)
    except Exception:
        logger.exception("Unexpected error while processing upload %r", upload_file.filename)
        raise HTTPException(status_code=500, detail="Server error during file upload")
    finally:
        await upload_file.close()

    return UploadResponse(
        summary=summary,
        text=preview(text),
        filename=upload_file.filename or None,
    )
