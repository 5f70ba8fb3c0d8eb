import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from app.config import ASK_MODEL
from app.schemas import AskRequest, AskResponse, ChatMessage, ErrorResponse
from app.services.llm import (
    NO_ANSWER,
    CompletionClient,
    CompletionServiceError,
    MissingAPIKeyError,
    get_completion_client,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post(
    "/ask",
    response_model=AskResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def ask(req: AskRequest, client: CompletionClient = Depends(get_completion_client)):
    """Answer a free-text question with the completion service."""
    if not req.question or not req.question.strip():
        raise HTTPException(status_code=400, detail="Missing question")

    logger.info("Answering question (%d chars)", len(req.question))
    try:
        answer = await run_in_threadpool(
            client.complete,
            ASK_MODEL,
            [ChatMessage(role="user", content=req.question)],
            fallback=NO_ANSWER,
        )
    except MissingAPIKeyError as exc:
        logger.error("Completion service API key is not configured")
        raise HTTPException(status_code=500, detail=exc.message)
    except CompletionServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message)
    except Exception:
        logger.exception("Unexpected error while answering question")
        raise HTTPException(status_code=500, detail="Server error")

    return AskResponse(answer=answer)
