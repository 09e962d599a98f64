import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.concurrency import run_in_threadpool

from config import ConfigurationError, Settings, get_client, get_settings
from models.schemas import ConsultRequest, ConsultationResult
from services.ai_service import RecommendationError, recommend_book
from services.cover_service import resolve_cover

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Consult"])


@router.options("/consult")
def consult_preflight():
    return Response(status_code=200)


@router.post("/consult", response_model=ConsultationResult)
async def consult(request: Optional[ConsultRequest] = None, settings: Settings = Depends(get_settings)):
    """
    Asks the Archivist for one book, then enriches it with cover and rating data.
    """
    query = (request.query or "").strip() if request else ""
    if not query:
        raise HTTPException(status_code=400, detail="Query is required")

    try:
        settings.require_credentials()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    client = get_client(settings.gemini_api_key, settings.timeout)

    try:
        book = await run_in_threadpool(recommend_book, client, query, settings.models)
    except RecommendationError as e:
        logger.error("Server critical error: %s", e)
        raise HTTPException(status_code=500, detail=f"Archivist error: {e}")

    metadata = await run_in_threadpool(
        resolve_cover, book.title, book.author, settings.books_api_key, settings.timeout
    )
    return ConsultationResult.combine(book, metadata)
