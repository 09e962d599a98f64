from fastapi import APIRouter, Depends, HTTPException, Query
from config import Settings, get_settings
from models.schemas import CoverResult
from services.cover_service import resolve_cover

router = APIRouter(prefix="/api", tags=["Books"])

@router.get("/covers", response_model=CoverResult)
def get_cover(
    title: str = Query(..., examples=["The Housemaid"]),
    author: str = Query("", examples=["Freida McFadden"]),
    settings: Settings = Depends(get_settings)
):
    if not settings.books_api_key:
        raise HTTPException(status_code=500, detail="Server Configuration Error: Missing Keys")

    metadata = resolve_cover(title, author, settings.books_api_key, settings.timeout)
    return CoverResult(
        title=title,
        author=author,
        cover_url=metadata.cover_url,
        rating=metadata.rating,
        count=metadata.count
    )
