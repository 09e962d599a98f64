import logging
from typing import Callable, Optional

from config import DEFAULT_TIMEOUT
from models.schemas import CoverMetadata
from services.google_books_service import lookup_volume
from services.openlibrary_service import cover_exists, isbn_cover_url, search_cover

logger = logging.getLogger(__name__)

# A secondary strategy gets (title, author, metadata, timeout) and returns a cover URL or None.
CoverStrategy = Callable[[str, str, CoverMetadata, float], Optional[str]]


def cover_by_isbn(title: str, author: str, metadata: CoverMetadata, timeout: float) -> Optional[str]:
    if not metadata.isbn:
        return None
    logger.info("No Google cover for %r. Trying Open Library for ISBN %s", title, metadata.isbn)
    url = isbn_cover_url(metadata.isbn)
    return url if cover_exists(url, timeout=timeout) else None


def cover_by_search(title: str, author: str, metadata: CoverMetadata, timeout: float) -> Optional[str]:
    logger.info("Searching Open Library for %r by %s", title, author)
    return search_cover(title, author, timeout=timeout)


SECONDARY_STRATEGIES: list[CoverStrategy] = [cover_by_isbn, cover_by_search]


def resolve_cover(title: str, author: str, api_key: str, timeout: float = DEFAULT_TIMEOUT) -> CoverMetadata:
    """
    Finds rating data and a cover for a book.

    Google Books is asked first. When it has no thumbnail, the secondary
    strategies run in order until one returns a URL. No lookup error ever
    leaves this function: a book without a cover is still a valid result.
    """
    try:
        metadata = lookup_volume(title, author, api_key, timeout=timeout)
    except Exception as e:
        logger.warning("Google Books lookup failed for %r by %s: %s", title, author, e)
        metadata = CoverMetadata()

    if metadata.cover_url:
        return metadata

    for strategy in SECONDARY_STRATEGIES:
        try:
            url = strategy(title, author, metadata, timeout)
        except Exception as e:
            logger.warning("Cover strategy %s failed for %r: %s", strategy.__name__, title, e)
            continue
        if url:
            logger.info("Cover for %r resolved by %s", title, strategy.__name__)
            return metadata.model_copy(update={"cover_url": url})

    logger.info("No cover found for %r by %s", title, author)
    return metadata
