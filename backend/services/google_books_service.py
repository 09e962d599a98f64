import logging
import re
from typing import Optional

import requests

from config import DEFAULT_TIMEOUT
from models.schemas import CoverMetadata

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"

_UNSAFE_CHARS = re.compile(r"[^\w\s]")


def sanitize(text: str) -> str:
    """Strips punctuation so the text can be used as a search key."""
    return _UNSAFE_CHARS.sub("", text or "")


def secure_url(url: str) -> str:
    return url.replace("http:", "https:", 1) if url.startswith("http:") else url


def pick_isbn(identifiers: Optional[list]) -> Optional[str]:
    if not identifiers:
        return None
    preferred = next((i for i in identifiers if i.get("type") == "ISBN_13"), identifiers[0])
    return preferred.get("identifier") or None


def lookup_volume(title: str, author: str, api_key: str, timeout: float = DEFAULT_TIMEOUT) -> CoverMetadata:
    """
    Looks up the best matching volume on Google Books.
    Raises requests.RequestException on transport or status errors.
    """
    params = {
        "q": f"{sanitize(title)} {sanitize(author)}",
        "maxResults": 1,
        "key": api_key,
    }
    res = requests.get(GOOGLE_BOOKS_URL, params=params, timeout=timeout)
    res.raise_for_status()
    data = res.json()

    items = data.get("items") or []
    if not items:
        logger.info("Google Books has no volume for %r by %s", title, author)
        return CoverMetadata()

    info = items[0].get("volumeInfo", {})
    thumbnail = (info.get("imageLinks") or {}).get("thumbnail")

    return CoverMetadata(
        cover_url=secure_url(thumbnail) if thumbnail else None,
        rating=info.get("averageRating") or None,
        count=info.get("ratingsCount") or 0,
        isbn=pick_isbn(info.get("industryIdentifiers")),
    )
