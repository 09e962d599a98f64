import logging
from typing import Optional

import requests

from config import DEFAULT_TIMEOUT
from services.google_books_service import sanitize

logger = logging.getLogger(__name__)

OPEN_LIBRARY_SEARCH_URL = "https://openlibrary.org/search.json"
OPEN_LIBRARY_COVERS_URL = "https://covers.openlibrary.org/b"


def isbn_cover_url(isbn: str) -> str:
    # default=false makes Open Library answer 404 instead of a blank image
    return f"{OPEN_LIBRARY_COVERS_URL}/isbn/{isbn}-L.jpg?default=false"


def id_cover_url(cover_id) -> str:
    return f"{OPEN_LIBRARY_COVERS_URL}/id/{cover_id}-L.jpg"


def cover_exists(url: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """
    HEAD-checks a cover URL. Any failure counts as "no cover".
    """
    try:
        res = requests.head(url, timeout=timeout, allow_redirects=True)
    except requests.exceptions.RequestException as e:
        logger.warning("Open Library check failed for %s: %s", url, e)
        return False

    if not res.ok:
        logger.info("Open Library returned %s for %s", res.status_code, url)
    return res.ok


def search_cover(title: str, author: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[str]:
    """
    Fuzzy title/author search on Open Library.
    Returns the first hit's cover URL, or None.
    """
    params = {"title": sanitize(title), "author": sanitize(author), "limit": 1}
    try:
        res = requests.get(OPEN_LIBRARY_SEARCH_URL, params=params, timeout=timeout)
        res.raise_for_status()
        data = res.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning("Open Library search failed for %r by %s: %s", title, author, e)
        return None

    docs = data.get("docs") or []
    if not docs or not docs[0].get("cover_i"):
        return None
    return id_cover_url(docs[0]["cover_i"])
