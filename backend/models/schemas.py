from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# --- AI Recommendation Models ---
class BookRecommendation(BaseModel):
    title: str = Field(description="The exact title of the book.")
    author: str = Field(description="The author of the book.")
    reason: str = Field(description="The Archivist's note on why this book matches the query.")

# --- Catalog Models ---
class CoverMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cover_url: Optional[str] = Field(default=None, alias="coverUrl", description="Displayable cover image URL, if one was found.")
    rating: Optional[float] = Field(default=None, description="Average catalog rating out of 5.")
    count: int = Field(default=0, description="Number of catalog ratings.")
    isbn: Optional[str] = Field(default=None, exclude=True, description="Identifier used for the secondary cover lookup.")

# --- API Response Models ---
class ConsultationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    author: str
    reason: str
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")
    rating: Optional[float] = None
    count: int = 0

    @classmethod
    def combine(cls, book: BookRecommendation, metadata: CoverMetadata) -> "ConsultationResult":
        return cls(
            title=book.title,
            author=book.author,
            reason=book.reason,
            cover_url=metadata.cover_url,
            rating=metadata.rating,
            count=metadata.count,
        )

class CoverResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    author: str
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")
    rating: Optional[float] = None
    count: int = 0

# --- Request Models ---
class ConsultRequest(BaseModel):
    query: Optional[str] = Field(default=None, description="Free text: a synopsis, a quote, or a mood.", examples=["A lonely lighthouse keeper and a storm that never ends."])
