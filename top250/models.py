"""Pydantic models for discovered pages and extracted listing entries.

Both models are frozen: a descriptor or record never changes after the
stage that produced it.
"""

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class PageDescriptor(BaseModel):
    """One listing page of the ranking.

    Attributes:
        number: 1-based page number as shown in the paginator.
        relative_path: Link target appended to the target URL. Empty for page 1.
    """

    model_config = ConfigDict(frozen=True)

    number: PositiveInt
    relative_path: str = ""


class ItemRecord(BaseModel):
    """Structured fields of one ranked entry.

    Every field is a best-effort string; a node missing from the markup
    yields an empty string for that field only.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Primary title")
    subtitle: str = Field(default="", description="Original-language title")
    other_titles: str = Field(default="", description="Alternative titles")
    description: str = Field(default="", description="Credits line")
    year: str = Field(default="", description="Release year(s)")
    region: str = Field(default="", description="Production region(s)")
    genre_tags: str = Field(default="", description="Space separated genres")
    rating_score: str = Field(default="", description="Rating as displayed")
    rating_count: str = Field(default="", description="Number of ratings, digits only")
    quote: str = Field(default="", description="One-line quote")
