"""Hadith and schedule records.

Store documents are validated into these models at the repository boundary,
so code downstream of the repository never handles raw dictionaries. Field
aliases follow the document field names (camelCase) used by the
``hadiths`` and ``dailyHadithSchedule`` collections.
"""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class _Document(BaseModel):
    """Base for store-backed records: alias-aware, ignores unknown fields."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_document(self) -> dict[str, Any]:
        """Serialize to a JSON-safe store document (without the id)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True)


class HadithText(BaseModel):
    """Translated text and narrator of a hadith."""

    narrator: str = Field(min_length=1)
    text: str = Field(min_length=1)


class HadithReference(_Document):
    """Source-book reference for a hadith."""

    book: str = Field(min_length=1)
    book_number: int | None = Field(default=None, alias="bookNumber")
    hadith_number: int | None = Field(default=None, alias="hadithNumber")

    @field_validator("book", mode="before")
    @classmethod
    def coerce_book(cls, v: Any) -> Any:
        """Book is numeric in some sources (collection number)."""
        return str(v) if isinstance(v, int) else v


class Hadith(_Document):
    """An immutable content record."""

    id: str | None = None
    arabic: str = ""
    english: HadithText
    reference: HadithReference
    chapter: str = ""
    category: str = ""
    difficulty: str = ""
    tags: list[str] = Field(default_factory=list)
    is_active: bool = Field(default=True, alias="isActive")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Identifiers may be numeric in the source data."""
        return str(v) if isinstance(v, int) else v

    @model_validator(mode="before")
    @classmethod
    def accept_flat_shape(cls, data: Any) -> Any:
        """Normalize the flat ``{text, book, narrator}`` document shape."""
        if not isinstance(data, dict) or "english" in data:
            return data
        if {"text", "narrator", "book"} <= data.keys():
            data = dict(data)
            data["english"] = {"narrator": data.pop("narrator"), "text": data.pop("text")}
            data["reference"] = {"book": data.pop("book")}
        return data

    @property
    def narrator(self) -> str:
        return self.english.narrator

    @property
    def text(self) -> str:
        return self.english.text

    @property
    def book(self) -> str:
        return self.reference.book

    def citation(self) -> str:
        """Human-readable source, e.g. 'Sahih al-Bukhari 1:1'."""
        parts = [self.reference.book]
        if self.reference.book_number is not None and self.reference.hadith_number is not None:
            parts.append(f"{self.reference.book_number}:{self.reference.hadith_number}")
        elif self.reference.hadith_number is not None:
            parts.append(str(self.reference.hadith_number))
        return " ".join(parts)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match over text, narrator, book and tags."""
        needle = term.lower()
        haystack = [self.arabic, self.english.text, self.english.narrator, self.reference.book]
        return any(needle in field.lower() for field in haystack) or any(
            needle in tag.lower() for tag in self.tags
        )


class DailySchedule(_Document):
    """Assignment of one hadith to a calendar date."""

    id: str | None = None
    date: str
    hadith_id: str = Field(alias="hadithId", min_length=1)
    featured: bool = True
    sent: bool = False
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        if not DATE_KEY_PATTERN.match(v):
            raise ValueError(f"Schedule date must be YYYY-MM-DD, got {v!r}")
        return v

    @field_validator("hadith_id", mode="before")
    @classmethod
    def coerce_hadith_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class CachedDaily(BaseModel):
    """Locally cached daily hadith and the day it was resolved for."""

    day: str
    hadith: Hadith


class HadithStats(BaseModel):
    """Catalogue statistics."""

    total: int = 0
    active: int = 0
    categories: dict[str, int] = Field(default_factory=dict)
    difficulties: dict[str, int] = Field(default_factory=dict)
