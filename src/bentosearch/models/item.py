"""Result item models — One normalized hit from any engine.

Engines map their raw records onto :class:`Item`. Fields that an engine
cannot fill are left as ``None``. ``engine_id``, ``decorator`` and
``display_configuration`` are stamped by the executor after the search,
engines should not set them.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ItemFormat(str, Enum):
    """Known item formats. Engines may use any other string as well.

    Capitalized values are schema.org type names, lower-case values have no
    schema.org equivalent.
    """

    ARTICLE = "Article"
    BOOK = "Book"
    BOOK_ITEM = "book_item"
    CONFERENCE_PAPER = "conference_paper"
    DISSERTATION = "dissertation"
    REPORT = "report"
    PERIODICAL = "Periodical"
    MOVIE = "Movie"
    MUSIC_RECORDING = "MusicRecording"
    PHOTOGRAPH = "Photograph"
    SOFTWARE = "SoftwareApplication"
    WEB_PAGE = "WebPage"


class Author(BaseModel):
    """An author of a result item."""

    first: str | None = Field(default=None, description="Given name")
    last: str | None = Field(default=None, description="Family name")
    middle: str | None = Field(default=None, description="Middle name or initial")
    display: str | None = Field(default=None, description="Preformatted display form, if the source has one")

    @property
    def display_name(self) -> str:
        """``display`` if set, otherwise ``"Last, F"``."""
        if self.display:
            return self.display
        if self.last and self.first:
            return f"{self.last}, {self.first[0]}"
        return self.last or self.first or ""


class Item(BaseModel):
    """A single normalized search hit."""

    title: str | None = Field(default=None, description="Main title")
    subtitle: str | None = Field(default=None, description="Subtitle")
    link: str | None = Field(default=None, description="Best link to the item")
    format: ItemFormat | str | None = Field(default=None, description="Item format, see ItemFormat")
    format_str: str | None = Field(default=None, description="Human readable format, overrides format for display")
    language_code: str | None = Field(default=None, description="ISO 639 language code")

    authors: list[Author] = Field(default_factory=list, description="Authors in source order")

    year: int | None = Field(default=None, description="Publication year")
    publication_date: date | None = Field(default=None, description="Full publication date, when known")
    volume: str | None = Field(default=None)
    issue: str | None = Field(default=None)
    start_page: str | None = Field(default=None)
    end_page: str | None = Field(default=None)
    journal_title: str | None = Field(default=None, description="Title of the containing journal")
    source_title: str | None = Field(default=None, description="Title of any other containing work")
    issn: str | None = Field(default=None)
    doi: str | None = Field(default=None)
    isbn: str | None = Field(default=None)
    oclcnum: str | None = Field(default=None)
    pmid: str | None = Field(default=None)
    publisher: str | None = Field(default=None)
    abstract: str | None = Field(default=None)
    snippets: list[str] = Field(default_factory=list, description="Highlighted query-in-context snippets")
    unique_id: str | None = Field(default=None, description="Engine-local identifier of the record")

    engine_id: str | None = Field(default=None, description="Id of the engine that produced the item")
    decorator: str | None = Field(default=None, description="Presentation adapter name from engine config")
    display_configuration: dict[str, Any] = Field(
        default_factory=dict,
        description="Engine for_display configuration, opaque to the core",
    )
    custom_data: dict[str, Any] = Field(default_factory=dict, description="Engine-specific extra data")

    @property
    def complete_title(self) -> str:
        """Title joined with subtitle, ``"Title: Subtitle"``."""
        title = self.title or ""
        if self.subtitle:
            return f"{title}: {self.subtitle}" if title else self.subtitle
        return title

    def author_display(self, max_authors: int = 3) -> str:
        """Semicolon-separated author names, truncated with ``et al.``."""
        names = [a.display_name for a in self.authors if a.display_name]
        if len(names) > max_authors:
            return "; ".join(names[:max_authors]) + " et al."
        return "; ".join(names)
