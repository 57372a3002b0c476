"""Pydantic models for Scrapbox JSON exports."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scrapbox2notion.markdown.tags import extract_tags


class Line(BaseModel):
    """A single line of a Scrapbox page."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    created: int = 0
    updated: int = 0
    user_id: str = Field(default="", alias="userId")


class Document(BaseModel):
    """Immutable translation input: a page title, its lines, and known link targets."""

    model_config = ConfigDict(frozen=True)

    title: str
    lines: tuple[Line, ...] = ()
    link_targets: tuple[str, ...] = ()

    @classmethod
    def from_texts(
        cls, title: str, texts: list[str], link_targets: list[str] | None = None
    ) -> Document:
        return cls(
            title=title,
            lines=tuple(Line(text=t) for t in texts),
            link_targets=tuple(link_targets or ()),
        )


class Page(BaseModel):
    """A Scrapbox page as it appears in an export."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    created: int = 0
    updated: int = 0
    id: str = ""
    views: int = 0
    lines: list[Line] = Field(default_factory=list)
    links_lc: list[str] = Field(default_factory=list, alias="linksLc")

    @field_validator("lines", mode="before")
    @classmethod
    def _coerce_plain_lines(cls, value: object) -> object:
        # Exports made without line metadata list bare strings.
        if isinstance(value, list):
            return [{"text": v} if isinstance(v, str) else v for v in value]
        return value

    @field_validator("links_lc", mode="before")
    @classmethod
    def _null_links(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def tags(self) -> list[str]:
        return extract_tags(self.lines)

    def to_document(self) -> Document:
        return Document(
            title=self.title,
            lines=tuple(self.lines),
            link_targets=tuple(link.lower() for link in self.links_lc),
        )


class ScrapboxExport(BaseModel):
    """Root of a Scrapbox project export."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    display_name: str = Field(default="", alias="displayName")
    exported: int = 0
    pages: list[Page] = Field(default_factory=list)
