"""Domain models for the news and content feed."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Category:
    """A content category."""

    id: int
    name: str


@dataclass(frozen=True)
class ContentPreview:
    """Content row without its body, used by the feed."""

    id: int
    category_id: int
    created_at: str
    title: str
    header_url: str
    category: Category | None = None


@dataclass(frozen=True)
class ContentItem:
    """Full content row."""

    id: int
    category_id: int
    created_at: str
    title: str
    header_url: str
    text: str | None = None
    category: Category | None = None


@dataclass(frozen=True)
class ContentDraft:
    """Content fields written on insert or update."""

    category_id: int
    title: str
    header_url: str
    text: str


def attach_categories(
    previews: list[ContentPreview], categories: list[Category]
) -> list[ContentPreview]:
    """Resolve each preview's category by id; unknown ids stay unresolved."""
    by_id = {category.id: category for category in categories}
    return [
        replace(preview, category=by_id.get(preview.category_id))
        for preview in previews
    ]
