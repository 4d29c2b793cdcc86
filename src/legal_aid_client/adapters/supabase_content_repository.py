"""Supabase repository for categories and content."""

from dataclasses import dataclass

from supabase import Client

from legal_aid_client.domain.content import (
    Category,
    ContentDraft,
    ContentItem,
    ContentPreview,
)
from legal_aid_client.domain.errors import RowDecodeError
from legal_aid_client.viewmodels.home import ContentRepository

CATEGORIES_TABLE = "Categories"
CONTENT_TABLE = "Content"
_PREVIEW_COLUMNS = "ID_Post, ID_Category, created_at, title, url_header"


@dataclass
class SupabaseContentRepository(ContentRepository):
    """Supabase-backed repository for the content feed."""

    client: Client

    def list_categories(self) -> list[Category]:
        """Return all categories."""
        response = self.client.table(CATEGORIES_TABLE).select("*").execute()
        return [_parse_category(row) for row in response.data or []]

    def create_category(self, name: str) -> Category | None:
        """Insert a category and return it when echoed back."""
        response = (
            self.client.table(CATEGORIES_TABLE)
            .insert({"name_category": name})
            .execute()
        )
        return _parse_category(response.data[0]) if response.data else None

    def update_category(self, category_id: int, name: str) -> Category | None:
        """Rename a category."""
        response = (
            self.client.table(CATEGORIES_TABLE)
            .update({"name_category": name})
            .eq("ID_Category", category_id)
            .execute()
        )
        return _parse_category(response.data[0]) if response.data else None

    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        self.client.table(CATEGORIES_TABLE).delete().eq(
            "ID_Category", category_id
        ).execute()

    def list_content_previews(self) -> list[ContentPreview]:
        """Return content rows without their body."""
        response = self.client.table(CONTENT_TABLE).select(_PREVIEW_COLUMNS).execute()
        return [_parse_preview(row) for row in response.data or []]

    def get_content_item(self, content_id: int) -> ContentItem | None:
        """Return a full content row, if present."""
        response = (
            self.client.table(CONTENT_TABLE)
            .select("*")
            .eq("ID_Post", content_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def create_content(self, draft: ContentDraft) -> ContentItem | None:
        """Insert a content row."""
        response = (
            self.client.table(CONTENT_TABLE).insert(_content_payload(draft)).execute()
        )
        return _parse_item(response.data[0]) if response.data else None

    def update_content(
        self, content_id: int, draft: ContentDraft
    ) -> ContentItem | None:
        """Replace a content row's fields."""
        response = (
            self.client.table(CONTENT_TABLE)
            .update(_content_payload(draft))
            .eq("ID_Post", content_id)
            .execute()
        )
        return _parse_item(response.data[0]) if response.data else None

    def delete_content(self, content_id: int) -> None:
        """Delete a content row."""
        self.client.table(CONTENT_TABLE).delete().eq("ID_Post", content_id).execute()


def _content_payload(draft: ContentDraft) -> dict[str, object]:
    return {
        "ID_Category": draft.category_id,
        "title": draft.title,
        "url_header": draft.header_url,
        "text": draft.text,
    }


def _parse_category(row: dict[str, object]) -> Category:
    try:
        return Category(id=int(row["ID_Category"]), name=str(row["name_category"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise RowDecodeError(CATEGORIES_TABLE, row, str(exc)) from exc


def _parse_preview(row: dict[str, object]) -> ContentPreview:
    try:
        return ContentPreview(
            id=int(row["ID_Post"]),
            category_id=int(row["ID_Category"]),
            created_at=str(row["created_at"]),
            title=str(row["title"]),
            header_url=str(row["url_header"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RowDecodeError(CONTENT_TABLE, row, str(exc)) from exc


def _parse_item(row: dict[str, object]) -> ContentItem:
    try:
        text = row.get("text")
        return ContentItem(
            id=int(row["ID_Post"]),
            category_id=int(row["ID_Category"]),
            created_at=str(row["created_at"]),
            title=str(row["title"]),
            header_url=str(row["url_header"]),
            text=str(text) if text is not None else None,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RowDecodeError(CONTENT_TABLE, row, str(exc)) from exc
