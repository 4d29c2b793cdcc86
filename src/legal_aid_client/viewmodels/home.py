"""State for the home feed: categories and content."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from functools import partial
from typing import Protocol

from legal_aid_client.domain.content import (
    Category,
    ContentDraft,
    ContentItem,
    ContentPreview,
    attach_categories,
)
from legal_aid_client.services.collections import (
    Mutation,
    RemoteCollection,
    UpdateStrategy,
)
from legal_aid_client.services.media import MediaService
from legal_aid_client.services.observable import Observable, combine
from legal_aid_client.services.scope import ScreenScope

_logger = logging.getLogger(__name__)

POST_IMAGE_FOLDER = "post_images"
# Postgres SQLSTATE reported by the data API for foreign key violations.
_FOREIGN_KEY_VIOLATION = "23503"


class ContentRepository(Protocol):
    """Persistence interface for categories and content."""

    def list_categories(self) -> list[Category]:
        """Return all categories."""

    def create_category(self, name: str) -> Category | None:
        """Insert a category."""

    def update_category(self, category_id: int, name: str) -> Category | None:
        """Rename a category."""

    def delete_category(self, category_id: int) -> None:
        """Delete a category; fails while content references it."""

    def list_content_previews(self) -> list[ContentPreview]:
        """Return content rows without their body."""

    def get_content_item(self, content_id: int) -> ContentItem | None:
        """Return a full content row, if present."""

    def create_content(self, draft: ContentDraft) -> ContentItem | None:
        """Insert a content row."""

    def update_content(
        self, content_id: int, draft: ContentDraft
    ) -> ContentItem | None:
        """Replace a content row's fields."""

    def delete_content(self, content_id: int) -> None:
        """Delete a content row."""


@dataclass
class HomeViewModel:
    """Categories, content previews with resolved categories, and admin edits."""

    repository: ContentRepository
    media: MediaService
    image_bucket: str
    default_header_url: str
    scope: ScreenScope = field(default_factory=lambda: ScreenScope("home"))

    def __post_init__(self) -> None:
        self.categories: RemoteCollection[Category] = RemoteCollection(
            name="categories",
            scope=self.scope,
            fetch=self.repository.list_categories,
            key=lambda category: category.id,
        )
        self.previews: RemoteCollection[ContentPreview] = RemoteCollection(
            name="content previews",
            scope=self.scope,
            fetch=self.repository.list_content_previews,
            key=lambda preview: preview.id,
        )
        self.content_items: Observable[list[ContentPreview]] = combine(
            self.previews.items, self.categories.items, attach_categories
        )
        self.is_loading: Observable[bool] = Observable(True)
        self.error_message: Observable[str | None] = Observable(None)

    def start(self) -> asyncio.Task[None]:
        """Kick off the initial load."""
        return self.scope.launch(self.load_all_data())

    def reload_data(self) -> asyncio.Task[None]:
        return self.scope.launch(self.load_all_data())

    async def load_all_data(self) -> None:
        self.is_loading.set(True)
        try:
            await self.categories.load()
            await self.previews.load()
        finally:
            self.is_loading.set(False)

    async def add_category(self, name: str) -> None:
        await self._change_categories(
            "add category",
            partial(self.repository.create_category, name),
            "Failed to add category",
        )

    async def update_category(self, category_id: int, name: str) -> None:
        await self._change_categories(
            f"update category {category_id}",
            partial(self.repository.update_category, category_id, name),
            "Failed to update category",
        )

    async def delete_category(self, category_id: int) -> None:
        """Delete a category; categories still used by content are kept."""
        await self._change_categories(
            f"delete category {category_id}",
            partial(self.repository.delete_category, category_id),
            "Failed to delete category",
        )

    def clear_error_message(self) -> None:
        self.error_message.set(None)

    async def get_full_content_item(self, content_id: int) -> ContentItem | None:
        """Return a full content row with its category, or None."""
        try:
            item = await self.scope.run_remote(
                self.repository.get_content_item, content_id
            )
        except Exception:
            _logger.exception("Failed to load content %s", content_id)
            return None
        if item is None:
            return None
        by_id = {category.id: category for category in self.categories.items.value}
        return replace(item, category=by_id.get(item.category_id))

    async def add_content_item(
        self,
        title: str,
        category_id: int,
        text: str,
        image: bytes | None = None,
    ) -> ContentItem | None:
        """Publish a new article, uploading its header image when given."""
        header_url = await self._upload_header(image) or self.default_header_url
        draft = ContentDraft(
            category_id=category_id, title=title, header_url=header_url, text=text
        )
        return await self.previews.apply(
            Mutation(
                description="add content",
                write=partial(self.repository.create_content, draft),
                strategy=UpdateStrategy.REFETCH,
            )
        )

    async def update_content_item(  # noqa: PLR0913
        self,
        content_id: int,
        title: str,
        category_id: int,
        header_url: str,
        text: str,
        image: bytes | None = None,
    ) -> ContentItem | None:
        """Edit an article; a new image replaces the header URL."""
        new_header = await self._upload_header(image)
        draft = ContentDraft(
            category_id=category_id,
            title=title,
            header_url=new_header or header_url,
            text=text,
        )
        return await self.previews.apply(
            Mutation(
                description=f"update content {content_id}",
                write=partial(self.repository.update_content, content_id, draft),
                strategy=UpdateStrategy.REFETCH,
            )
        )

    async def delete_content_item(self, content_id: int) -> None:
        await self.previews.apply(
            Mutation(
                description=f"delete content {content_id}",
                write=partial(self.repository.delete_content, content_id),
                strategy=UpdateStrategy.REFETCH,
            )
        )

    async def delete_file_from_bucket(self, bucket: str, file_url: str) -> bool:
        """Remove a stored file by its public URL; False when nothing was removed."""
        try:
            return await self.scope.run_remote(
                self.media.delete_by_url, bucket, file_url
            )
        except Exception:
            _logger.exception("Failed to delete file %s", file_url)
            return False

    async def _upload_header(self, image: bytes | None) -> str | None:
        if not image:
            return None
        try:
            stored = await self.scope.run_remote(
                self.media.upload_image, self.image_bucket, POST_IMAGE_FOLDER, image
            )
        except Exception:
            _logger.exception("Failed to upload header image")
            return None
        return stored.url

    async def _change_categories(
        self, description: str, write: Callable[[], object], failure_prefix: str
    ) -> None:
        await self.categories.apply(
            Mutation(
                description=description,
                write=write,
                strategy=UpdateStrategy.REFETCH,
            )
        )
        error = self.categories.last_error.value
        if error is None:
            return
        if getattr(error, "code", None) == _FOREIGN_KEY_VIOLATION:
            self.error_message.set(
                "This category cannot be deleted because one or more "
                "articles use it."
            )
        else:
            self.error_message.set(f"{failure_prefix}: {error}")
