from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pokedex.config import DEFAULT_PAGE_SIZE
from pokedex.core.assets import AssetStore, StagedUpload
from pokedex.core.errors import (
    CatalogError,
    CreatureNotFound,
    StoreFailure,
    ValidationFailure,
)
from pokedex.core.forms import normalize_create, normalize_update
from pokedex.core.identity import MAX_IDENTITY, insert_with_identity
from pokedex.core.pagination import total_pages
from pokedex.db.models import Creature

logger = logging.getLogger(__name__)

DELETED_MESSAGE = "Deleted successfully"


@dataclass
class CreaturePage:
    page: int
    total_pages: int
    items: List[Creature] = field(default_factory=list)


class CreatureLifecycle:
    """
    Create/read/update/delete of creature records, keeping the image files in
    the asset store in step with the rows.

    Store and filesystem are not covered by one transaction. What is
    guaranteed: a staged upload never outlives a failed create/update, and
    deleting a record deletes its local image.
    """

    def __init__(
        self,
        db: Session,
        assets: AssetStore,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.db = db
        self.assets = assets
        self.page_size = page_size

    # ---- read ----

    def list_page(self, page: int) -> CreaturePage:
        skip = (page - 1) * self.page_size
        try:
            total = self.db.scalar(select(func.count()).select_from(Creature)) or 0
            if skip >= total:
                # за пределами диапазона: пустая страница, огромный OFFSET в БД не шлём
                return CreaturePage(page=page, total_pages=total_pages(total, self.page_size))
            items = self.db.scalars(
                select(Creature)
                .order_by(Creature.id)
                .offset(skip)
                .limit(self.page_size)
            ).all()
        except SQLAlchemyError as exc:
            logger.exception("listing page %s failed", page)
            raise StoreFailure() from exc

        return CreaturePage(
            page=page,
            total_pages=total_pages(total, self.page_size),
            items=list(items),
        )

    def search(self, query: Optional[str]) -> List[Creature]:
        # пустой запрос из UI не должен превращаться в полный скан
        if not query or not query.strip():
            return []

        needle = query.casefold()
        try:
            items = self.db.scalars(
                select(Creature)
                .where(Creature.name_key.contains(needle, autoescape=True))
                .order_by(Creature.id)
            ).all()
        except SQLAlchemyError as exc:
            logger.exception("search for %r failed", query)
            raise StoreFailure() from exc
        return list(items)

    def get(self, identity: int) -> Creature:
        if not 0 < identity <= MAX_IDENTITY:
            raise CreatureNotFound()
        try:
            obj = self.db.get(Creature, identity)
        except SQLAlchemyError as exc:
            logger.exception("loading pokemon %s failed", identity)
            raise StoreFailure() from exc
        if obj is None:
            raise CreatureNotFound()
        return obj

    # ---- write ----

    def create(
        self, fields: Mapping[str, Any], upload: Optional[StagedUpload] = None
    ) -> Creature:
        bound_url: Optional[str] = None
        try:
            draft = normalize_create(fields)
            columns = draft.columns()

            obj = insert_with_identity(
                self.db,
                lambda identity: Creature(
                    id=identity, image=self.assets.placeholder_url, **columns
                ),
            )
            if upload is not None:
                bound_url = self.assets.bind(upload, obj.id)
                obj.image = bound_url

            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            self.assets.discard(upload)
            if bound_url is not None:
                # id этой записи откатился, файл под ним ничей
                self._remove_quietly(bound_url)
            if isinstance(exc, ValidationFailure):
                raise
            logger.exception("creating pokemon failed")
            raise ValidationFailure("Could not create pokemon") from exc

        self.db.refresh(obj)
        logger.info("created pokemon %s (%s)", obj.id, obj.name)
        return obj

    def update(
        self,
        identity: int,
        fields: Mapping[str, Any],
        upload: Optional[StagedUpload] = None,
    ) -> Creature:
        bound_url: Optional[str] = None
        try:
            changes = normalize_update(fields)
            current = self.get(identity)
            previous_image = current.image

            if upload is not None:
                bound_url = self.assets.bind(upload, identity)
                changes["image"] = bound_url

            if changes:
                result = self.db.execute(
                    update(Creature)
                    .where(Creature.id == identity)
                    .values(**changes)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    # запись удалили между get и update
                    self._remove_quietly(bound_url)
                    raise CreatureNotFound()
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            self.assets.discard(upload)
            if isinstance(exc, CatalogError):
                raise
            logger.exception("updating pokemon %s failed", identity)
            raise StoreFailure() from exc

        if bound_url is not None:
            self._release_previous_image(previous_image, bound_url)

        self.db.expire_all()
        obj = self.get(identity)
        logger.info("updated pokemon %s (%s)", identity, ", ".join(sorted(changes)))
        return obj

    def delete(self, identity: int) -> str:
        obj = self.get(identity)
        image = obj.image
        try:
            self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("deleting pokemon %s failed", identity)
            raise StoreFailure() from exc

        # файл удаляем только после коммита: читаемая запись всегда со своей картинкой
        self._remove_quietly(image)

        logger.info("deleted pokemon %s", identity)
        return DELETED_MESSAGE

    def _release_previous_image(self, previous: Optional[str], current: str) -> None:
        old = self.assets.local_filename(previous)
        if old is None or old == self.assets.local_filename(current):
            return
        # запись уже обновлена, при ошибке старый файл просто останется лишним
        self._remove_quietly(previous)

    def _remove_quietly(self, url: Optional[str]) -> None:
        try:
            self.assets.remove(url)
        except OSError:
            logger.exception("could not delete asset %s", url)
