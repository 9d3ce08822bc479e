from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pokedex.core.errors import StoreFailure
from pokedex.db.models import Creature

logger = logging.getLogger(__name__)

MAX_ALLOCATION_ATTEMPTS = 5

# 64-битный INTEGER в SQLite/Postgres BIGINT
MAX_IDENTITY = 2**63 - 1


def next_identity(db: Session) -> int:
    current = db.scalar(select(func.max(Creature.id)))
    return (current or 0) + 1


def insert_with_identity(db: Session, build: Callable[[int], Creature]) -> Creature:
    """
    Allocate ``max(id) + 1`` and flush the row built for it.

    Two concurrent creates can read the same max; the loser gets an
    IntegrityError on the primary key and retries with a fresh max. The
    session must not hold other pending writes, a collision rolls it back.
    """
    for attempt in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
        identity = next_identity(db)
        obj = build(identity)
        db.add(obj)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            if db.get(Creature, identity) is None:
                # не коллизия id (NOT NULL и т.п.)
                raise
            logger.warning(
                "identity %s taken concurrently (attempt %s/%s)",
                identity,
                attempt,
                MAX_ALLOCATION_ATTEMPTS,
            )
            continue
        return obj

    logger.error("gave up allocating an id after %s attempts", MAX_ALLOCATION_ATTEMPTS)
    raise StoreFailure()
