from __future__ import annotations

from pokedex.api.schemas import BaseStats, CreatureName, CreatureOut, CreaturePageOut
from pokedex.core.lifecycle import CreaturePage
from pokedex.db.models import Creature


def creature_out(obj: Creature) -> CreatureOut:
    return CreatureOut(
        id=obj.id,
        name=CreatureName(french=obj.name),
        type=list(obj.types or []),
        base=BaseStats(**obj.stats()),
        image=obj.image,
    )


def creature_page_out(page: CreaturePage) -> CreaturePageOut:
    return CreaturePageOut(
        page=page.page,
        totalPages=page.total_pages,
        data=[creature_out(c) for c in page.items],
    )
