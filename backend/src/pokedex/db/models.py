from __future__ import annotations

from typing import List

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from .base import Base

STAT_COLUMNS = {
    "HP": "hp",
    "Attack": "attack",
    "Defense": "defense",
    "SpecialAttack": "special_attack",
    "SpecialDefense": "special_defense",
    "Speed": "speed",
}


class Creature(Base):
    __tablename__ = "pokemons"

    # id выдаёт core.identity, не БД
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # casefold-копия имени для поиска без учёта регистра (в т.ч. "É")
    name_key: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    types: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    hp: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attack: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    defense: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_attack: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    special_defense: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    speed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    image: Mapped[str] = mapped_column(String(500), nullable=False)

    def stats(self) -> dict[str, int]:
        return {stat: getattr(self, column) or 0 for stat, column in STAT_COLUMNS.items()}
