from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class CreatureName(BaseModel):
    model_config = ConfigDict(extra="forbid")

    french: str


class BaseStats(BaseModel):
    model_config = ConfigDict(extra="forbid")

    HP: int = Field(default=0, ge=0)
    Attack: int = Field(default=0, ge=0)
    Defense: int = Field(default=0, ge=0)
    SpecialAttack: int = Field(default=0, ge=0)
    SpecialDefense: int = Field(default=0, ge=0)
    Speed: int = Field(default=0, ge=0)


class CreatureOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: CreatureName
    type: List[str] = Field(default_factory=list)
    base: BaseStats = Field(default_factory=BaseStats)
    image: str


class CreaturePageOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    page: int
    totalPages: int
    data: List[CreatureOut] = Field(default_factory=list)


class MessageOut(BaseModel):
    message: str
