from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from pokedex.config import Settings
from pokedex.core.assets import AssetStore
from pokedex.core.lifecycle import CreatureLifecycle
from pokedex.db.deps import get_db


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_assets(request: Request) -> AssetStore:
    return request.app.state.assets


def get_lifecycle(
    db: Session = Depends(get_db),
    assets: AssetStore = Depends(get_assets),
    settings: Settings = Depends(get_settings),
) -> CreatureLifecycle:
    return CreatureLifecycle(db, assets, page_size=settings.page_size)
