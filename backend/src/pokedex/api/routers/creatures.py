from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from pokedex.api.deps import get_assets, get_lifecycle
from pokedex.api.mappers import creature_out, creature_page_out
from pokedex.api.schemas import CreatureOut, CreaturePageOut, MessageOut
from pokedex.core.assets import AssetStore, StagedUpload
from pokedex.core.errors import CatalogError, StoreFailure, ValidationFailure
from pokedex.core.lifecycle import CreatureLifecycle
from pokedex.core.pagination import parse_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pokemons", tags=["pokemons"])


def creature_form(
    name_french: Optional[str] = Form(None, alias="name.french"),
    name: Optional[str] = Form(None),
    type: Optional[List[str]] = Form(None),
    hp: Optional[str] = Form(None, alias="base.HP"),
    attack: Optional[str] = Form(None, alias="base.Attack"),
    defense: Optional[str] = Form(None, alias="base.Defense"),
    special_attack: Optional[str] = Form(None, alias="base.SpecialAttack"),
    special_defense: Optional[str] = Form(None, alias="base.SpecialDefense"),
    speed: Optional[str] = Form(None, alias="base.Speed"),
) -> Dict[str, Any]:
    """Multipart fields as a plain mapping; absent fields are left out."""
    raw = {
        "name.french": name_french,
        "name": name,
        "type": type,
        "base.HP": hp,
        "base.Attack": attack,
        "base.Defense": defense,
        "base.SpecialAttack": special_attack,
        "base.SpecialDefense": special_defense,
        "base.Speed": speed,
    }
    return {k: v for k, v in raw.items() if v is not None}


def _stage(
    assets: AssetStore,
    image: Optional[UploadFile],
    failure: Type[CatalogError] = StoreFailure,
) -> Optional[StagedUpload]:
    # пустой <input type="file"> приходит как файл без имени
    if image is None or not image.filename:
        return None
    try:
        return assets.stage(image.file, image.filename)
    except OSError as exc:
        logger.exception("staging upload %r failed", image.filename)
        raise failure() from exc


@router.get("", response_model=CreaturePageOut)
def list_pokemons(
    page: Optional[str] = Query(None),
    lifecycle: CreatureLifecycle = Depends(get_lifecycle),
):
    return creature_page_out(lifecycle.list_page(parse_page(page)))


@router.get("/search", response_model=list[CreatureOut])
def search_pokemons(
    q: Optional[str] = Query(None),
    lifecycle: CreatureLifecycle = Depends(get_lifecycle),
):
    return [creature_out(c) for c in lifecycle.search(q)]


@router.get("/{pokemon_id}", response_model=CreatureOut)
def get_pokemon(pokemon_id: int, lifecycle: CreatureLifecycle = Depends(get_lifecycle)):
    return creature_out(lifecycle.get(pokemon_id))


@router.post("", response_model=CreatureOut, status_code=201)
def create_pokemon(
    fields: Dict[str, Any] = Depends(creature_form),
    image: Optional[UploadFile] = File(None),
    assets: AssetStore = Depends(get_assets),
    lifecycle: CreatureLifecycle = Depends(get_lifecycle),
):
    upload = _stage(assets, image, failure=ValidationFailure)
    return creature_out(lifecycle.create(fields, upload))


@router.put("/{pokemon_id}", response_model=CreatureOut)
def update_pokemon(
    pokemon_id: int,
    fields: Dict[str, Any] = Depends(creature_form),
    image: Optional[UploadFile] = File(None),
    assets: AssetStore = Depends(get_assets),
    lifecycle: CreatureLifecycle = Depends(get_lifecycle),
):
    upload = _stage(assets, image)
    return creature_out(lifecycle.update(pokemon_id, fields, upload))


@router.delete("/{pokemon_id}", response_model=MessageOut)
def delete_pokemon(
    pokemon_id: int, lifecycle: CreatureLifecycle = Depends(get_lifecycle)
):
    return MessageOut(message=lifecycle.delete(pokemon_id))
