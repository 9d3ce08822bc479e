"""
Normalization of untyped form input into creature fields.

Multipart bodies arrive as a flat mapping of strings (``name.french``,
``base.HP``, ``type`` ...). This module is the only place that knows about
those keys; everything after it works with ``CreatureDraft`` or a column
change set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pokedex.core.errors import ValidationFailure
from pokedex.core.pagination import parse_int_prefix
from pokedex.db.models import STAT_COLUMNS

STAT_NAMES = tuple(STAT_COLUMNS)

# Integer колонки: 32 бита, чтобы не зависеть от бэкенда
MAX_STAT = 2**31 - 1


@dataclass
class CreatureDraft:
    name: str
    types: List[str] = field(default_factory=list)
    base: Dict[str, int] = field(
        default_factory=lambda: {stat: 0 for stat in STAT_NAMES}
    )

    def columns(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {
            "name": self.name,
            "name_key": search_key(self.name),
            "types": list(self.types),
        }
        for stat, column in STAT_COLUMNS.items():
            values[column] = self.base.get(stat, 0)
        return values


def search_key(name: str) -> str:
    return name.casefold()


def parse_stat(raw: Any, default: Optional[int] = 0) -> Optional[int]:
    """
    Integer prefix of ``raw``; ``default`` if it has none or it does not fit
    the stat column. Never negative.
    """
    value = parse_int_prefix(raw)
    if value is None or value > MAX_STAT:
        return default
    return max(0, value)


def split_types(raw: Any) -> List[str]:
    if raw is None:
        return []
    items = [raw] if isinstance(raw, str) else list(raw)
    out: List[str] = []
    for item in items:
        # повторяющееся поле type приходит списком, но каждый элемент
        # тоже может быть "Feu, Vol"
        for part in str(item).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


def _extract_name(fields: Mapping[str, Any]) -> Optional[str]:
    candidates = [fields.get("name.french")]
    nested = fields.get("name")
    if isinstance(nested, Mapping):
        candidates.append(nested.get("french"))
    else:
        candidates.append(nested)

    for value in candidates:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _stat_raw(fields: Mapping[str, Any], stat: str) -> Any:
    if f"base.{stat}" in fields:
        return fields[f"base.{stat}"]
    base = fields.get("base")
    if isinstance(base, Mapping):
        return base.get(stat)
    return None


def _has_stat(fields: Mapping[str, Any], stat: str) -> bool:
    if fields.get(f"base.{stat}") is not None:
        return True
    base = fields.get("base")
    return isinstance(base, Mapping) and base.get(stat) is not None


def normalize_create(fields: Mapping[str, Any]) -> CreatureDraft:
    name = _extract_name(fields)
    if name is None:
        raise ValidationFailure("name.french is required")

    return CreatureDraft(
        name=name,
        types=split_types(fields.get("type")),
        base={stat: parse_stat(_stat_raw(fields, stat)) for stat in STAT_NAMES},
    )


def normalize_update(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Column change set for a partial update.

    Only keys present in ``fields`` end up in the result. A stat that is
    present and numeric is applied even when it is 0; a stat that does not
    parse is skipped. A blank name is skipped too, the name is required.
    """
    changes: Dict[str, Any] = {}

    name = _extract_name(fields)
    if name is not None:
        changes["name"] = name
        changes["name_key"] = search_key(name)

    for stat, column in STAT_COLUMNS.items():
        if not _has_stat(fields, stat):
            continue
        value = parse_stat(_stat_raw(fields, stat), default=None)
        if value is not None:
            changes[column] = value

    if fields.get("type") is not None:
        changes["types"] = split_types(fields["type"])

    return changes
