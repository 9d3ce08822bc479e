from __future__ import annotations

import re
from typing import Any, Optional

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def parse_int_prefix(raw: Any) -> Optional[int]:
    """
    Parse a leading integer the way browsers/forms usually mean it:
    "12" -> 12, " 7px" -> 7, "abc" -> None, None -> None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    m = _INT_PREFIX.match(str(raw))
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # больше sys.get_int_max_str_digits() цифр
        return None


def parse_page(raw: Any) -> int:
    page = parse_int_prefix(raw)
    if page is None or page < 1:
        return 1
    return page


def total_pages(total: int, page_size: int) -> int:
    if total <= 0:
        return 0
    return -(-total // page_size)
