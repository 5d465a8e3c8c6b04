from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import List

from .errors import InvalidInput
from .models import CategoryRule


def _shelf_life(value) -> int:
    # whole days only; 2.9 or true must not turn into a shorter shelf life
    if isinstance(value, bool):
        raise ValueError(f"shelf_life_days must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"shelf_life_days must be an integer, got {value!r}")


def _rule_from_item(item, index: int) -> CategoryRule:
    try:
        return CategoryRule(
            name=str(item["name"]),
            shelf_life_days=_shelf_life(item["shelf_life_days"]),
            temperature_range=str(item.get("temperature_range", "") or ""),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Bad category entry #{index}: {exc}") from exc


def _load_categories_json(payload) -> List[CategoryRule]:
    if not isinstance(payload, list):
        raise InvalidInput("Category file must contain a JSON array")
    out = []
    for idx, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise InvalidInput(f"Bad category entry #{idx}: expected an object")
        out.append(_rule_from_item(item, idx))
    return out


def load_categories(data: bytes | None) -> List[CategoryRule]:
    """Parse category rules from JSON (array of objects) or CSV with a header row."""
    if not data:
        return []
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidInput("Category file must be UTF-8") from exc
    if text.strip().startswith("["):
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"Category file is not valid JSON: {exc}") from exc
        return _load_categories_json(payload)
    reader = csv.DictReader(io.StringIO(text))
    out = []
    for idx, row in enumerate(reader, start=1):
        out.append(_rule_from_item(row, idx))
    return out


def load_categories_file(path: str | Path) -> List[CategoryRule]:
    return load_categories(Path(path).read_bytes())
