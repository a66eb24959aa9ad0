"""Merge freshly extracted records with the JSON written by a previous run."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar

logger = logging.getLogger("sitegen.reconcile")

T = TypeVar("T")


def merge(fresh: Iterable[T], stale: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Return `fresh` followed by the `stale` records it does not supersede.

    A stale record is dropped only when some fresh record has the same key;
    fields are never merged. Both inputs keep their relative order.
    """
    result = list(fresh)
    fresh_keys = {key(rec) for rec in result}
    result.extend(rec for rec in stale if key(rec) not in fresh_keys)
    return result


def load_records(path: Path, from_dict: Callable[[dict[str, Any]], T]) -> list[T]:
    """Read a previously written record list.

    Any problem with the file (absent, unreadable, not JSON, not a list) is
    logged and yields an empty list so the run can continue.
    """
    if not path.exists():
        logger.debug("No previous %s, starting fresh", path.name)
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s, ignoring previous content: %s", path, exc)
        return []
    if not isinstance(data, list):
        logger.warning("%s does not hold a JSON list, ignoring previous content", path)
        return []

    records: list[T] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning("Skipping entry %d of %s: not an object", idx, path.name)
            continue
        records.append(from_dict(item))
    return records
