"""Loading and validation of the starting group/item template.

A template is a JSON object mapping group ids to ``{name, items}``.  Items
are either a list (positional items) or an object keyed by item name; each
item carries ``budget``, ``min``, ``max``, ``quantity`` and ``unitCost``.
"""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import CUSTOM_GROUP_PREFIX, TEMPLATE_PATH

NUMERIC_FIELDS = ("budget", "min", "max", "quantity", "unitCost")


class TemplateError(ValueError):
    """Raised when a template file cannot be read or is malformed."""


def _item_errors(location: str, item: Any) -> List[str]:
    if not isinstance(item, Mapping):
        return [f"{location}: item must be an object"]
    errors = []
    for key in NUMERIC_FIELDS:
        value = item.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            errors.append(f"{location}.{key}: expected a number")
            continue
        try:
            number = Decimal(str(value).replace(",", ""))
        except InvalidOperation:
            errors.append(f"{location}.{key}: expected a number")
            continue
        if not number.is_finite():
            errors.append(f"{location}.{key}: expected a number")
        elif number < 0:
            errors.append(f"{location}.{key}: must not be negative")
    return errors


def validate_template(data: Any) -> List[str]:
    """Return a list of problems found in ``data``; empty when valid.

    Example:
        >>> validate_template({'army': {'name': 'Army', 'items': {}}})
        []
    """
    if not isinstance(data, Mapping):
        return ["template must be an object mapping group ids to groups"]

    errors: List[str] = []
    for group_id, group in data.items():
        if str(group_id).startswith(CUSTOM_GROUP_PREFIX):
            errors.append(f"{group_id}: ids starting with '{CUSTOM_GROUP_PREFIX}' are reserved")
        if not isinstance(group, Mapping):
            errors.append(f"{group_id}: group must be an object")
            continue
        if not str(group.get("name") or "").strip():
            errors.append(f"{group_id}: missing 'name'")
        items = group.get("items")
        if isinstance(items, list):
            for index, item in enumerate(items):
                errors.extend(_item_errors(f"{group_id}.items[{index}]", item))
        elif isinstance(items, Mapping):
            for name, item in items.items():
                errors.extend(_item_errors(f"{group_id}.items.{name}", item))
        else:
            errors.append(f"{group_id}: 'items' must be a list or an object")
    return errors


def load_template(path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """Read and validate a template file.

    Args:
        path: Template location; defaults to ``TEMPLATE_PATH`` from config

    Returns:
        Ordered mapping of group id to group data

    Raises:
        TemplateError: If the file is missing, not JSON, or fails validation
    """
    target = Path(path) if path else TEMPLATE_PATH
    try:
        with target.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as e:
        raise TemplateError(f"Could not read template {target}: {e}") from e
    except json.JSONDecodeError as e:
        raise TemplateError(f"Template {target} is not valid JSON: {e}") from e

    errors = validate_template(data)
    if errors:
        raise TemplateError(f"Template {target} is invalid: " + "; ".join(errors))
    return data
