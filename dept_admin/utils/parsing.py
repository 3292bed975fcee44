# dept_admin/utils/parsing.py
"""Coercion of loosely typed request values (form strings or JSON)."""


def parse_bool(value):
    """None for "not given", otherwise a real bool."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes")


def parse_id(value, label) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid {label} id")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {label} id")


def parse_id_list(values, label) -> set:
    if values is None:
        return set()
    if not isinstance(values, (list, tuple, set)):
        raise ValueError(f"{label.capitalize()} ids must be a list")
    return {parse_id(v, label) for v in values}


def clean_text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()
