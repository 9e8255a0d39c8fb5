"""
Credential lookup for login form submissions.

Login forms may name their fields with bracket notation (``user[name]``)
to group related values. These helpers resolve such a field name against
the parsed body or query string of a request.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple

_MISSING = object()


def split_field_name(field_name: str) -> List[str]:
    """
    Split a bracketed field name into its path segments.

    ``"user[name]"`` becomes ``["user", "name"]``. Closing brackets are
    dropped before splitting on opening ones, so a name without any
    brackets is a single segment.
    """
    return field_name.replace("]", "").split("[")


def _is_container(value: Any) -> bool:
    return isinstance(value, Mapping) or isinstance(value, (list, tuple))


def _child(container: Any, segment: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(segment, _MISSING)
    if segment.isdigit() and int(segment) < len(container):
        return container[int(segment)]
    return _MISSING


def lookup(source: Optional[Any], field_name: str) -> Optional[Any]:
    """
    Get the value for a field from a request data source.

    Walks ``source`` one segment at a time. A segment that is not present
    ends the walk with ``None``. A leaf value is returned as soon as it is
    reached, even when segments remain. A walk that ends on a nested
    mapping yields ``None`` since a mapping is never a credential.

    Args:
        source: Parsed form body or query string, may be None
        field_name: Field name, optionally in bracket notation

    Returns:
        The value found, or None if the field is not present
    """
    if not source:
        return None

    current = source
    for segment in split_field_name(field_name):
        value = _child(current, segment)
        if value is _MISSING or value is None:
            return None
        if not _is_container(value):
            return value
        current = value
    return None


def nest_fields(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """
    Build nested dictionaries from flat bracketed form keys.

    ``[("user[name]", "bob"), ("remember", "1")]`` becomes
    ``{"user": {"name": "bob"}, "remember": "1"}``. When keys collide the
    later pair wins.
    """
    nested: Dict[str, Any] = {}
    for key, value in items:
        segments = split_field_name(key)
        target = nested
        for segment in segments[:-1]:
            child = target.get(segment)
            if not isinstance(child, dict):
                child = {}
                target[segment] = child
            target = child
        target[segments[-1]] = value
    return nested
