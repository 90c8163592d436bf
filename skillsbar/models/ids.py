"""Record identity and ordering helpers shared by all record kinds."""

import locale
import os
from pathlib import Path
from typing import Any, Optional, Union

ID_SEPARATOR = ":"


def normalize_path(path: Union[str, Path]) -> str:
    """Absolute, normalized path string (symlinks are not resolved)."""
    return os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))


def _escape(component: str) -> str:
    return component.replace("%", "%25").replace(ID_SEPARATOR, "%3A")


def make_record_id(*components: Optional[str]) -> str:
    """Join provenance components into a stable record id.

    None components are dropped. Each remaining component has ``%`` and the
    separator percent-escaped, so a path or name containing ``:`` cannot
    produce the same id as a different tuple.

    >>> make_record_id("claude", "global", None, "my-skill")
    'claude:global:my-skill'
    """
    return ID_SEPARATOR.join(_escape(c) for c in components if c is not None)


def record_sort_key(record: Any) -> tuple:
    """Total order: source bucket, then locale-aware case-insensitive name.

    ``name`` and ``id`` break ties so the order is fully deterministic.
    """
    return (
        record.source.sort_order,
        locale.strxfrm(record.name.casefold()),
        record.name,
        record.id,
    )
