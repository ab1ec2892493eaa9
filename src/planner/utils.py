from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .settings import Settings


# PUBLIC_INTERFACE
def pagination_envelope(
    items: Union[Sequence[Any], Iterable[Any]],
    total: int,
    limit: int,
    offset: int,
) -> Dict[str, Any]:
    """
    Build the standard pagination envelope for list endpoints.

    Returns:
        Dict with keys: items, total, limit, offset.
    """
    materialized: List[Any] = items if isinstance(items, list) else list(items)
    return {
        "items": materialized,
        "total": int(total),
        "limit": int(max(limit, 0)),
        "offset": int(max(offset, 0)),
    }


# PUBLIC_INTERFACE
def resolve_owner(user_id: Optional[int], settings: Settings) -> int:
    """Owner id of a new record: the one supplied, else the configured default user."""
    return settings.default_user_id if user_id is None else user_id
