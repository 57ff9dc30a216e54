"""
Permission maps.

Roles and user groups each carry a JSONB map of permission keys to booleans. A user
holds a permission if ANY of the maps attached to them grants it.
"""

import json
from typing import Any
from typing import Dict
from typing import Iterable
from typing import Optional
from typing import Union

PermissionMap = Dict[str, bool]


def parse_permission_map(raw: Union[str, Dict[str, Any], None]) -> PermissionMap:
    """Normalise a JSONB value (asyncpg returns it as text) into a ``{key: bool}`` map."""
    if raw is None:
        return {}
    if isinstance(raw, str):
        raw = json.loads(raw) if raw.strip() else {}
    return {str(key): value is True for key, value in raw.items()}


def combine_role_permissions(permission_maps: Iterable[Optional[PermissionMap]]) -> PermissionMap:
    """
    Merge several permission maps.

    Every key seen in any map appears in the result; it is True when at least one map
    sets it to True.
    """
    maps = [m for m in permission_maps if m]
    combined: PermissionMap = {}
    for permissions in maps:
        for key, value in permissions.items():
            combined[key] = combined.get(key, False) or value is True
    return combined


def has_permission(permissions: PermissionMap, permission: str) -> bool:
    """Check a single permission."""
    return permissions.get(permission) is True

