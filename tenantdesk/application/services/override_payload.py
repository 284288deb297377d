"""Versioned encoding of stored role permission overrides.

Current document shape (version 1):

    {"version": 1, "permissions": {"contacts.delete": true, ...}}

Rows written before versioning hold a flat {key: bool} object; those decode
as version 0 and are migrated in memory. Anything else is rejected with
OverridePayloadError so callers can fall back to role defaults.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from tenantdesk.domain.exceptions import OverridePayloadError

CURRENT_PAYLOAD_VERSION = 1


class PermissionOverridePayload(BaseModel):
    """Stored override document: only keys that differ from the role's defaults."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: int = CURRENT_PAYLOAD_VERSION
    permissions: dict[str, StrictBool]


def encode_override_payload(overrides: Mapping[str, bool]) -> dict[str, Any]:
    """Return the current-version document for overrides (JSON-ready dict)."""
    return PermissionOverridePayload(permissions=dict(overrides)).model_dump()


def _load(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise OverridePayloadError("not valid UTF-8") from e
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise OverridePayloadError(f"not valid JSON ({e.msg})") from e
    return raw


def _migrate_v0(data: dict[str, Any]) -> dict[str, bool]:
    bad = sorted(k for k, v in data.items() if not isinstance(v, bool))
    if bad:
        raise OverridePayloadError(f"non-boolean values for {', '.join(bad)}")
    return dict(data)


def decode_override_payload(raw: Any) -> dict[str, bool]:
    """Decode a stored override (dict or JSON text) into {key: bool}.

    Raises:
        OverridePayloadError: invalid JSON, not an object, non-boolean values,
            or a version other than CURRENT_PAYLOAD_VERSION.
    """
    data = _load(raw)
    if not isinstance(data, dict):
        raise OverridePayloadError(f"expected an object, got {type(data).__name__}")
    if "version" not in data:
        return _migrate_v0(data)
    version = data["version"]
    if not isinstance(version, int) or isinstance(version, bool):
        raise OverridePayloadError("version must be an integer")
    if version != CURRENT_PAYLOAD_VERSION:
        raise OverridePayloadError(f"unsupported version {version}")
    try:
        payload = PermissionOverridePayload.model_validate(data)
    except ValidationError as e:
        raise OverridePayloadError(f"{e.error_count()} validation error(s)") from e
    return dict(payload.permissions)
