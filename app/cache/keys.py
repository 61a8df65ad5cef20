"""Cache key codec.

Keys look like ``<domain>:<part>:<part>...``. Each part is JSON-encoded
(so ``1`` and ``"1"`` stay distinct) and then percent-encoded, which keeps
the ``:`` separator out of every part. No salt: keys are stable across
restarts.
"""

import hashlib
import json
import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

SEPARATOR = ":"

_DOMAIN_RE = re.compile(r"^[a-z][a-z0-9_.-]*$")

Part = str | int | float | bool | None


def _encode_part(part: Part) -> str:
    if part is not None and not isinstance(part, (str, int, float, bool)):
        raise TypeError(f"Cache key parts must be primitives, got {type(part).__name__}")
    return quote(json.dumps(part, ensure_ascii=False), safe="")


def make_key(domain: str, parts: Iterable[Part] = ()) -> str:
    """Build a deterministic cache key for (domain, ordered parts)."""
    if not _DOMAIN_RE.match(domain):
        raise ValueError(f"Invalid cache domain: {domain!r}")
    return SEPARATOR.join([domain, *(_encode_part(p) for p in parts)])


def domain_prefix(domain: str) -> str:
    """Prefix shared by every key of a domain (for namespace invalidation)."""
    if not _DOMAIN_RE.match(domain):
        raise ValueError(f"Invalid cache domain: {domain!r}")
    return domain + SEPARATOR


def hash_params(params: Mapping[str, Any]) -> str:
    """Stable digest of a structured input, usable as a single key part."""
    raw = json.dumps(params, sort_keys=True, default=str)
    return hashlib.sha256(raw.encode()).hexdigest()
