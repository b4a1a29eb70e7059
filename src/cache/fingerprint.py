# src/cache/fingerprint.py — v4
"""Deterministic cache keys for declarations.

The canonical form is a compact JSON array in fixed order:

    [interface_name, type_name, [signature, ...], hint, skeleton]

Absent values are encoded as JSON null, which cannot collide with any string
value. Signature text is taken verbatim apart from whitespace runs being
collapsed. The skeleton is the `ast.unparse` rendering of the class with its
method bodies removed, so source formatting never reaches the key but any
edit to what the synthesized class carries over does. The key is the
lowercase hex SHA-256 of the UTF-8 canonical string, so it is stable across
processes and machines.
"""

from __future__ import annotations

import hashlib
import json
import re

from bodyforge.declaration.extractor import normalize_whitespace
from bodyforge.declaration.models import DeclarationContext

KEY_LENGTH = 64
_KEY_RE = re.compile(r"^[0-9a-f]{64}$")


def canonical_string(context: DeclarationContext) -> str:
    """Render a context into its canonical serialization."""
    payload = [
        context.interface_name,
        context.type_name,
        [normalize_whitespace(sig.text) for sig in context.signatures],
        context.hint,
        context.skeleton,
    ]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def derive_key(context: DeclarationContext) -> str:
    """SHA-256 of the canonical string, as lowercase hex."""
    return hashlib.sha256(canonical_string(context).encode("utf-8")).hexdigest()


def is_valid_key(key: str) -> bool:
    """Whether a string has the shape of a derived key."""
    return bool(_KEY_RE.match(key))
