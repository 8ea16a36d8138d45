"""String helpers for showing method signatures in links and markup."""

from __future__ import annotations

from urllib.parse import quote, unquote


def encode_signature(signature: str) -> str:
    """Percent-encode a signature for use as one URL path segment.

    Every reserved character is encoded, including ``/``; spaces become
    ``%20``. decode_signature() reverses it.
    """
    return quote(signature, safe="")


def decode_signature(encoded: str) -> str:
    return unquote(encoded)


def escape_signature(signature: str) -> str:
    """Neutralize ``<`` and ``>`` so generic signatures display as text in HTML."""
    return signature.replace("<", "&lt;").replace(">", "&gt;")
