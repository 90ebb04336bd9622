"""the beautiful world start from here."""

from __future__ import annotations

import binascii
import hashlib
import hmac
import re

_WORD_START = re.compile(r"(^|[^\w])(\w)")


def sign_body(secret: str, body: bytes) -> bytes:
    """Raw HMAC-SHA256 digest of ``body`` keyed by the stripped ``secret``."""
    return hmac.new(secret.strip().encode(), msg=body, digestmod=hashlib.sha256).digest()


def ch_verify(secret: str, body: bytes, signature_header: str | None) -> bool:
    """
    Verify a Clubhouse webhook signature (``Clubhouse-Signature``).

    The header carries the hex encoded HMAC-SHA256 of the raw body.

    Returns
    -------
    bool
        True if valid, False otherwise (including undecodable hex).
    """
    sig = (signature_header or "").strip()
    if not sig:
        return False
    try:
        provided = binascii.unhexlify(sig)
    except (binascii.Error, ValueError):
        return False
    return hmac.compare_digest(provided, sign_body(secret, body))


def title_case(text: str) -> str:
    """
    Upper-case the first letter of every word, leaving the rest untouched.

    Example
    -------
    'in progress' → 'In Progress', 'McDonald' → 'McDonald', "o'neil" → "O'Neil"
    """
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), text or "")


def media_type(content_type: str | None) -> str:
    """'application/json; charset=utf-8' → 'application/json'"""
    return (content_type or "").split(";", 1)[0].strip().lower()
