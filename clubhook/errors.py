"""Errors raised by outbound integrations."""

from __future__ import annotations


class UpstreamError(Exception):
    """An outbound HTTP call failed or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MemberLookupError(UpstreamError):
    """The Clubhouse member API could not resolve a member."""


class DeliveryError(UpstreamError):
    """The Discord webhook refused or never received the message."""
