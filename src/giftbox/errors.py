# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the store, the auth helpers and the HTTP layer.

Each request-scoped error carries the HTTP status it maps to and a message that
is safe to show to the caller.
"""

from __future__ import annotations


class GiftBoxError(Exception):
    """Base error with a user-safe message."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message}


class ValidationError(GiftBoxError):
    """Bad or missing input."""

    status_code = 400


class Unauthorized(GiftBoxError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class Forbidden(GiftBoxError):
    status_code = 403

    def __init__(self, message: str = "admin only") -> None:
        super().__init__(message)


class NotFound(GiftBoxError):
    status_code = 404


class AlreadyClaimed(GiftBoxError):
    """The user already claimed this gift. Not a hard failure: the content is attached."""

    status_code = 400

    def __init__(self, content: str) -> None:
        super().__init__("already claimed")
        self.content = content

    def to_payload(self) -> dict:
        return {"error": self.message, "content": self.content}


class IntegrityError(GiftBoxError):
    """An envelope failed authentication or is malformed."""

    def __init__(self, message: str = "envelope failed authentication") -> None:
        super().__init__(message)
