from __future__ import annotations


class CatalogError(Exception):
    """Base for errors the HTTP layer turns into a status code + message."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CreatureNotFound(CatalogError):
    status_code = 404
    default_message = "Pokemon not found"


class ValidationFailure(CatalogError):
    status_code = 400
    default_message = "Invalid pokemon payload"


class StoreFailure(CatalogError):
    # наружу только общий текст, детали в логах
    status_code = 500
    default_message = "Server error"
