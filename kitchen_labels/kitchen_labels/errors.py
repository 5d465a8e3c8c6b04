from __future__ import annotations


class LabelError(Exception):
    """Base class for errors reported back to the label form."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(LabelError, ValueError):
    status_code = 422


class CategoryNotFound(LabelError, LookupError):
    status_code = 404

    def __init__(self, name: str):
        super().__init__(f"Unknown category: {name!r}")
        self.name = name


class NotFound(LabelError, LookupError):
    status_code = 404

    def __init__(self, label_id: str):
        super().__init__(f"Label not found: {label_id!r}")
        self.label_id = label_id
