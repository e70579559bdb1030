"""
Domain errors raised by the service layer.

Routers never translate these by hand; ``larder.main`` registers a single
handler that maps each class to its HTTP status.
"""


class LarderError(Exception):
    """Base class for errors scoped to a single operation."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LarderError):
    """A referenced household, user, recipe or item does not exist."""

    status_code = 404


class InvariantError(LarderError):
    """The operation would break a registry or store invariant. Nothing was written."""

    status_code = 400


class IngestionError(LarderError):
    """An ingestion adapter failed: missing credentials, API error or unusable output."""

    status_code = 502


class PartialConsumptionError(LarderError):
    """Recipe consumption stopped partway; ``results`` lists the steps already committed."""

    status_code = 500

    def __init__(self, message: str, results: list[dict]):
        super().__init__(message)
        self.results = results
