"""
Error taxonomy for the Yahoo auction import pipeline.

Every error the pipeline raises on purpose derives from AuctionImportError and
carries the HTTP status the API should answer with. TranslationError is the
exception to the rule: it is always caught inside the pipeline and reported as
a field of the response, never as a failed request.
"""
from typing import Optional


class AuctionImportError(Exception):
    """Base class for import failures surfaced to the caller."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InputValidationError(AuctionImportError):
    """Bad request input. Raised before any network call is made."""

    status_code = 400


class ParseError(AuctionImportError):
    """The auction id cannot be recovered from the URL."""

    status_code = 400


class ConfigurationError(AuctionImportError):
    """Required commerce platform setup is missing (e.g. default shipping profile)."""

    status_code = 400


class UpstreamFetchError(AuctionImportError):
    """The auction page could not be fetched or answered with a non-2xx status."""

    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class ReconciliationError(AuctionImportError):
    """The commerce platform failed while creating or updating the product."""

    status_code = 500


class TranslationError(Exception):
    """Soft failure of the translation step."""


class DuplicateProductError(Exception):
    """A product with the same external id already exists (unique constraint hit)."""

    def __init__(self, external_id: str):
        super().__init__(f"Product with external_id {external_id!r} already exists")
        self.external_id = external_id
