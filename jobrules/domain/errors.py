"""
Error taxonomy shared by both rules.

Every error carries the status code reported back to the event
dispatcher: 4xx for input the rule refuses to act on, 5xx for store
failures.  A create conflict is *not* an error -- see
``infrastructure.store.CreateResult``.
"""

from __future__ import annotations


class RuleError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ── Client input (never retried) ──────────────────────────────────────


class ClientInputError(RuleError):
    status_code = 400


class MalformedPayloadError(ClientInputError):
    """The event payload is not a JSON object of the expected shape."""


class MissingIdError(ClientInputError):
    """The snapshot has no document id."""


class MissingPrincipalError(ClientInputError):
    """``clientId`` or ``driverId`` is absent or empty."""


class InvalidInputError(ClientInputError):
    """A permission was requested for an empty principal id."""


# ── Store failures (propagated, retried only by redelivery) ──────────


class StoreError(RuleError):
    status_code = 500


class StoreUnavailableError(StoreError):
    """The store could not be reached or failed to answer."""


class DocumentNotFoundError(StoreError):
    pass
