"""Typed failures raised by the billing core and its repositories.

The core never formats user-facing messages; ``main`` maps these to HTTP
responses.
"""


class BillingError(Exception):
    pass


class InvalidInput(BillingError, ValueError):
    """Item, charge or discount data that is not well-formed."""


class SequenceUnavailable(BillingError):
    """The atomic counter could not be incremented.

    ``outcome_unknown`` is set when the request timed out: the counter may
    or may not have advanced, so the number is treated as lost (a gap),
    never reused.
    """

    def __init__(self, message: str, *, outcome_unknown: bool = False) -> None:
        super().__init__(message)
        self.outcome_unknown = outcome_unknown


class DuplicateNumber(BillingError):
    """A unique constraint on a document number rejected the write."""


class DocumentNotFound(BillingError, LookupError):
    pass


class CustomerNotFound(BillingError, LookupError):
    pass
