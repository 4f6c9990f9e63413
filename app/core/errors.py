"""
Error taxonomy for the loyalty workflow.

Every failing path raises one of these; the API layer renders them as
``{"error": code, "detail": message}`` with the matching status code.
Identity lookups that find nothing are not errors and return ``None``.
"""


class LoyaltyError(Exception):
    """Base class for expected loyalty workflow failures."""

    code = "loyalty_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LoyaltyError):
    """Malformed input, rejected before the store is touched."""

    code = "validation_error"
    status_code = 422


class DuplicateKey(LoyaltyError):
    """Phone number already registered in the requested role."""

    code = "duplicate_key"
    status_code = 409


class CustomerNotFound(LoyaltyError):
    code = "customer_not_found"
    status_code = 404


class BusinessNotFound(LoyaltyError):
    code = "business_not_found"
    status_code = 404


class PersistenceFailure(LoyaltyError):
    """The backing store rejected or timed out on a read/write."""

    code = "persistence_failure"
    status_code = 503
