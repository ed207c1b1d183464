"""Error taxonomy for the triage backend.

Backend query errors (``postgrest.exceptions.APIError``) are not wrapped:
services log and re-raise them unchanged.  The classes below cover
configuration failures and explicit business-rule short-circuits.
"""


class ConfigurationError(RuntimeError):
    """Required environment configuration is missing or invalid."""


class DomainError(Exception):
    """Base class for business-rule failures raised by the services."""


class CandidateNotFoundError(DomainError):
    """A candidate expected to exist could not be read back."""


class UserNotFoundError(DomainError):
    """A user expected to exist could not be found."""


class AuthenticationError(DomainError):
    """Credentials were rejected by the auth backend."""


class InactiveUserError(AuthenticationError):
    """A valid session has no matching active application user."""


class LegacySchemaError(DomainError):
    """A legacy candidate row cannot be adapted to the canonical schema."""
