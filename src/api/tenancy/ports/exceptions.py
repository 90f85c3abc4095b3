"""Port exceptions for the tenancy bounded context.

These exceptions represent errors that can occur during repository and
lifecycle operations. They are caught and handled by the presentation
and dependency layers.
"""


class DuplicateTenantError(Exception):
    """Raised when a tenant's schema name is already registered.

    Two tenant names that sanitize to the same schema name collide even
    if the display names differ. The unique index on ``schema_name`` is
    the authoritative check; any pre-check only produces the error earlier.
    """

    pass


class TenantNotFoundError(Exception):
    """Raised when a tenant cannot be found by id."""

    pass


class UnknownTenantError(Exception):
    """Raised when a request names a tenant that is not registered.

    Distinct from TenantNotFoundError because it is reported to clients as
    an authentication failure rather than a missing resource.
    """

    pass
