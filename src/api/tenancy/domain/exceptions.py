"""Domain exceptions for the tenancy bounded context."""


class InvalidTenantNameError(ValueError):
    """Raised when a tenant name cannot yield a usable schema name.

    Sanitization of the name produced an empty string or a reserved
    PostgreSQL schema name. Reported to the caller before any mutation.
    """

    pass
