"""Domain exceptions for the CRM bounded context."""


class InvalidContactError(ValueError):
    """Raised when contact details break a business rule.

    A contact needs a name and at least one way to reach it (email or
    phone).
    """

    pass
