"""Domain-Oriented Observability for the CRM application layer."""

from crm.application.observability.crm_service_probe import (
    CRMServiceProbe,
    DefaultCRMServiceProbe,
)

__all__ = [
    "CRMServiceProbe",
    "DefaultCRMServiceProbe",
]
