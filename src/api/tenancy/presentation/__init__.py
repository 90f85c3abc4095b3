"""Tenancy presentation layer.

Organizes presentation concerns by aggregate; each aggregate package
contains its own routes and models.
"""

from __future__ import annotations

from tenancy.presentation.tenants import router

__all__ = ["router"]
