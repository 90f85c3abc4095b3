"""Ports for the CRM bounded context."""
