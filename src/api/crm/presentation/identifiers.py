"""Path parameter parsing shared by the CRM routes."""

from uuid import UUID

from fastapi import HTTPException, status


def parse_uuid(value: str, kind: str) -> UUID:
    """Parse a path identifier, answering 400 when it is not a UUID."""
    try:
        return UUID(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {kind} ID format: {value}",
        ) from e
