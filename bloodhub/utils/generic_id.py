from uuid import UUID

from fastapi import HTTPException, status


def parse_resource_id(value: str, resource: str) -> UUID:
    """
    Parse a path id. Malformed ids cannot name an existing record, so they
    are reported as not found rather than as a validation failure.
    """
    try:
        return UUID(str(value))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )
