"""Shared FastAPI dependencies."""

from typing import Annotated
from fastapi import Depends, Header, HTTPException, status


def get_user_id(
    x_user_id: str | None = Header(None, description="ID of the calling user"),
) -> str:
    """Return the caller's user ID from the X-User-Id header.

    Raises:
        HTTPException: 401 if the header is missing or empty.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id


UserId = Annotated[str, Depends(get_user_id)]
