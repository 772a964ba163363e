"""Request authentication helpers.

Login itself happens upstream: the auth proxy forwards the signed-in user's
id in ``X-User-Id``. Admin endpoints additionally require the shared
``ADMIN_SECRET`` as a Bearer token.
"""

from fastapi import Header, HTTPException

from agency_hub import config


def require_admin(authorization: str = Header("")) -> None:
    """Reject requests without the admin Bearer secret."""
    if config.ADMIN_SECRET:
        expected = f"Bearer {config.ADMIN_SECRET}"
        if authorization != expected:
            raise HTTPException(status_code=401, detail="Invalid admin secret")


def current_user_id(x_user_id: str = Header("")) -> str:
    """The authenticated user's id, as forwarded by the auth proxy."""
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
