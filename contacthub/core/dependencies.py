"""
FastAPI dependencies for authentication and service wiring.

Dependencies are reusable functions that FastAPI calls before route handlers.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel
from typing import AsyncIterator, Optional

from contacthub.core.config import settings
from contacthub.core.security import decode_token
from contacthub.database import session_scope
from contacthub.repositories.store import ContactStore
from contacthub.schemas.common import Participant
from contacthub.services.contact_service import ContactService
from contacthub.websocket.manager import manager

# Security scheme (extracts Bearer token from Authorization header)
security = HTTPBearer()

_memory_store: Optional[ContactStore] = None


class CurrentUser(BaseModel):
    """Caller identity taken from the token claims."""
    id: str
    name: str
    email: str = ""
    role: str = "user"

    def as_participant(self) -> Participant:
        return Participant(id=self.id, name=self.name, email=self.email, role=self.role)


def user_from_token(token: str) -> CurrentUser:
    """
    Decode a bearer token into the caller identity.

    Raises:
        HTTPException 401: invalid/expired token or missing user_id claim
    """
    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "invalid_token",
                "message": "Invalid or expired token"
            },
            headers={"WWW-Authenticate": "Bearer"}
        )

    user_id = payload.get("user_id")
    if not user_id or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "invalid_token",
                "message": "Token missing or invalid user information"
            },
            headers={"WWW-Authenticate": "Bearer"}
        )

    return CurrentUser(
        id=user_id,
        name=payload.get("name") or user_id,
        email=payload.get("email") or "",
        role=payload.get("role") or "user",
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> CurrentUser:
    """
    Dependency to get the authenticated caller.

    Usage in routes:
        @router.get("/protected")
        async def protected_route(user: CurrentUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    return user_from_token(credentials.credentials)


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    """Dependency for maintenance endpoints (role claim must be 'admin')."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "admin_required",
                "message": "This action requires an administrator"
            }
        )
    return current_user


async def get_store() -> AsyncIterator[ContactStore]:
    """
    Request-scoped store.

    With STORAGE_BACKEND=sql every request gets its own session, committed
    when the handler returns and rolled back if it raises. Realtime pushes
    queued during the request go out only after a successful commit.
    """
    global _memory_store

    if settings.STORAGE_BACKEND == "memory":
        if _memory_store is None:
            _memory_store = ContactStore.in_memory()
        yield _memory_store
        return

    async with session_scope() as session:
        store = ContactStore.from_session(session)
        yield store
    await store.run_after_commit()


async def get_contact_service(store: ContactStore = Depends(get_store)) -> ContactService:
    return ContactService(store, publisher=manager.send_to_user)
