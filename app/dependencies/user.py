from jose import jwt, JWTError
from fastapi import Request, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel

from app.auth import ACCESS_TOKEN_COOKIE
from app.core.exceptions import AuthError, PermissionDeniedError
from app.core.settings import get_auth_data
from app.db import User, UserRole, get_async_db_session


class SessionIdentity(BaseModel):
    user_id: int
    role: UserRole


def decode_user_id(token: str) -> int | None:
    """Return the user id carried by a valid, unexpired access token."""
    auth_data = get_auth_data()
    try:
        # jose checks "exp" itself and raises ExpiredSignatureError
        payload = jwt.decode(
            token,
            auth_data["secret_key"],
            algorithms=[auth_data["algorithm"]]
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    try:
        return int(user_id)
    except ValueError:
        return None


async def resolve_session(
    request: Request,
    db: AsyncSession
) -> SessionIdentity | None:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        return None

    user_id = decode_user_id(token)
    if user_id is None:
        return None

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        return None

    return SessionIdentity(user_id=user.id, role=user.role)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_async_db_session),
) -> User:
    identity = await resolve_session(request, db)
    if identity is None:
        raise AuthError("You must be logged in")

    return await db.get(User, identity.user_id)


async def get_current_user_teacher(user: User = Depends(get_current_user)):
    if user.role == UserRole.teacher:
        return user
    raise PermissionDeniedError("Only teachers can do this")
