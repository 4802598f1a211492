import logging

from fastapi import APIRouter, Response, Depends, status
from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import (
    ACCESS_TOKEN_COOKIE,
    get_password_hash,
    authenticate_user,
    create_access_token,
)
from app.core.exceptions import AuthError, ConflictError, StoreError
from app.core.settings import ACCESS_TOKEN_EXPIRE_MINUTES
from app.schemas import SUserRegister, SUserAuth, SUserResponse
from app.db import User, get_async_db_session
from app.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register/", status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: SUserRegister,
    db: AsyncSession = Depends(get_async_db_session),
) -> dict:
    existing = await db.scalar(
        select(User).where(
            or_(User.email == user_data.email, User.username == user_data.username)
        )
    )
    if existing:
        raise ConflictError("User already exists")

    user_dict = user_data.model_dump()
    user_dict["hashed_password"] = get_password_hash(user_dict.pop("password"))

    try:
        user = User(**user_dict)
        db.add(user)
        await db.commit()

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Failed to register %s", user_data.email)
        raise StoreError()

    logger.info("Registered user %s as %s", user.id, user.role.value)
    return {"message": "You have successfully registered!"}


@router.post("/login/")
async def auth_user(
    response: Response,
    user_data: SUserAuth,
    db: AsyncSession = Depends(get_async_db_session),
):
    user = await authenticate_user(db, email=user_data.email, password=user_data.password)
    if user is None or not user.is_active:
        raise AuthError("Invalid email or password")

    access_token = create_access_token({"sub": str(user.id)})

    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=access_token,
        httponly=True,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

    return {"access_token": access_token}


@router.get("/me/", response_model=SUserResponse)
async def get_me(user_data: User = Depends(get_current_user)):
    return user_data


@router.post("/logout/")
async def logout_user(response: Response):
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return {"message": "Logged out"}
