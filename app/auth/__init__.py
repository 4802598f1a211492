from .auth import (
    ACCESS_TOKEN_COOKIE,
    pwd_context,
    get_password_hash,
    verify_password,
    create_access_token,
    authenticate_user,
)
