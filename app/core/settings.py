from .config import Settings

settings = Settings()


DB_HOST = settings.db_settings.host
DB_PORT = settings.db_settings.port
DB_USER = settings.db_settings.user
DB_PASSWORD = settings.db_settings.password.get_secret_value()
DB_NAME = settings.db_settings.name

SQLALCHEMY_DATABASE_URL = f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"

SQLALCHEMY_ECHO = settings.db_settings.echo

MINIO_ACCESS_KEY = settings.minio_settings.access_key
MINIO_SECRET_KEY = settings.minio_settings.secret_key.get_secret_value()
MINIO_BUCKET = settings.minio_settings.bucket
MINIO_HOST = settings.minio_settings.host
MINIO_PORT = settings.minio_settings.port
MINIO_SECURE = settings.minio_settings.secure
MINIO_PUBLIC_URL = (
    settings.minio_settings.public_url
    or f"{'https' if MINIO_SECURE else 'http'}://{MINIO_HOST}:{MINIO_PORT}/{MINIO_BUCKET}"
)

UPLOAD_RATE_LIMIT = settings.rate_limit_settings.upload_limit
UPLOAD_RATE_WINDOW_SECONDS = settings.rate_limit_settings.window_seconds

LOG_LEVEL = settings.log_level

# JWT
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes


def get_auth_data():
    return {"secret_key": settings.secret_key, "algorithm": settings.algorithm}
