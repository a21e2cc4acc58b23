import os
from datetime import timedelta

from dotenv import load_dotenv


load_dotenv()


PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _database_url() -> str:
    url = os.getenv("DATABASE_URL", "").strip()
    if url:
        return url

    host = os.getenv("ISUCONP_DB_HOST") or "localhost"
    port = os.getenv("ISUCONP_DB_PORT") or "3306"
    if not port.isdigit():
        raise ValueError(
            f"ISUCONP_DB_PORT must be a port number, got {port!r}"
        )
    user = os.getenv("ISUCONP_DB_USER") or "root"
    password = os.getenv("ISUCONP_DB_PASSWORD", "")
    name = os.getenv("ISUCONP_DB_NAME") or "isuconp"
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"


def _redis_url() -> str:
    url = os.getenv("REDIS_URL", "").strip()
    if url:
        return url
    address = os.getenv("ISUCONP_REDIS_ADDRESS", "").strip() or "localhost:6379"
    return f"redis://{address}/0"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "sendagaya")

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE_SECONDS", "280")),
    }

    REDIS_URL = _redis_url()
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2"))
    REDIS_CONNECT_TIMEOUT = float(os.getenv("REDIS_CONNECT_TIMEOUT", "2"))

    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "isuconp.session")
    SESSION_KEY_PREFIX = os.getenv("SESSION_KEY_PREFIX", "iscogram_")
    SESSION_LIFETIME_SECONDS = int(
        os.getenv("SESSION_LIFETIME_SECONDS", str(24 * 60 * 60))
    )
    SESSION_COOKIE_HTTPONLY = True

    # Flask-Session keeps the bag in Redis; SESSION_REDIS is set by create_app.
    SESSION_TYPE = "redis"
    SESSION_PERMANENT = True
    SESSION_USE_SIGNER = False
    SESSION_SERIALIZATION_FORMAT = "json"
    PERMANENT_SESSION_LIFETIME = timedelta(seconds=SESSION_LIFETIME_SECONDS)

    # Read-through cache entries are allowed to be this stale.
    CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "10"))
    POSTS_PER_PAGE = int(os.getenv("POSTS_PER_PAGE", "20"))
    UPLOAD_LIMIT_BYTES = int(os.getenv("UPLOAD_LIMIT_BYTES", str(10 * 1024 * 1024)))

    PUBLIC_DIR = os.getenv(
        "PUBLIC_DIR",
        os.path.join(os.path.dirname(PACKAGE_DIR), "public"),
    )
    IMAGE_MIRROR_BACKEND = os.getenv("IMAGE_MIRROR_BACKEND", "local").strip().lower()
    IMAGE_MIRROR_LOCAL_FALLBACK = _env_bool("IMAGE_MIRROR_LOCAL_FALLBACK", True)

    MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "localhost:9000")
    MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "admin")
    MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "supersecret")
    MINIO_BUCKET = os.getenv("MINIO_BUCKET", "images")
    MINIO_SECURE = _env_bool("MINIO_SECURE", False)
    MINIO_CONNECT_TIMEOUT = float(os.getenv("MINIO_CONNECT_TIMEOUT", "5"))
    MINIO_READ_TIMEOUT = float(os.getenv("MINIO_READ_TIMEOUT", "20"))
    MINIO_HTTP_POOL_MAXSIZE = int(os.getenv("MINIO_HTTP_POOL_MAXSIZE", "32"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
