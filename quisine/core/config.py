import os

from dotenv import load_dotenv

# load .env from the project root
load_dotenv()

DEFAULT_JWT_SECRET = "dev-only-change-me"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./quisine.db")
ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_TEST = ENV_NORMALIZED == "test"
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

# Auth (JWT)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "").strip() or DEFAULT_JWT_SECRET
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

# Uploads
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Analytics
ANALYTICS_WINDOW_DAYS = int(os.getenv("ANALYTICS_WINDOW_DAYS", "7"))
TOP_ITEMS_LIMIT = int(os.getenv("TOP_ITEMS_LIMIT", "5"))
EXPENSES_LIST_LIMIT = int(os.getenv("EXPENSES_LIST_LIMIT", "20"))

# Kitchen display polling
ORDER_POLL_INTERVAL_SECONDS = int(os.getenv("ORDER_POLL_INTERVAL_SECONDS", "10"))
