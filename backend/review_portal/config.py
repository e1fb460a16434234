# review_portal/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Review Portal API"
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # CORS origins for the browser client
    CORS_ORIGINS: list[str] = _split_origins(
        os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    )

    # Database (Tortoise URL); Postgres needs the "postgres" extra
    database_url: str = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")
    generate_schemas: bool = os.getenv("DB_GENERATE_SCHEMAS", "false").lower() in ("true", "1", "yes")

    # Token signing
    # ⚠️ No default: a missing secret must stop the server, never fall back to a guessable constant
    jwt_secret: str | None = os.getenv("JWT_SECRET") or None
    token_ttl_hours: int = int(os.getenv("TOKEN_TTL_HOURS", "24"))

    # Client application shell served for non-API paths
    static_dir: str = os.getenv(
        "STATIC_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")
    )

settings = Settings()  # Instantiate configuration
