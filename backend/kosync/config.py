# kosync/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "kosync server"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8081"))

    # Public self-registration through POST /users/create
    registration_enabled: bool = not _env_flag("REGISTRATION_DISABLED")

    # Password of the reserved "admin" account, re-applied on every startup
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")

    # Proxies allowed to report the client address via X-Forwarded-For (logging only)
    trusted_proxies: list[str] = _env_list("TRUSTED_PROXIES")


settings = Settings()  # Instantiate configuration


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
