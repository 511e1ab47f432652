"""
Application configuration from environment variables.
Loads .env from the backend directory so secrets are found regardless of cwd.
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-me-in-production"

# .env next to backend/ (parent of taskboard/); load explicitly so it is used even when run from repo root
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)
else:
    # Fallback: try backend/.env relative to cwd (e.g. when running from repo root)
    import os
    _cwd_env = Path(os.getcwd()) / "backend" / ".env"
    if _cwd_env.exists():
        from dotenv import load_dotenv
        load_dotenv(_cwd_env, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database: sqlite for local use and tests, postgresql for production
    database_url: str = "sqlite:///./taskboard.db"

    # Environment: set ENV=production in production; used to enforce SECRET_KEY and disable demo passwords.
    env: str = ""

    # Session JWT. Lifetime is 7 days; the session cookie uses the same max-age.
    secret_key: str = DEFAULT_SECRET_KEY
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24 * 7
    session_cookie_name: str = "auth-token"

    # bcrypt cost factor. Tests lower it to keep fixtures fast.
    bcrypt_rounds: int = 12

    # Demo logins: admin123 / student123 / enseignant123 are accepted for any existing user.
    allow_demo_passwords: bool = True
    # Seed the three demo accounts when the users table is empty.
    seed_demo_users: bool = True

    default_event_color: str = "#3b82f6"

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:3000"

    debug: bool = False

    @field_validator("bcrypt_rounds")
    @classmethod
    def _bcrypt_rounds_range(cls, v: int) -> int:
        # bcrypt.gensalt accepts 4..31
        if v < 4 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @property
    def is_production(self) -> bool:
        return (self.env or "").strip().lower() == "production"

    @property
    def session_max_age_seconds(self) -> int:
        return self.jwt_expire_hours * 3600


settings = Settings()
