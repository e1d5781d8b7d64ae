# File: backend/app/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PROJECT_NAME: str = "Resume Studio API"
    PROJECT_VERSION: str = "0.1.0"

    # Database settings
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "resume_studio")
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_SERVER}:{POSTGRES_PORT}/{POSTGRES_DB}")

    # Session settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "insecure-default-secret-key-for-dev-only")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "resume_session")
    SESSION_COOKIE_SECURE: bool = _as_bool(os.getenv("SESSION_COOKIE_SECURE", "false"))
    PASSWORD_RESET_ENABLED: bool = _as_bool(os.getenv("PASSWORD_RESET_ENABLED", "false"))

    # Base64 encoded 32 byte key used for stored tokens and API keys
    ENCRYPTION_KEY: str = os.getenv("ENCRYPTION_KEY", "")

    # OpenAI fallbacks when the user has no default config
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")

    # GitHub fallbacks when the user has no default config
    GITHUB_TOKEN: str = os.getenv("GITHUB_TOKEN", "")
    GITHUB_OWNER: str = os.getenv("GITHUB_OWNER", "")
    GITHUB_REPO: str = os.getenv("GITHUB_REPO", "")
    GITHUB_API_URL: str = os.getenv("GITHUB_API_URL", "https://api.github.com")

    # LaTeX preview
    TECTONIC_BIN: str = os.getenv("TECTONIC_BIN", "tectonic")
    TECTONIC_BUNDLE_URL: str = os.getenv("TECTONIC_BUNDLE_URL", "https://relay.fullyjustified.net/default_bundle.tar")
    LATEX_PREVIEW_TIMEOUT: int = int(os.getenv("LATEX_PREVIEW_TIMEOUT", "30"))

    # CORS settings
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

settings = Settings()
