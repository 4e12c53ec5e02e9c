"""
Layout Migrator — Central Configuration

All environment variables and document-schema defaults live here.
Import `settings`, `MIGRATION_CONFIG`, `log`, and `generate_error_code` from this module.
Do not read `os.environ` anywhere else.
"""

import re
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All environment variables. Loaded from .env or an account-specific .<domain>.env."""

    # Prolibu account
    prolibu_api_url: str = ""         # e.g. https://acme.prolibu.com/api
    prolibu_auth_token: str = ""      # "Bearer eyJ..." or the raw token

    # HTTP
    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    # Migration
    sync_fonts: bool = True
    output_dir: str = "output"

    # App
    environment: str = "development"  # "development" | "production"
    cors_origins: str = "http://localhost:3000"  # Comma-separated for multiple origins
    migration_rate_limit: str = "30/minute"      # slowapi limit string, per client IP

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton — import this everywhere
settings = Settings()


class AccountSettings(Settings):
    """Settings read from an account file; values in the file beat process environment variables."""

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings):
        return init_settings, dotenv_settings, env_settings, file_secret_settings


# Strict account name pattern; rejects path separators in --domain
DOMAIN_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_-]*$")


def load_account_settings(domain: str, search_dirs: list[Path] | None = None) -> AccountSettings:
    """Load settings from a `.{domain}.env` file.

    Looks in the project root first, then the current working directory.
    Values in the file take precedence over process environment variables.

    Raises:
        ValueError: domain contains characters outside DOMAIN_PATTERN.
        FileNotFoundError: no `.{domain}.env` in any searched directory.
    """
    if not DOMAIN_PATTERN.match(domain):
        raise ValueError(
            f'Invalid domain name: "{domain}". Only alphanumeric characters, '
            "hyphens, and underscores are allowed."
        )

    filename = f".{domain}.env"
    dirs = search_dirs or [Path(__file__).resolve().parent.parent, Path.cwd()]
    for directory in dirs:
        path = directory / filename
        if path.is_file():
            return AccountSettings(_env_file=path)

    looked_in = "\n".join(f"    - {d / filename}" for d in dirs)
    raise FileNotFoundError(
        f'Env file not found: "{filename}"\n  Looked in:\n{looked_in}\n\n'
        f"  Create it with:\n"
        f"    PROLIBU_API_URL=https://{domain}.prolibu.com/api\n"
        f"    PROLIBU_AUTH_TOKEN=Bearer eyJ..."
    )


# ──────────────────────────────────────────────────────
# Logging Utilities (structured print)
# ──────────────────────────────────────────────────────

def generate_error_code() -> str:
    """Generate a short, user-friendly error reference code.

    Format: 'LM-' followed by 6 uppercase hex characters.
    Example: 'LM-3F8A2C'

    Used whenever a failure is surfaced to the user (CLI output or API error detail).
    The same code is logged, so the user can quote it and it can be grepped for.
    """
    return f"LM-{uuid.uuid4().hex[:6].upper()}"


def log(level: str, message: str, **context) -> None:
    """Structured print-based logger.

    Every log line follows the format:
        [ISO_TIMESTAMP] [LEVEL] message | key1=value1 key2=value2

    Args:
        level: One of "INFO", "WARN", "ERROR".
        message: Human-readable description of what happened.
        **context: Arbitrary key-value pairs. Include template_id when available.

    Usage:
        log("INFO", "migration started", template_id="main-layout")
        log("ERROR", "template fetch failed", template_id="main-layout",
            error_code="LM-3F8A2C", error=str(e))
    """
    ts = datetime.now(timezone.utc).isoformat()
    ctx = " ".join(f"{k}={v}" for k, v in context.items())
    print(f"[{ts}] [{level}] {message} | {ctx}", flush=True)


# ──────────────────────────────────────────────────────
# Document Schema Defaults
# ──────────────────────────────────────────────────────

MIGRATION_CONFIG = {
    "schema_version": "1.0.0",
    "plugin_version": "1.0.0",
    "page_sizes": {
        "fixed": {"width": 792, "height": 612, "preset": "fixed"},
    },
    "typography": {
        "default_font_family": "Inter",
        "default_font_size": 16,
        "default_font_weight": 400,
        "default_line_height": 1.5,
        "default_text_color": "#000000",
        "available_fonts": [
            "Inter",
            "Roboto",
            "Open Sans",
            "Lato",
            "Montserrat",
            "Poppins",
            "Source Sans Pro",
            "Playfair Display",
            "Merriweather",
            "Georgia",
            "Times New Roman",
            "Arial",
            "Helvetica",
        ],
    },
    "grid": {"enabled": True, "size": 8, "color": "#E5E5E5", "snap": True},
    "rulers": {"enabled": True, "unit": "px"},
    "background": "#FFFFFF",
}
