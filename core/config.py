"""
Centralized environment configuration.

Process-level settings (database, session secret, ports) come from the
environment. Per-plugin settings edited through the admin form live in the
database; see core.plugin_config.
"""

import os

DEFAULT_BASE_URL = "http://localhost:8000"


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def get_base_url() -> str:
    """Public base URL of the application, used to build the OAuth redirect URI."""
    return os.environ.get("BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def get_allowed_origins() -> list[str]:
    """
    Get list of allowed CORS origins.

    Includes localhost variants for dev and the configured base URL.
    """
    port = get_api_port()
    hosts = ["localhost", "127.0.0.1"]
    origins = [f"http://{host}:{port}" for host in hosts]

    base_url = get_base_url()
    if base_url not in origins:
        origins.append(base_url)

    return origins


# Required environment variables
# Format: (name, description, required)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("JWT_SECRET", "Secret key for session JWTs", True),
    ("BASE_URL", "Public base URL (must match the Google OAuth redirect)", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []

    for name, description, required in REQUIRED_ENV_VARS:
        if os.environ.get(name):
            continue
        if required:
            errors.append(f"  ✗ {name}: Not set ({description})")
        else:
            warnings.append(f"  ⚠ {name}: Not set ({description})")

    return not errors, errors + warnings
