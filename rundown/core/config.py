"""
Runtime configuration, read from environment variables.
"""

import os
from typing import List, Optional, Tuple

# HTTP server configuration
PORT = os.getenv("PORT", "4000")

# Basic-auth credentials for the back-office
RUNDOWN_USER = os.getenv("RUNDOWN_USER", "user")
RUNDOWN_PASS = os.getenv("RUNDOWN_PASS", "pass")

# Dataset file, rewritten after every change
RUNDOWN_FILENAME = os.getenv("RUNDOWN_FILENAME", "rundown.json")

# Optional seed for story placement; unset means OS entropy
RUNDOWN_SEED = os.getenv("RUNDOWN_SEED")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Version string
VERSION = "1.0.0"

AUTH_REALM = "Authorization Required"


def get_port() -> int:
    """Get the listening port."""
    return int(os.getenv("PORT", "4000"))


def get_credentials() -> Tuple[str, str]:
    """Get the (username, password) pair accepted by basic auth."""
    return os.getenv("RUNDOWN_USER", "user"), os.getenv("RUNDOWN_PASS", "pass")


def get_data_filename() -> str:
    """Get the dataset filename."""
    return os.getenv("RUNDOWN_FILENAME", "rundown.json")


def get_seed() -> Optional[int]:
    """Get the placement seed, or None when unset."""
    seed = os.getenv("RUNDOWN_SEED")
    if seed is None or not seed.strip():
        return None
    return int(seed)


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def validate_config() -> List[str]:
    """Validate configuration and return any issues."""
    issues = []

    port = os.getenv("PORT", "4000")
    if not port.isdigit() or not 0 < int(port) < 65536:
        issues.append(f"PORT must be an integer between 1 and 65535, got {port!r}")

    user, password = get_credentials()
    if not user:
        issues.append("RUNDOWN_USER must not be empty")
    if not password:
        issues.append("RUNDOWN_PASS must not be empty")

    if not get_data_filename().strip():
        issues.append("RUNDOWN_FILENAME must not be empty")

    seed = os.getenv("RUNDOWN_SEED")
    if seed is not None and seed.strip():
        try:
            int(seed)
        except ValueError:
            issues.append(f"RUNDOWN_SEED must be an integer, got {seed!r}")

    return issues
