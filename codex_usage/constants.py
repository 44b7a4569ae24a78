"""Constants for Codex usage monitor."""

import os

VERSION = "0.1.0"

# API
USAGE_URL = "https://chatgpt.com/backend-api/wham/usage"
REQUEST_TIMEOUT = 10.0  # seconds
USER_AGENT = f"Mozilla/5.0 (compatible; codex-usage/{VERSION})"

# Credential environment variables
ENV_ACCESS_TOKEN = "CODEX_ACCESS_TOKEN"
ENV_ACCOUNT_ID = "CODEX_ACCOUNT_ID"
ENV_API_KEY = "OPENAI_API_KEY"

# Service names the Codex CLI has been seen to use in the macOS Keychain
KEYCHAIN_SERVICES = ["Codex", "codex", "openai-codex", "Codex CLI"]
KEYCHAIN_TIMEOUT = 5  # seconds


def auth_file_candidates() -> list[str]:
    """Return auth.json locations in lookup order, resolved against $HOME."""
    home = os.environ.get("HOME", "")
    return [
        os.path.join(home, ".codex", "auth.json"),
        os.path.join(home, ".config", "codex", "auth.json"),
    ]


# Display
BAR_WIDTH = 28
RULE_WIDTH = 67
LABEL_WIDTH = 18
FETCHING_CLEAR_WIDTH = 55

# Usage thresholds (percent)
WARN_PERCENT = 70.0
CRITICAL_PERCENT = 90.0

# Progress bar characters
BAR_FULL = "█"
BAR_EMPTY = "░"

# Icons
ICONS = {
    "diamond": "◆",
    "rule": "─",
    "dash": "—",
    "bullet": "·",
    "cross": "✗",
    "warning": "⚠",
    "elevated": "△",
    "check": "✓",
}

# ANSI styles
ANSI = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}
