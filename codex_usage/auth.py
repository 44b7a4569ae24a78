"""Credential discovery for Codex usage monitor."""

import json
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import (
    ENV_ACCESS_TOKEN,
    ENV_ACCOUNT_ID,
    ENV_API_KEY,
    KEYCHAIN_SERVICES,
    KEYCHAIN_TIMEOUT,
    auth_file_candidates,
)


class CredentialsError(RuntimeError):
    """No usable credential could be found."""


@dataclass
class Credentials:
    """A token plus what it is good for.

    is_oauth is True for a ChatGPT OAuth session token (can read usage
    limits) and False for a plain API key (cannot).
    """

    access_token: str
    account_id: Optional[str] = None
    is_oauth: bool = True
    source: str = ""


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def extract_from_auth(data: Dict[str, Any], source: str = "") -> Credentials:
    """Pull a token out of a parsed auth.json structure.

    OAuth tokens win over a stored API key.
    """
    if not isinstance(data, dict):
        raise CredentialsError("auth structure is not a JSON object")

    tokens = data.get("tokens")
    if isinstance(tokens, dict):
        access_token = tokens.get("access_token")
        account_id = tokens.get("account_id")
        if not isinstance(account_id, str) or not account_id:
            account_id = None
        if isinstance(access_token, str) and access_token:
            return Credentials(
                access_token=access_token,
                account_id=account_id,
                is_oauth=True,
                source=source,
            )

    api_key = data.get("OPENAI_API_KEY")
    if isinstance(api_key, str) and api_key:
        return Credentials(
            access_token=api_key,
            account_id=None,
            is_oauth=False,
            source=source,
        )

    raise CredentialsError("no usable token in auth structure")


def read_auth_json(path: str) -> Credentials:
    """Read credentials from a Codex CLI auth.json file."""
    try:
        with open(path, encoding="utf-8") as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialsError(f"Could not read {path}: {e}") from e

    try:
        data = json.loads(raw.strip())
    except json.JSONDecodeError as e:
        raise CredentialsError(f"Could not parse {path}: {e}") from e

    try:
        return extract_from_auth(data, source=path)
    except CredentialsError:
        raise CredentialsError(
            f"{path} found but contained no usable token"
        ) from None


def read_keychain() -> Credentials:
    """Read credentials from the macOS Keychain.

    The stored value may be an auth.json blob or a bare access token.
    """
    if shutil.which("security") is None:
        raise CredentialsError("macOS security tool not available")

    for service in KEYCHAIN_SERVICES:
        try:
            result = subprocess.run(
                ["security", "find-generic-password", "-s", service, "-w"],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=KEYCHAIN_TIMEOUT,
            )
        except (subprocess.TimeoutExpired, subprocess.SubprocessError, OSError):
            continue
        if result.returncode != 0:
            continue

        raw = result.stdout.strip()
        if not raw:
            continue

        source = f"keychain:{service}"
        try:
            return extract_from_auth(json.loads(raw), source=source)
        except (json.JSONDecodeError, CredentialsError):
            pass
        return Credentials(access_token=raw, is_oauth=True, source=source)

    raise CredentialsError("Codex credentials not found in macOS Keychain")


def get_credentials() -> Credentials:
    """Find a usable token, in priority order.

    1. CODEX_ACCESS_TOKEN (+ optional CODEX_ACCOUNT_ID)
    2. OPENAI_API_KEY (API key, cannot read usage limits)
    3. ~/.codex/auth.json
    4. ~/.config/codex/auth.json
    5. macOS Keychain
    """
    token = _env(ENV_ACCESS_TOKEN)
    if token:
        return Credentials(
            access_token=token,
            account_id=_env(ENV_ACCOUNT_ID),
            is_oauth=True,
            source=f"${ENV_ACCESS_TOKEN}",
        )

    api_key = _env(ENV_API_KEY)
    if api_key:
        return Credentials(
            access_token=api_key,
            is_oauth=False,
            source=f"${ENV_API_KEY}",
        )

    for path in auth_file_candidates():
        if os.path.exists(path):
            try:
                return read_auth_json(path)
            except CredentialsError:
                continue

    try:
        return read_keychain()
    except CredentialsError:
        pass

    raise CredentialsError(
        "No OpenAI / Codex credentials found.\n"
        "Tried:\n"
        f"  • {ENV_ACCESS_TOKEN} / {ENV_API_KEY} env vars\n"
        "  • ~/.codex/auth.json\n"
        "  • ~/.config/codex/auth.json\n"
        '  • macOS Keychain (service "Codex")\n\n'
        "Log in with:  codex login\n"
        "Or set:       export OPENAI_API_KEY=sk-..."
    )
