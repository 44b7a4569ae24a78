"""API calls for Codex usage monitor."""

import math
import sys
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import requests

from .auth import Credentials
from .constants import REQUEST_TIMEOUT, USAGE_URL, USER_AGENT


class UsageAPIError(RuntimeError):
    """The usage endpoint could not be queried or understood."""


@dataclass
class RateWindow:
    """One rolling usage window."""

    used_percent: Optional[float] = None  # 0-100
    reset_after_seconds: Optional[int] = None
    limit_window_seconds: Optional[int] = None
    reset_at: Optional[int] = None  # Unix timestamp

    def seconds_until_reset(self, now: Optional[float] = None) -> Optional[int]:
        """Seconds until this window resets, or None if unknown."""
        if self.reset_after_seconds is not None:
            return max(0, self.reset_after_seconds)
        if self.reset_at is None:
            return None
        if now is None:
            now = time.time()
        return max(0, int(self.reset_at - now))

    def clamped_percent(self) -> float:
        """Used percent with missing values as 0 and capped at 100."""
        return min(self.used_percent or 0.0, 100.0)


@dataclass
class RateLimit:
    primary_window: Optional[RateWindow] = None  # 5-hour window
    secondary_window: Optional[RateWindow] = None  # 7-day window
    limit_reached: Optional[bool] = None


@dataclass
class Credits:
    has_credits: bool = False
    unlimited: bool = False
    balance: Optional[str] = None


@dataclass
class UsageReport:
    """Parsed response from the usage endpoint."""

    plan_type: Optional[str] = None
    rate_limit: Optional[RateLimit] = None
    credits: Optional[Credits] = None

    @property
    def primary(self) -> Optional[RateWindow]:
        return self.rate_limit.primary_window if self.rate_limit else None

    @property
    def secondary(self) -> Optional[RateWindow]:
        return self.rate_limit.secondary_window if self.rate_limit else None

    @property
    def limit_reached(self) -> bool:
        return bool(self.rate_limit and self.rate_limit.limit_reached)

    @property
    def plan_name(self) -> str:
        return (self.plan_type or "unknown").upper()

    def highest_used_percent(self) -> float:
        """Highest raw used percent across the windows that are present."""
        highest = 0.0
        for window in (self.primary, self.secondary):
            if window is not None:
                highest = max(highest, window.used_percent or 0.0)
        return highest

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, window in (("primary", self.primary), ("secondary", self.secondary)):
            if window is not None:
                data["rate_limit"][f"{key}_window"][
                    "seconds_until_reset"
                ] = window.seconds_until_reset()
        return data


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


def _to_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _parse_window(data: Any) -> Optional[RateWindow]:
    if not isinstance(data, dict):
        return None
    return RateWindow(
        used_percent=_to_float(data.get("used_percent")),
        reset_after_seconds=_to_int(data.get("reset_after_seconds")),
        limit_window_seconds=_to_int(data.get("limit_window_seconds")),
        reset_at=_to_int(data.get("reset_at")),
    )


def parse_usage(payload: Any) -> UsageReport:
    """Build a UsageReport from a decoded JSON payload.

    Lenient about shape: unknown keys are ignored and malformed sections
    are treated as missing.
    """
    if not isinstance(payload, dict):
        raise UsageAPIError(f"Unexpected usage response: {payload!r}")

    plan_type = payload.get("plan_type")
    if not isinstance(plan_type, str) or not plan_type:
        plan_type = None

    rate_limit = None
    rl_data = payload.get("rate_limit")
    if isinstance(rl_data, dict):
        rate_limit = RateLimit(
            primary_window=_parse_window(rl_data.get("primary_window")),
            secondary_window=_parse_window(rl_data.get("secondary_window")),
            limit_reached=_to_bool(rl_data.get("limit_reached")),
        )

    credits = None
    credits_data = payload.get("credits")
    if isinstance(credits_data, dict):
        balance = credits_data.get("balance")
        credits = Credits(
            has_credits=bool(_to_bool(credits_data.get("has_credits"))),
            unlimited=bool(_to_bool(credits_data.get("unlimited"))),
            balance=str(balance) if balance is not None else None,
        )

    return UsageReport(plan_type=plan_type, rate_limit=rate_limit, credits=credits)


def build_headers(creds: Credentials) -> Dict[str, str]:
    """Request headers for the usage endpoint."""
    headers = {
        "Authorization": f"Bearer {creds.access_token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
        "User-Agent": USER_AGENT,
    }
    if creds.account_id:
        headers["chatgpt-account-id"] = creds.account_id
    return headers


def fetch_usage(
    creds: Credentials,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
    verbose: bool = False,
) -> UsageReport:
    """Fetch and parse usage limits for an OAuth session token."""
    if not creds.is_oauth:
        raise UsageAPIError(
            "Only an API key was found — Codex usage limits are only visible "
            "via an OAuth session token.\n"
            "Log in with:  codex login"
        )

    http = session if session is not None else requests
    try:
        response = http.get(USAGE_URL, headers=build_headers(creds), timeout=timeout)
    except requests.RequestException as e:
        raise UsageAPIError(f"Failed to reach ChatGPT API: {e}") from e

    status = response.status_code
    if verbose:
        print(f"GET {USAGE_URL} -> HTTP {status}", file=sys.stderr)

    if status in (401, 403):
        raise UsageAPIError(
            f"Token expired or unauthorised (HTTP {status}).\n"
            "Try:  codex logout && codex login"
        )
    if not response.ok:
        raise UsageAPIError(f"API returned HTTP {status}: {response.text}")

    try:
        payload = response.json()
    except ValueError as e:
        raise UsageAPIError(
            f"Failed to parse usage response: {response.text}"
        ) from e

    return parse_usage(payload)
