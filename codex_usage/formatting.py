"""Output formatting for Codex usage monitor."""

from typing import Optional

from .api import Credits, RateWindow, UsageReport
from .constants import (
    BAR_WIDTH,
    CRITICAL_PERCENT,
    ICONS,
    LABEL_WIDTH,
    RULE_WIDTH,
    WARN_PERCENT,
)
from .rendering import paint, pct_coloured, usage_bar, usage_styles
from .timefmt import format_delta_dh, format_seconds_short


def format_reset(reset_secs: Optional[int], color: bool = True) -> str:
    """Format seconds-until-reset like 'in 4h 12m', 'now' or a dash."""
    if reset_secs is None:
        return paint(ICONS["dash"], "dim", color=color)
    if reset_secs <= 0:
        return paint("now", "green", color=color)

    text = f"in {format_delta_dh(reset_secs)}"
    if reset_secs < 3600:
        return paint(text, "yellow", color=color)
    return text


def format_credits(credits: Credits) -> str:
    if credits.unlimited:
        return "unlimited"
    if not credits.has_credits:
        return "none"
    return credits.balance if credits.balance is not None else "available"


def format_window_fancy(
    label: str, window: Optional[RateWindow], bar_width: int = BAR_WIDTH, color: bool = True
) -> str:
    """One progress row: label, bar, percentage and reset time."""
    if window is None:
        return f"  {label:<{LABEL_WIDTH}} {paint('not available', 'dim', color=color)}"

    pct_used = window.clamped_percent()
    return "  {} {} {} resets {}".format(
        paint(f"{label:<{LABEL_WIDTH}}", "bold", color=color),
        usage_bar(pct_used, bar_width, color=color),
        pct_coloured(pct_used, color=color),
        format_reset(window.seconds_until_reset(), color=color),
    )


def format_window_plain(label: str, window: Optional[RateWindow]) -> str:
    """One plain key/value row for scripting."""
    if window is None:
        return f"{label}: N/A"

    secs = window.seconds_until_reset()
    reset = f"{secs}s" if secs is not None else ICONS["dash"]
    return f"{label}: {window.clamped_percent():.1f}% used  Resets in: {reset}"


def render_plain(report: UsageReport) -> list[str]:
    lines = [
        f"Plan: {report.plan_name}",
        format_window_plain("5hr window", report.primary),
        format_window_plain("7day window", report.secondary),
    ]
    if report.limit_reached:
        lines.append("Status: LIMIT REACHED")
    if report.credits is not None:
        lines.append(f"Credits: {format_credits(report.credits)}")
    return lines


def summary_hint(report: UsageReport, color: bool = True) -> str:
    """Closing advice line based on the busiest window."""
    highest = report.highest_used_percent()

    if report.limit_reached or highest >= 100.0:
        icon = paint(ICONS["cross"], "red", "bold", color=color)
        return f"  {icon} Limit reached — check your reset time above."
    elif highest >= CRITICAL_PERCENT:
        icon = paint(ICONS["warning"], "red", "bold", color=color)
        return f"  {icon} Nearly at your limit — check reset time above."
    elif highest >= WARN_PERCENT:
        icon = paint(ICONS["elevated"], "yellow", color=color)
        return f"  {icon} Usage is elevated — consider pacing your session."
    else:
        icon = paint(ICONS["check"], "green", color=color)
        return f"  {icon} Looking good — plenty of capacity remaining."


def render_fancy(report: UsageReport, color: bool = True) -> list[str]:
    """Full terminal display with header, bars and summary."""
    rule = "  " + paint(ICONS["rule"] * RULE_WIDTH, "dim", color=color)
    header = "  {} OpenAI {} Plan — Codex Usage Limits".format(
        paint(ICONS["diamond"], "cyan", "bold", color=color),
        paint(report.plan_name, "yellow", "bold", color=color),
    )

    lines = [
        header,
        rule,
        format_window_fancy("5-hour session", report.primary, color=color),
        format_window_fancy("7-day rolling", report.secondary, color=color),
    ]
    if report.credits is not None:
        label = paint(f"{'Credits':<{LABEL_WIDTH}}", "bold", color=color)
        lines.append(f"  {label} {format_credits(report.credits)}")
    lines.append(rule)
    lines.append("")
    lines.append(summary_hint(report, color=color))
    lines.append("")
    return lines


def _oneline_part(label: str, window: Optional[RateWindow], color: bool) -> Optional[str]:
    if window is None:
        return None
    pct = window.clamped_percent()
    text = f"{label} {paint(f'{pct:.1f}%', *usage_styles(pct), color=color)}"
    reset = format_seconds_short(window.seconds_until_reset())
    if reset:
        text += f" ({reset})"
    return text


def render_oneline(report: UsageReport, color: bool = True) -> str:
    """Compact single line for status bars, e.g. '5h 35.0% (3h) · 7d 14.0% (4d)'."""
    parts = [
        part
        for part in (
            _oneline_part("5h", report.primary, color),
            _oneline_part("7d", report.secondary, color),
        )
        if part
    ]
    if not parts:
        return "no usage data"
    line = f" {ICONS['bullet']} ".join(parts)
    if report.limit_reached:
        line += " " + paint("LIMIT", "red", "bold", color=color)
    return line
