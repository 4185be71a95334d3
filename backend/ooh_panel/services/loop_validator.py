"""Loop schedule validation for digital (dynamic) sites.

A digital site plays its spots back to back, ``spot_duration`` seconds each,
and a loop is one pass over ``loops_per_day`` spots (the stored field name
predates its meaning: it is the spots-per-loop count). A schedule is only
accepted when the daily window holds a whole number of loops. When it does not,
nearby values of either field that would divide the window evenly are offered
as corrections.

``check_loop_schedule`` does the arithmetic and returns a structured
``LoopCheck``; ``render_message`` turns that into the text shown on the
inventory forms; ``validate`` combines both and never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import math
import re
from typing import Any, Callable, Mapping

from ..core.config import get_settings

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
DYNAMIC_CONTENT_KINDS = frozenset({"digital", "dynamic"})

SPOT_DURATION = "spot_duration"
SPOTS_PER_LOOP = "loops_per_day"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class LoopError(str, Enum):
    MISSING_FIELDS = "missing_fields"
    INVALID_TIME = "invalid_time"
    NON_POSITIVE = "non_positive"
    INDIVISIBLE = "indivisible"
    UNEXPECTED = "unexpected"


class MessageStyle(str, Enum):
    DETAILED = "detailed"  # detail page dialog
    COMPACT = "compact"  # edit form


ERROR_MESSAGES = {
    LoopError.MISSING_FIELDS: "All dynamic content fields are required.",
    LoopError.INVALID_TIME: "Invalid time format.",
    LoopError.NON_POSITIVE: "Spot duration and spots per loop must be positive numbers.",
    LoopError.UNEXPECTED: "Invalid time format or values.",
}

FALLBACK_SUGGESTION = (
    "• Try adjusting spot duration or spots per loop to values that divide evenly into the total time"
)


@dataclass(frozen=True)
class ScheduleConfig:
    start_time: str | None = None
    end_time: str | None = None
    spot_duration: str | int | None = None
    loops_per_day: str | int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ScheduleConfig":
        data = data or {}
        return cls(
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            spot_duration=data.get("spot_duration"),
            loops_per_day=data.get("loops_per_day"),
        )


@dataclass(frozen=True)
class LoopSuggestion:
    field: str
    value: int
    loops: int

    @property
    def label(self) -> str:
        if self.field == SPOT_DURATION:
            return f"spot duration to {self.value}s"
        return f"spots per loop to {self.value}"


@dataclass(frozen=True)
class LoopCheck:
    error: LoopError | None = None
    duration_minutes: int = 0
    duration_seconds: int = 0
    spot_duration: int = 0
    spots_per_loop: int = 0
    suggestions: tuple[LoopSuggestion, ...] = ()

    @property
    def valid(self) -> bool:
        return self.error is None

    @property
    def time_per_loop(self) -> int:
        return self.spot_duration * self.spots_per_loop

    @property
    def loops(self) -> float:
        if not self.time_per_loop:
            return 0.0
        return self.duration_seconds / self.time_per_loop

    @property
    def complete_loops(self) -> int:
        if not self.time_per_loop:
            return 0
        return self.duration_seconds // self.time_per_loop


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str | None = None
    check: LoopCheck | None = None


def is_dynamic_content(content_kind: str | None) -> bool:
    return (content_kind or "").strip().lower() in DYNAMIC_CONTENT_KINDS


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def parse_clock(value: str) -> int:
    """Minutes since midnight for an ``HH:MM`` string; raises ValueError."""
    parts = str(value).split(":")
    if len(parts) < 2:
        raise ValueError(f"not a HH:MM time: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    return hours * 60 + minutes


def format_clock(value: str) -> str:
    """Canonical zero-padded ``HH:MM`` for a time ``parse_clock`` accepts."""
    hours, minutes = divmod(parse_clock(value), 60)
    return f"{hours:02d}:{minutes:02d}"


def window_minutes(start_time: str, end_time: str) -> int:
    start = parse_clock(start_time)
    end = parse_clock(end_time)
    # an end at or before the start runs past midnight
    if end <= start:
        end += MINUTES_PER_DAY
    return end - start


def parse_count(value: Any) -> int | None:
    """Leading integer of ``value`` the way form inputs are read, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def find_working_values(
    duration_seconds: int,
    current: int,
    fixed: int,
    *,
    max_offset: int | None = None,
    limit: int | None = None,
) -> list[int]:
    """Values near ``current`` that, multiplied by ``fixed``, divide the window evenly.

    Candidates are tried outward from ``current``, the higher one first at each
    offset, and never go below 1.
    """
    if max_offset is None or limit is None:
        settings = get_settings()
        max_offset = settings.loop_suggestion_max_offset if max_offset is None else max_offset
        limit = settings.loop_suggestions_per_field if limit is None else limit
    found: list[int] = []
    for offset in range(1, max_offset + 1):
        for candidate in (current + offset, max(1, current - offset)):
            if candidate == current or candidate in found:
                continue
            if duration_seconds % (candidate * fixed) == 0:
                found.append(candidate)
                if len(found) >= limit:
                    return found
    return found


def check_loop_schedule(
    config: ScheduleConfig,
    *,
    max_offset: int | None = None,
    limit: int | None = None,
) -> LoopCheck:
    fields = (config.start_time, config.end_time, config.spot_duration, config.loops_per_day)
    if any(_is_blank(value) for value in fields):
        return LoopCheck(error=LoopError.MISSING_FIELDS)

    try:
        duration_minutes = window_minutes(config.start_time, config.end_time)
    except ValueError:
        return LoopCheck(error=LoopError.INVALID_TIME)
    duration_seconds = duration_minutes * 60

    spot_duration = parse_count(config.spot_duration)
    spots_per_loop = parse_count(config.loops_per_day)
    if spot_duration is None or spots_per_loop is None or spot_duration <= 0 or spots_per_loop <= 0:
        return LoopCheck(
            error=LoopError.NON_POSITIVE,
            duration_minutes=duration_minutes,
            duration_seconds=duration_seconds,
        )

    if duration_seconds % (spot_duration * spots_per_loop) == 0:
        return LoopCheck(
            duration_minutes=duration_minutes,
            duration_seconds=duration_seconds,
            spot_duration=spot_duration,
            spots_per_loop=spots_per_loop,
        )

    suggestions = [
        LoopSuggestion(SPOT_DURATION, value, duration_seconds // (value * spots_per_loop))
        for value in find_working_values(
            duration_seconds, spot_duration, spots_per_loop, max_offset=max_offset, limit=limit
        )
    ]
    suggestions += [
        LoopSuggestion(SPOTS_PER_LOOP, value, duration_seconds // (spot_duration * value))
        for value in find_working_values(
            duration_seconds, spots_per_loop, spot_duration, max_offset=max_offset, limit=limit
        )
    ]
    return LoopCheck(
        error=LoopError.INDIVISIBLE,
        duration_minutes=duration_minutes,
        duration_seconds=duration_seconds,
        spot_duration=spot_duration,
        spots_per_loop=spots_per_loop,
        suggestions=tuple(suggestions),
    )


def format_duration(minutes: int) -> str:
    hours, remainder = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {remainder}m"
    return f"{remainder}m"


def _suggestions_text(check: LoopCheck) -> str:
    lines = ["Suggested corrections:"]
    for number, suggestion in enumerate(check.suggestions, start=1):
        lines.append(f"• Option {number}: Change {suggestion.label} ({suggestion.loops} complete loops)")
    if not check.suggestions:
        lines.append(FALLBACK_SUGGESTION)
    return "\n".join(lines) + ("\n" if check.suggestions else "")


def render_message(check: LoopCheck, style: MessageStyle = MessageStyle.DETAILED) -> str:
    if check.error in ERROR_MESSAGES:
        return ERROR_MESSAGES[check.error]

    duration = format_duration(check.duration_minutes)
    if check.error is LoopError.INDIVISIBLE:
        loops = f"{check.loops:.2f}"
        return (
            f"Invalid Input: The current configuration results in {loops} loops, which is not a whole number. \n\n"
            f"Time Duration: {duration} ({check.duration_seconds} seconds)\n"
            f"Current Configuration: {check.spot_duration}s × {check.spots_per_loop} spots"
            f" = {check.time_per_loop}s per loop\n"
            f"Result: {check.duration_seconds}s ÷ {check.time_per_loop}s = {loops} loops\n\n"
            f"{_suggestions_text(check)}"
        )

    if style is MessageStyle.COMPACT:
        return "✓ Configuration is valid and will fit complete loops within the time period."
    return (
        f"✓ Valid Configuration: {check.complete_loops} complete loops will fit in the {duration} time period. "
        f"Each loop uses {check.time_per_loop}s ({check.spot_duration}s × {check.spots_per_loop} spots)."
    )


def validate(
    config: ScheduleConfig,
    content_kind: str | None,
    *,
    style: MessageStyle = MessageStyle.DETAILED,
    on_message: Callable[[str | None], None] | None = None,
) -> ValidationResult:
    """Validate a playback window for ``content_kind``.

    Static content always passes with no message. ``on_message`` receives the
    rendered message (or None) for callers that display it live.
    """
    if not is_dynamic_content(content_kind):
        result = ValidationResult(valid=True)
    else:
        try:
            check = check_loop_schedule(config)
            result = ValidationResult(valid=check.valid, message=render_message(check, style), check=check)
        except Exception:
            logger.exception("Unexpected error validating loop schedule %r", config)
            check = LoopCheck(error=LoopError.UNEXPECTED)
            result = ValidationResult(valid=False, message=render_message(check), check=check)
    if on_message is not None:
        on_message(result.message)
    return result
