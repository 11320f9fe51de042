"""Parse-attempt chain for list-valued query parameters.

URLs reach the shop from hand-edited links, marketing tools and older
versions of the site, so one list can arrive as a JSON array, a comma
separated list, a bracketed list or a single bare value. Each format is
a separate strategy that either succeeds with a tuple of values or
fails with a reason; ``parse_list`` runs the strategies in order and
returns the first success, or the last failure.
"""

import json
import math
from dataclasses import dataclass
from typing import Callable, Sequence

import structlog

logger = structlog.get_logger()

# ============================================================================
# Attempt Results
# ============================================================================


@dataclass(frozen=True)
class ParseAttempt:
    """Outcome of one parse strategy.

    Attributes:
        strategy: Name of the strategy that produced this outcome.
        values: Parsed values, None when the strategy failed.
        error: Failure reason, None when the strategy succeeded.
    """

    strategy: str
    values: tuple[str, ...] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Check if the strategy succeeded."""
        return self.values is not None

    @classmethod
    def success(cls, strategy: str, values: Sequence[str]) -> "ParseAttempt":
        """Create a successful attempt."""
        return cls(strategy=strategy, values=tuple(values))

    @classmethod
    def failure(cls, strategy: str, error: str) -> "ParseAttempt":
        """Create a failed attempt."""
        return cls(strategy=strategy, error=error)


ListStrategy = Callable[[str], ParseAttempt]


def _clean(segments: Sequence[str]) -> list[str]:
    return [s.strip() for s in segments if s.strip()]


def _unquote(segment: str) -> str:
    segment = segment.strip()
    if len(segment) >= 2 and segment[0] == segment[-1] and segment[0] in "\"'":
        return segment[1:-1]
    return segment


# ============================================================================
# Strategies
# ============================================================================


def parse_json_list(raw: str) -> ParseAttempt:
    """Parse a JSON array of strings or integers, e.g. ``["S","M"]``.

    Members of any other type (null, floats, nested arrays or objects)
    are skipped one by one; the rest of the array is kept.

    Args:
        raw: Raw parameter value.

    Returns:
        ParseAttempt for the "json" strategy.
    """
    try:
        decoded = json.loads(raw)
    except ValueError as e:
        return ParseAttempt.failure("json", f"invalid JSON: {e}")

    if not isinstance(decoded, list):
        return ParseAttempt.failure("json", f"expected a JSON array, got {type(decoded).__name__}")

    values = []
    for member in decoded:
        if isinstance(member, str):
            values.append(member)
        elif isinstance(member, int) and not isinstance(member, bool):
            values.append(str(member))
        else:
            logger.warning("Skipping unsupported list member", member=repr(member))
    return ParseAttempt.success("json", _clean(values))


def parse_delimited_list(raw: str, separator: str = ",") -> ParseAttempt:
    """Parse a separated list, optionally wrapped in brackets, e.g. ``S,M`` or ``[a, b]``.

    The strategy only applies when the value is bracketed or contains
    the separator, so a lone value falls through to ``parse_single_value``.

    Args:
        raw: Raw parameter value.
        separator: List separator.

    Returns:
        ParseAttempt for the "delimited" strategy.
    """
    text = raw.strip()
    segments = text.split(separator)
    bracketed = text.startswith("[") and text.endswith("]")
    if bracketed:
        # ['b1', 'b2'] and ["b1",] are not JSON; quotes are stripped per segment
        segments = [_unquote(s) for s in text[1:-1].split(separator)]
    elif separator not in text:
        return ParseAttempt.failure("delimited", f"no '{separator}' separator found")

    # "a,,b" and ",," are lists too; blank segments are dropped
    return ParseAttempt.success("delimited", _clean(segments))


def parse_single_value(raw: str) -> ParseAttempt:
    """Parse a single bare value, e.g. ``S``.

    Args:
        raw: Raw parameter value.

    Returns:
        ParseAttempt for the "single" strategy.
    """
    value = raw.strip()
    if not value:
        return ParseAttempt.failure("single", "empty value")
    return ParseAttempt.success("single", [value])


DEFAULT_LIST_STRATEGIES: tuple[ListStrategy, ...] = (
    parse_json_list,
    parse_delimited_list,
    parse_single_value,
)


def parse_list(
    raw: str,
    strategies: Sequence[ListStrategy] = DEFAULT_LIST_STRATEGIES,
) -> ParseAttempt:
    """Run the strategies in order and return the first success.

    Args:
        raw: Raw parameter value.
        strategies: Strategies to try, in order.

    Returns:
        First successful attempt, or the last failure if none succeeded.
    """
    attempt = ParseAttempt.failure("none", "no strategies given")
    for strategy in strategies:
        attempt = strategy(raw)
        if attempt.ok:
            return attempt
    return attempt


# ============================================================================
# Scalars
# ============================================================================


def parse_number(raw: str) -> float | int | None:
    """Parse a finite number, keeping integers as int.

    Args:
        raw: Raw parameter value, e.g. "500" or "49.99".

    Returns:
        Parsed number, or None when the value is not a finite number.
    """
    text = raw.strip()
    try:
        value = float(text)
    except ValueError:
        return None
    # float("1" + "0" * 400) is inf, so oversized integers stop here
    if not math.isfinite(value):
        return None
    if not value.is_integer():
        return value
    try:
        return int(text)
    except ValueError:
        return int(value)


def parse_positive_int(raw: str) -> int | None:
    """Parse an integer >= 1.

    Args:
        raw: Raw parameter value.

    Returns:
        Parsed integer, or None when missing, malformed or below 1.
    """
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value >= 1 else None


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
