"""Moment-style date patterns — compile, parse, and format filenames.

Stream filenames are described with moment.js tokens (``YYYY-MM-DD``,
``YYYY-[W]ww``, ``YYYY-[Q]Q``). A pattern is compiled once into a list of
tokens that drives both a strict regex parser and a formatter, so that
``format_pattern(parse_pattern(s, f), f) == s`` for every accepted *s*.

Week tokens use ISO numbering (weeks start on Monday). The half-year
sequence ``[H]H`` is a special token: filenames carry a 1-based half
(``H1``/``H2``) while month arithmetic stays 0-based.
"""

from __future__ import annotations

import calendar
import functools
import re
from dataclasses import dataclass
from datetime import date, timedelta

_MONTH_NAMES = [calendar.month_name[i] for i in range(1, 13)]
_MONTH_ABBRS = [calendar.month_abbr[i] for i in range(1, 13)]
_DAY_NAMES = [calendar.day_name[i] for i in range(7)]
_DAY_ABBRS = [calendar.day_abbr[i] for i in range(7)]

_HALF_YEAR = "[H]H"

# Longest tokens first so ``YYYY`` wins over ``YY`` and ``MMMM`` over ``MM``.
_TOKENS: tuple[str, ...] = (
    "YYYY",
    "GGGG",
    "gggg",
    "MMMM",
    "DDDD",
    "dddd",
    "MMM",
    "DDD",
    "ddd",
    "YY",
    "MM",
    "Do",
    "DD",
    "WW",
    "ww",
    "Q",
    "M",
    "D",
    "W",
    "w",
)

_WEEK_TOKENS = frozenset({"WW", "W", "ww", "w"})
_CALENDAR_TOKENS = frozenset({"MMMM", "MMM", "MM", "M", "DDDD", "DDD", "DD", "D", "Do", "Q"})

_NO_ZERO_1_12 = r"1[0-2]|[1-9]"
_NO_ZERO_1_31 = r"3[01]|[12]\d|[1-9]"
_NO_ZERO_1_53 = r"5[0-3]|[1-4]\d|[1-9]"

_TOKEN_REGEX: dict[str, str] = {
    "YYYY": r"\d{4}",
    "GGGG": r"\d{4}",
    "gggg": r"\d{4}",
    "YY": r"\d{2}",
    "Q": r"[1-4]",
    "MMMM": "|".join(_MONTH_NAMES),
    "MMM": "|".join(_MONTH_ABBRS),
    "MM": r"0[1-9]|1[0-2]",
    "M": _NO_ZERO_1_12,
    "DDDD": r"\d{3}",
    "DDD": r"36[0-6]|3[0-5]\d|[12]\d\d|[1-9]\d|[1-9]",
    "DD": r"0[1-9]|[12]\d|3[01]",
    "Do": r"(?:" + _NO_ZERO_1_31 + r")(?:st|nd|rd|th)",
    "D": _NO_ZERO_1_31,
    "WW": r"0[1-9]|[1-4]\d|5[0-3]",
    "ww": r"0[1-9]|[1-4]\d|5[0-3]",
    "W": _NO_ZERO_1_53,
    "w": _NO_ZERO_1_53,
    "dddd": "|".join(_DAY_NAMES),
    "ddd": "|".join(_DAY_ABBRS),
    _HALF_YEAR: r"[12]",
}


@dataclass(frozen=True)
class Token:
    """A compiled pattern element: a date token or a literal run."""

    value: str
    literal: bool = False


@dataclass(frozen=True)
class CompiledPattern:
    """A moment pattern compiled into tokens plus its strict regex."""

    pattern: str
    tokens: tuple[Token, ...]
    regex: re.Pattern[str]
    week_based: bool

    def has_token(self, *names: str) -> bool:
        return any(not t.literal and t.value in names for t in self.tokens)


def _tokenize(pattern: str) -> list[Token]:
    tokens: list[Token] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith(_HALF_YEAR, i):
            tokens.append(Token("H", literal=True))
            tokens.append(Token(_HALF_YEAR))
            i += len(_HALF_YEAR)
            continue
        if pattern[i] == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                tokens.append(Token(pattern[i:], literal=True))
                break
            tokens.append(Token(pattern[i + 1 : end], literal=True))
            i = end + 1
            continue
        for name in _TOKENS:
            if pattern.startswith(name, i):
                tokens.append(Token(name))
                i += len(name)
                break
        else:
            tokens.append(Token(pattern[i], literal=True))
            i += 1
    return tokens


@functools.lru_cache(maxsize=128)
def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a moment pattern. Results are cached per pattern string."""
    tokens = tuple(_tokenize(pattern))
    parts: list[str] = []
    for index, token in enumerate(tokens):
        if token.literal:
            parts.append(re.escape(token.value))
        else:
            parts.append(f"(?P<t{index}>{_TOKEN_REGEX[token.value]})")
    names = {t.value for t in tokens if not t.literal}
    week_based = bool(names & _WEEK_TOKENS) and not (names & _CALENDAR_TOKENS)
    return CompiledPattern(
        pattern=pattern,
        tokens=tokens,
        regex=re.compile("".join(parts)),
        week_based=week_based,
    )


_ORDINAL_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}


def _ordinal(day: int) -> str:
    if 11 <= day <= 13:
        return f"{day}th"
    return f"{day}{_ORDINAL_SUFFIXES.get(day % 10, 'th')}"


def _two_digit_year(value: int) -> int:
    # moment.js pivot: 69-99 -> 1900s, 00-68 -> 2000s
    return value + (1900 if value > 68 else 2000)


def parse_pattern(text: str, pattern: str) -> date | None:
    """Strictly parse *text* against *pattern*. Returns None on mismatch."""
    compiled = compile_pattern(pattern)
    match = compiled.regex.fullmatch(text)
    if match is None:
        return None

    fields: dict[str, str] = {}
    for index, token in enumerate(compiled.tokens):
        if token.literal:
            continue
        value = match.group(f"t{index}")
        previous = fields.get(token.value)
        if previous is not None and previous != value:
            return None
        fields[token.value] = value

    return _build_date(fields, compiled)


def _build_date(fields: dict[str, str], compiled: CompiledPattern) -> date | None:
    year: int | None = None
    for name in ("YYYY", "GGGG", "gggg"):
        if name in fields:
            year = int(fields[name])
            break
    if year is None and "YY" in fields:
        year = _two_digit_year(int(fields["YY"]))
    if year is None:
        year = date.today().year

    week = next((int(fields[n]) for n in ("WW", "ww", "W", "w") if n in fields), None)

    month: int | None = None
    if "MM" in fields or "M" in fields:
        month = int(fields.get("MM") or fields["M"])
    elif "MMMM" in fields:
        month = _MONTH_NAMES.index(fields["MMMM"]) + 1
    elif "MMM" in fields:
        month = _MONTH_ABBRS.index(fields["MMM"]) + 1

    day: int | None = None
    if "DD" in fields or "D" in fields:
        day = int(fields.get("DD") or fields["D"])
    elif "Do" in fields:
        day = int(fields["Do"][:-2])

    try:
        if week is not None and month is None and day is None:
            result = date.fromisocalendar(year, week, 1)
        elif "DDDD" in fields or "DDD" in fields:
            day_of_year = int(fields.get("DDDD") or fields["DDD"])
            result = date(year, 1, 1) + timedelta(days=day_of_year - 1)
            if result.year != year:
                return None
        else:
            if month is None:
                if "Q" in fields:
                    month = (int(fields["Q"]) - 1) * 3 + 1
                elif _HALF_YEAR in fields:
                    month = (int(fields[_HALF_YEAR]) - 1) * 6 + 1
                else:
                    month = 1
            result = date(year, month, day or 1)
    except ValueError:
        return None

    # Every token present must agree with the resolved date.
    if format_pattern(result, compiled.pattern) != _rebuild(fields, compiled):
        return None
    return result


def _rebuild(fields: dict[str, str], compiled: CompiledPattern) -> str:
    return "".join(
        t.value if t.literal else fields[t.value] for t in compiled.tokens
    )


def _format_token(name: str, value: date, week_based: bool) -> str:
    iso_year, iso_week, _ = value.isocalendar()
    match name:
        case "YYYY":
            return f"{iso_year if week_based else value.year:04d}"
        case "GGGG" | "gggg":
            return f"{iso_year:04d}"
        case "YY":
            return f"{(iso_year if week_based else value.year) % 100:02d}"
        case "Q":
            return str((value.month - 1) // 3 + 1)
        case "MMMM":
            return _MONTH_NAMES[value.month - 1]
        case "MMM":
            return _MONTH_ABBRS[value.month - 1]
        case "MM":
            return f"{value.month:02d}"
        case "M":
            return str(value.month)
        case "DDDD":
            return f"{value.timetuple().tm_yday:03d}"
        case "DDD":
            return str(value.timetuple().tm_yday)
        case "DD":
            return f"{value.day:02d}"
        case "Do":
            return _ordinal(value.day)
        case "D":
            return str(value.day)
        case "WW" | "ww":
            return f"{iso_week:02d}"
        case "W" | "w":
            return str(iso_week)
        case "dddd":
            return _DAY_NAMES[value.weekday()]
        case "ddd":
            return _DAY_ABBRS[value.weekday()]
        case "[H]H":
            # 0-based half index internally, 1-based in filenames
            return str((value.month - 1) // 6 + 1)
    msg = f"Unsupported date token: {name!r}"
    raise ValueError(msg)


def format_pattern(value: date, pattern: str) -> str:
    """Render *value* using *pattern*."""
    compiled = compile_pattern(pattern)
    return "".join(
        t.value if t.literal else _format_token(t.value, value, compiled.week_based)
        for t in compiled.tokens
    )
