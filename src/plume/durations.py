"""Convert timedeltas to and from strings in Go's Duration format ("1m30s", "50ms")."""
import datetime
import decimal

UNITS = {
    "h": datetime.timedelta(hours=1),
    "m": datetime.timedelta(minutes=1),
    "s": datetime.timedelta(seconds=1),
    "ms": datetime.timedelta(milliseconds=1),
    "us": datetime.timedelta(microseconds=1),
}

# longest suffixes first, so "ms" is not read as "m" followed by garbage
_SUFFIXES = sorted(UNITS, key=len, reverse=True)


def _trim(val: float):
    return int(val) if val.is_integer() else val


def format_duration(val: datetime.timedelta) -> str:
    if val == datetime.timedelta():
        return "0"

    sign = ""
    if val < datetime.timedelta():
        sign = "-"
        val = -val

    if val < UNITS["ms"]:
        return f"{sign}{val.microseconds}us"
    if val < UNITS["s"]:
        return f"{sign}{_trim(val / UNITS['ms'])}ms"

    parts = [sign]
    hours, val = divmod(val, UNITS["h"])
    if hours:
        parts.append(f"{hours}h")
    minutes, val = divmod(val, UNITS["m"])
    if minutes:
        parts.append(f"{minutes}m")
    if val:
        parts.append(f"{_trim(val.total_seconds())}s")
    return "".join(parts)


def parse_duration(val: str) -> datetime.timedelta:
    sign = 1
    if val[:1] in ("-", "+"):
        sign = -1 if val[0] == "-" else 1
        val = val[1:]
    if not val:
        raise ValueError("Empty duration string")
    if val == "0":
        return datetime.timedelta()

    total = datetime.timedelta()
    while val:
        digits = 0
        while digits < len(val) and (val[digits].isdigit() or val[digits] == "."):
            digits += 1
        numberpart, val = val[:digits], val[digits:]
        if not numberpart or not numberpart[0].isdigit():
            raise ValueError(f"Invalid duration string; expected number before {val!r}")
        suffix = next((s for s in _SUFFIXES if val.startswith(s)), None)
        if suffix is None:
            raise ValueError(f"Invalid duration string; expected unit after {numberpart!r}")
        val = val[len(suffix) :]

        try:
            number = decimal.Decimal(numberpart)
        except decimal.InvalidOperation:
            raise ValueError(f"Invalid duration string; bad number {numberpart!r}") from None
        whole, fraction = divmod(number, 1)
        total += int(whole) * UNITS[suffix]
        if fraction:
            num, denom = fraction.as_integer_ratio()
            total += num * UNITS[suffix] / denom

    return sign * total


def as_timedelta(val: datetime.timedelta | int | float | str) -> datetime.timedelta:
    """Accept seconds (as a number) or a duration string, the way scripts and settings files write them."""
    if isinstance(val, datetime.timedelta):
        return val
    if isinstance(val, (int, float)):
        return datetime.timedelta(seconds=val)
    return parse_duration(val)
