from datetime import timedelta

import pytest

from plume.durations import as_timedelta, format_duration, parse_duration


@pytest.mark.parametrize(
    "delta,expected",
    (
        (timedelta(hours=72, minutes=3, milliseconds=500), "72h3m0.5s"),
        (timedelta(), "0"),
        (timedelta(microseconds=1), "1us"),
        (timedelta(milliseconds=50), "50ms"),
        (timedelta(seconds=1), "1s"),
        (timedelta(minutes=1, seconds=30), "1m30s"),
        (timedelta(hours=1, seconds=1), "1h1s"),
        (timedelta(hours=1, microseconds=500), "1h0.0005s"),
        (timedelta(milliseconds=1, microseconds=200), "1.2ms"),
        (timedelta(milliseconds=-1), "-1ms"),
        (-timedelta(hours=1, minutes=1, milliseconds=250), "-1h1m0.25s"),
    ),
)
def test_format_duration(delta: timedelta, expected: str):
    assert format_duration(delta) == expected
    assert parse_duration(expected) == delta


@pytest.mark.parametrize(
    "duration,expected",
    (
        ("0", timedelta()),
        ("50ms", timedelta(milliseconds=50)),
        ("1.5h", timedelta(hours=1, minutes=30)),
        ("2m3s", timedelta(minutes=2, seconds=3)),
        ("+4s", timedelta(seconds=4)),
        ("1h1m1s1ms1us", timedelta(hours=1, minutes=1, seconds=1, milliseconds=1, microseconds=1)),
    ),
)
def test_parse_duration(duration: str, expected: timedelta):
    assert parse_duration(duration) == expected


@pytest.mark.parametrize(
    "duration,msg",
    (
        ("", "Empty duration string"),
        ("-", "Empty duration string"),
        ("0.0", "expected unit"),
        (".5s", "expected number"),
        ("5x", "expected unit"),
        ("1.2.3s", "bad number"),
    ),
)
def test_parse_duration_invalid(duration: str, msg: str):
    with pytest.raises(ValueError, match=msg):
        parse_duration(duration)


@pytest.mark.parametrize(
    "value,expected",
    (
        (timedelta(seconds=3), timedelta(seconds=3)),
        (2, timedelta(seconds=2)),
        (0.25, timedelta(milliseconds=250)),
        ("250ms", timedelta(milliseconds=250)),
    ),
)
def test_as_timedelta(value, expected: timedelta):
    assert as_timedelta(value) == expected
