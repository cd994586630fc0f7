from datetime import timedelta

import pytest

from pipehub.core.duration import parse_duration
from pipehub.core.exceptions import DurationParseError


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10s", timedelta(seconds=10)),
        ("0", timedelta(0)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5h", timedelta(minutes=90)),
        ("250ms", timedelta(milliseconds=250)),
        ("15us", timedelta(microseconds=15)),
        ("2Âµs", timedelta(microseconds=2)),
        ("1500ns", timedelta(microseconds=1)),
        ("-1s", timedelta(seconds=-1)),
        ("+5m", timedelta(minutes=5)),
        ("1m0.5s", timedelta(seconds=60, milliseconds=500)),
    ],
)
def test_parse_duration_accepts_duration_literals(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "", "10", "s", "1x", "1h 30m", "ten seconds", ".s", "-",
        "3000000h", "99999999999999h", "-3000000h", "８０s",
    ],
)
def test_parse_duration_rejects_malformed_literals(raw):
    with pytest.raises(DurationParseError) as exc:
        parse_duration(raw)

    assert exc.value.raw == raw


def test_largest_representable_duration_is_accepted():
    # 2**63 - 1 nanoseconds, truncated to microseconds.
    assert parse_duration("2562047h47m16.854775807s") == timedelta(microseconds=9_223_372_036_854_775)


def test_one_nanosecond_past_the_limit_is_rejected():
    with pytest.raises(DurationParseError, match="invalid duration"):
        parse_duration("2562047h47m16.854775808s")


def test_unknown_unit_is_named_in_message():
    with pytest.raises(DurationParseError, match="unknown unit 'd'"):
        parse_duration("1d")
