"""Unit tests for data models and value parsing."""

import dataclasses

import pytest

from models import (
    BlockingStatus,
    DomainRule,
    parse_blocking_state,
    parse_int_prefix,
    parse_timer,
)


class TestParseBlockingState:
    """Only the "enabled" string means blocking is active."""

    def test_enabled_is_true(self):
        assert parse_blocking_state("enabled") is True

    @pytest.mark.parametrize("value", ["disabled", "failed", "unknown", "", None, "Enabled"])
    def test_everything_else_is_false(self, value):
        assert parse_blocking_state(value) is False


class TestParseIntPrefix:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10", 10),
            ("  3", 3),
            ("3abc", 3),
            ("2.9", 2),
            ("-4", -4),
            ("+8", 8),
            ("0", 0),
            ("12\u00b2", 12),
        ],
    )
    def test_leading_integer(self, value, expected):
        assert parse_int_prefix(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "-", " x1", "\u00b2", "\u2460", "-\u00b2"])
    def test_no_integer(self, value):
        assert parse_int_prefix(value) is None


class TestParseTimer:
    def test_numbers_are_truncated(self):
        assert parse_timer(120) == 120
        assert parse_timer(59.8) == 59

    def test_missing_values_are_zero(self):
        assert parse_timer(None) == 0
        assert parse_timer("") == 0
        assert parse_timer("soon") == 0

    def test_numeric_strings(self):
        assert parse_timer("300") == 300

    def test_booleans_are_not_numbers(self):
        assert parse_timer(True) == 0

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_floats_are_zero(self, value):
        assert parse_timer(value) == 0

    def test_superscript_digits_are_not_numbers(self):
        assert parse_timer("\u00b2") == 0


class TestDomainRule:
    def test_from_dict_keeps_display_fields(self):
        rule = DomainRule.from_dict(
            {
                "id": 4,
                "domain": "ads.example",
                "comment": "Ads",
                "enabled": True,
                "type": "deny",
                "kind": "regex",
                "groups": [0],
            }
        )

        assert rule.to_dict() == {
            "id": 4,
            "domain": "ads.example",
            "comment": "Ads",
            "enabled": True,
        }
        assert rule.key == "4"

    def test_from_dict_defaults(self):
        rule = DomainRule.from_dict({"id": 9, "domain": "x"})

        assert rule.comment is None
        assert rule.enabled is False


def test_blocking_status_defaults():
    assert BlockingStatus().to_dict() == {"blocking": False, "timer": 0}


def test_blocking_status_is_immutable():
    status = BlockingStatus(blocking=True, timer=0)

    with pytest.raises(dataclasses.FrozenInstanceError):
        status.timer = 60
