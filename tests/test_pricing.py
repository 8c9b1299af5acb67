#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for JPY -> AUD price conversion.
"""
import pytest

from core.pricing import DEFAULT_PRICE_CENTS, jpy_to_aud_cents, resolve_price_cents


@pytest.mark.parametrize(
    "jpy, cents",
    [
        (None, DEFAULT_PRICE_CENTS),
        (0, DEFAULT_PRICE_CENTS),
        (-500, DEFAULT_PRICE_CENTS),
        (float("nan"), DEFAULT_PRICE_CENTS),
        (float("inf"), DEFAULT_PRICE_CENTS),
        (True, DEFAULT_PRICE_CENTS),
        (1234, 12300),
        (12345, 123500),  # 1234.5 rounds half up
        (15, 200),
        (5, 100),
        (4, 100),  # never below one dollar
        (2000, 20000),
    ],
)
def test_jpy_to_aud_cents(jpy, cents):
    assert jpy_to_aud_cents(jpy) == cents


def test_default_is_one_hundred_dollars():
    assert DEFAULT_PRICE_CENTS == 10000


def test_override_wins():
    assert resolve_price_cents(2000, 50) == 5000
    assert resolve_price_cents(None, 12.34) == 1234
    assert resolve_price_cents(None, 19.995) == 1999  # 1999.4999... as a float
    assert resolve_price_cents(None, 0.125) == 13


@pytest.mark.parametrize("override", [None, 0, -10, float("nan")])
def test_non_positive_override_ignored(override):
    assert resolve_price_cents(2000, override) == 20000
