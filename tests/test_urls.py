#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for auction URL validation and auction id extraction.
"""
import pytest

from core.errors import InputValidationError, ParseError
from core.yahoo.urls import (
    INVALID_URL_MESSAGE,
    MISSING_URL_MESSAGE,
    UNSUPPORTED_URL_MESSAGE,
    extract_auction_id,
    percent_encode_url,
    validate_auction_url,
)


def test_extract_auction_id():
    assert extract_auction_id("https://auctions.yahoo.co.jp/jp/auction/x1234567890") == "x1234567890"
    assert extract_auction_id("https://auctions.yahoo.co.jp/jp/auction/b1099/") == "b1099"
    assert extract_auction_id("https://auctions.yahoo.co.jp/jp/auction/q987?sid=top") == "q987"


@pytest.mark.parametrize(
    "url",
    [
        "https://auctions.yahoo.co.jp/jp/",
        "https://auctions.yahoo.co.jp/jp/auction/",
        "https://auctions.yahoo.co.jp/jp/auction/ab-12",
        "https://auctions.yahoo.co.jp/jp/auction/ab_12/",
        "https://auctions.yahoo.co.jp/search?p=auction",
    ],
)
def test_extract_auction_id_rejects_malformed_paths(url):
    with pytest.raises(ParseError) as exc_info:
        extract_auction_id(url)
    assert exc_info.value.status_code == 400


def test_validate_returns_trimmed_url():
    url = validate_auction_url("  https://auctions.yahoo.co.jp/jp/auction/x1234567890  ")
    assert url == "https://auctions.yahoo.co.jp/jp/auction/x1234567890"


@pytest.mark.parametrize(
    "raw, encoded",
    [
        (
            "https://auctions.yahoo.co.jp/jp/auction/x1234567890?ref=カメラ",
            "https://auctions.yahoo.co.jp/jp/auction/x1234567890?ref=%E3%82%AB%E3%83%A1%E3%83%A9",
        ),
        (
            "https://auctions.yahoo.co.jp/jp/auction/x1234567890/ extra",
            "https://auctions.yahoo.co.jp/jp/auction/x1234567890/%20extra",
        ),
        (
            "https://auctions.yahoo.co.jp/jp/auction/x1234567890?sid=top&a=b%20c#desc",
            "https://auctions.yahoo.co.jp/jp/auction/x1234567890?sid=top&a=b%20c#desc",
        ),
    ],
)
def test_validate_percent_encodes(raw, encoded):
    assert validate_auction_url(raw) == encoded
    assert percent_encode_url(encoded) == encoded


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_validate_missing(raw):
    with pytest.raises(InputValidationError) as exc_info:
        validate_auction_url(raw)
    assert exc_info.value.message == MISSING_URL_MESSAGE
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("raw", ["not a url", "ftp://auctions.yahoo.co.jp/jp/auction/x1", "https://"])
def test_validate_malformed(raw):
    with pytest.raises(InputValidationError) as exc_info:
        validate_auction_url(raw)
    assert exc_info.value.message == INVALID_URL_MESSAGE


@pytest.mark.parametrize(
    "raw",
    [
        "https://example.com/jp/auction/x1234567890",
        "https://page.auctions.yahoo.co.jp/jp/auction/x1234567890",
        "https://auctions.yahoo.co.jp/jp/show/mystatus",
    ],
)
def test_validate_unsupported(raw):
    with pytest.raises(InputValidationError) as exc_info:
        validate_auction_url(raw)
    assert exc_info.value.message == UNSUPPORTED_URL_MESSAGE
    assert "auctions.yahoo.co.jp" in UNSUPPORTED_URL_MESSAGE
