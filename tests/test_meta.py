#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for <meta> / <title> extraction.
"""
from core.yahoo.meta import extract_meta, extract_title_tag


def test_all_attribute_orderings():
    """property/name before or after content all resolve."""
    pages = [
        '<meta property="og:title" content="Title A">',
        '<meta content="Title A" property="og:title">',
        "<meta name='og:title' content='Title A'>",
        '<meta content="Title A" name="og:title" />',
    ]
    for html in pages:
        assert extract_meta(html, "og:title") == "Title A", html


def test_content_is_normalized():
    html = '<meta property="og:description" content="  美品 &amp;   動作確認済み ">'
    assert extract_meta(html, "og:description") == "美品 & 動作確認済み"


def test_missing_or_blank_meta():
    assert extract_meta("<html></html>", "og:title") is None
    assert extract_meta('<meta property="og:title" content="   ">', "og:title") is None


def test_key_is_matched_literally():
    html = '<meta property="ogXtitle" content="wrong">'
    assert extract_meta(html, "og:title") is None
    assert extract_meta('<meta property="og:image" content="x.jpg">', "og.image") is None


def test_title_tag():
    assert extract_title_tag("<TITLE>Yahoo!オークション</TITLE>") == "Yahoo!オークション"
    assert extract_title_tag("<html></html>") is None
