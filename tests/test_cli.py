#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for the importer command line.
"""
import json

from core.yahoo import fetcher as fetcher_module
from services.importer import main as cli

from fakes import AUCTION_URL, StubFetcher, auction_html


def test_parse_import_arguments():
    args = cli.build_parser().parse_args(
        ["import", AUCTION_URL, "--price-aud", "50", "--draft", "--no-translate", "--fetcher", "browser", "--headed"]
    )
    assert args.command == "import"
    assert args.url == AUCTION_URL
    assert args.price_aud == 50.0
    assert args.draft is True
    assert args.no_translate is True
    assert args.fetcher == "browser"
    assert args.headed is True
    assert args.dry_run is False


def test_parse_serve_defaults():
    args = cli.build_parser().parse_args(["serve"])
    assert args.host == "0.0.0.0"
    assert args.port == 9000


def test_dry_run_prints_without_writing(monkeypatch, capsys):
    stub = StubFetcher(auction_html(price_jpy=2000))
    monkeypatch.setattr(fetcher_module, "get_page_fetcher", lambda kind=None, headless=True: stub)

    exit_code = cli.main(["import", AUCTION_URL, "--dry-run", "--no-translate"])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["parsed"]["auction_id"] == "x1234567890"
    assert output["parsed"]["price_jpy"] == 2000
    assert output["price_aud_cents"] == 20000
    assert output["translated_title"] is None
    assert stub.requested == [AUCTION_URL]


def test_invalid_url_exit_code(capsys):
    exit_code = cli.main(["import", "https://example.com/item/1", "--dry-run"])

    assert exit_code == 1
    assert json.loads(capsys.readouterr().err) == {
        "message": "Only auctions.yahoo.co.jp auction detail URLs are supported"
    }
