#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Yahoo Auctions Importer - import auction listings into the store catalogue.

Fetches a Yahoo! Auctions detail page, extracts title / description / images /
price, optionally translates the text, and creates or updates the matching
product (keyed by external id "yahoo:<auction id>").

Usage:
    # Dry run - fetch, parse and translate, print the result, write nothing
    python main.py import "https://auctions.yahoo.co.jp/jp/auction/x1234567890" --dry-run

    # Import as a draft with a fixed AUD price, no translation
    python main.py import "https://auctions.yahoo.co.jp/jp/auction/x1234567890" --price-aud 250 --draft --no-translate

    # Use a headless browser instead of plain HTTP
    python main.py import "https://auctions.yahoo.co.jp/jp/auction/x1234567890" --fetcher browser --headed

    # Serve the HTTP API
    python main.py serve --port 9000

    # Maintenance
    python main.py fix-inventory
    python main.py fix-stock-links
"""
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import argparse
import json
import uuid

from core.config import config
from core.errors import AuctionImportError
from core.logging import get_logger

logger = get_logger("importer-cli")


def _print_json(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def cmd_import(args) -> int:
    from core.commerce import get_commerce_platform
    from core.importer.pipeline import YahooImportPipeline
    from core.models.api import ImportRequest
    from core.yahoo.fetcher import get_page_fetcher
    from core.yahoo.urls import validate_auction_url

    fetcher = get_page_fetcher(args.fetcher, headless=not args.headed)
    request = ImportRequest(
        url=args.url,
        price_aud=args.price_aud,
        publish=not args.draft,
        translate=not args.no_translate,
        target_lang=args.target_lang,
    )

    if args.dry_run:
        from core.importer.pipeline import default_translator
        from core.pricing import resolve_price_cents

        logger.info("DRY RUN MODE: nothing will be written")
        url = validate_auction_url(request.url)

        # No platform needed: only the fetch/parse/translate stages run
        pipeline = YahooImportPipeline(fetcher=fetcher, platform=None, translator=default_translator())
        parsed = pipeline.fetch_and_parse(url)
        translated, translation_error = (None, None)
        if request.translate:
            translated, translation_error = pipeline.translate(parsed, request.target_lang)

        _print_json({
            "parsed": parsed.model_dump(),
            "price_aud_cents": resolve_price_cents(parsed.price_jpy, request.price_aud),
            "translated_title": translated.title if translated else None,
            "translated_description": translated.description if translated else None,
            "translation_error": translation_error,
        })
        return 0

    from core.database import close_db

    try:
        pipeline = YahooImportPipeline(fetcher=fetcher, platform=get_commerce_platform())
        response = pipeline.run(request)
    finally:
        close_db()

    _print_json(response.model_dump())
    return 0


def cmd_serve(args) -> int:
    import uvicorn
    from services.importer.api import create_app

    logger.info("Starting importer API", extra={"host": args.host, "port": args.port})
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def cmd_fix_inventory(args) -> int:
    from core.commerce import get_commerce_platform
    from core.database import close_db
    from core.importer.maintenance import fix_yahoo_inventory

    try:
        updated = fix_yahoo_inventory(get_commerce_platform(), batch_size=args.batch_size)
    finally:
        close_db()
    print(f"Updated {updated} variant(s)")
    return 0


def cmd_fix_stock_links(args) -> int:
    from core.commerce import get_commerce_platform
    from core.database import close_db
    from core.importer.maintenance import fix_sales_channel_stock_links

    try:
        linked = fix_sales_channel_stock_links(get_commerce_platform())
    finally:
        close_db()
    print(f"Linked {linked} sales channel(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Yahoo! Auctions importer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_import = subparsers.add_parser("import", help="Import one auction URL")
    p_import.add_argument("url", help="Yahoo! Auctions detail page URL")
    p_import.add_argument("--price-aud", type=float, default=None, help="Explicit AUD price (overrides JPY conversion)")
    p_import.add_argument("--draft", action="store_true", help="Store the product as a draft")
    p_import.add_argument("--no-translate", action="store_true", help="Skip the translation step")
    p_import.add_argument("--target-lang", default=None, help="Translation target language (default: zh-CN)")
    p_import.add_argument(
        "--fetcher",
        choices=["http", "browser"],
        default=None,
        help=f"Page fetcher backend (default: {config.FETCHER})",
    )
    p_import.add_argument("--headed", action="store_true", help="Show the browser window (browser fetcher)")
    p_import.add_argument("--dry-run", action="store_true", help="Parse and translate without writing")
    p_import.set_defaults(func=cmd_import)

    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=config.API_HOST)
    p_serve.add_argument("--port", type=int, default=config.API_PORT)
    p_serve.set_defaults(func=cmd_serve)

    p_inventory = subparsers.add_parser("fix-inventory", help="Reset inventory flags on imported variants")
    p_inventory.add_argument("--batch-size", type=int, default=50)
    p_inventory.set_defaults(func=cmd_fix_inventory)

    p_links = subparsers.add_parser("fix-stock-links", help="Link all sales channels to the default stock location")
    p_links.set_defaults(func=cmd_fix_stock_links)

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    session_id = str(uuid.uuid4())[:8]
    logger.info("Importer command", extra={"session_id": session_id, "command": args.command})

    try:
        return args.func(args)
    except AuctionImportError as e:
        logger.error(f"{e.message}", extra={"session_id": session_id, "status_code": e.status_code})
        print(json.dumps({"message": e.message}, ensure_ascii=False), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user", extra={"session_id": session_id})
        return 130


if __name__ == "__main__":
    sys.exit(main())
