#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
End-to-end tests of POST /admin/custom/yahoo-import.

The FastAPI app runs the real pipeline with a stub fetcher, an in-memory
commerce platform and stub translators.
"""
import pytest
from curl_cffi import CurlError
from fastapi.testclient import TestClient

import core.commerce as commerce_module
from core.errors import UpstreamFetchError
from core.importer.pipeline import (
    CREATED_MESSAGE,
    MISSING_SHIPPING_PROFILE_MESSAGE,
    UPDATED_MESSAGE,
    YahooImportPipeline,
    default_translator,
)
from core.yahoo import fetcher as fetcher_module
from core.yahoo.fetcher import HttpPageFetcher
from services.importer.api import IMPORT_PATH, DefaultPipelineFactory, create_app

from fakes import (
    AUCTION_ID,
    AUCTION_URL,
    EXPECTED_IMAGES,
    FakeHttpResponse,
    FakeLLMClient,
    FakeSession,
    InMemoryCommercePlatform,
    StubFetcher,
    auction_html,
    fake_translator,
)


def _client(fetcher, platform, translator=fake_translator) -> TestClient:
    app = create_app(
        pipeline_factory=lambda: YahooImportPipeline(
            fetcher=fetcher,
            platform=platform,
            translator=translator,
        )
    )
    return TestClient(app)


def test_health(fetcher, platform):
    response = _client(fetcher, platform).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_import_without_translation(fetcher, platform):
    """A new auction is created; no translation fields are filled."""
    print("\n=== Import: created, translate=false ===")
    response = _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL, "translate": False})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["message"] == CREATED_MESSAGE
    assert body["mode"] == "created"
    assert body["product"]["handle"] == "yahoo-x1234567890"
    assert body["product"]["title"] == "Canon EOS R5 ボディ & バッテリー"
    assert body["parsed"]["auction_id"] == AUCTION_ID
    assert body["parsed"]["original_title"] == "Canon EOS R5 ボディ & バッテリー"
    assert body["parsed"]["translated_title"] is None
    assert body["parsed"]["translation_error"] is None
    assert body["parsed"]["price_jpy"] == 12345
    assert body["parsed"]["image_count"] == len(EXPECTED_IMAGES)
    assert body["parsed"]["image_urls"] == EXPECTED_IMAGES
    assert fetcher.requested == [AUCTION_URL]

    # Store setup was linked on the way
    assert ("sloc_default", "sc_default") in platform.links
    print(f"   Product: {body['product']['id']}")


def test_second_import_updates_same_product(fetcher, platform):
    client = _client(fetcher, platform)

    first = client.post(IMPORT_PATH, json={"url": AUCTION_URL, "translate": False}).json()
    second = client.post(IMPORT_PATH, json={"url": AUCTION_URL, "translate": False}).json()

    assert first["mode"] == "created"
    assert second["mode"] == "updated"
    assert second["message"] == UPDATED_MESSAGE
    assert second["product"]["id"] == first["product"]["id"]
    assert len(platform.products) == 1


def test_translation_failure_is_soft(fetcher, platform):
    """An upstream 500 from the model still yields a successful import."""
    llm = FakeLLMClient(content="", error="Translation failed (500)", status_code=500)
    client = _client(fetcher, platform, translator=default_translator(llm))

    response = client.post(IMPORT_PATH, json={"url": AUCTION_URL})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["mode"] == "created"
    assert body["parsed"]["translated_title"] is None
    assert body["parsed"]["translation_error"] == "Translation failed (500)"
    assert len(llm.calls) == 1

    product = next(iter(platform.products.values()))
    assert product.title == body["parsed"]["original_title"]
    assert product.metadata["translation_error"] == "Translation failed (500)"


def test_translated_import(fetcher, platform):
    response = _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL, "target_lang": "en"})

    body = response.json()
    assert body["parsed"]["translated_title"] == "[en] Canon EOS R5 ボディ & バッテリー"
    assert body["product"]["title"] == body["parsed"]["translated_title"]
    assert body["parsed"]["translation_error"] is None


def test_default_target_language(fetcher, platform):
    body = _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL}).json()
    assert body["parsed"]["translated_title"].startswith("[zh-CN] ")


def test_price_override(platform):
    fetcher = StubFetcher(auction_html(price_jpy=2000))
    response = _client(fetcher, platform).post(
        IMPORT_PATH, json={"url": AUCTION_URL, "price_aud": 50, "translate": False}
    )

    assert response.status_code == 200, response.text
    product = next(iter(platform.products.values()))
    assert product.variants[0].prices[0].amount == 5000
    assert response.json()["parsed"]["price_jpy"] == 2000


def test_publish_false_creates_draft(fetcher, platform):
    _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL, "publish": False, "translate": False})
    assert next(iter(platform.products.values())).status == "draft"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({}, "Missing URL"),
        ({"url": "   "}, "Missing URL"),
        ({"url": "not a url"}, "Invalid URL format"),
        ({"url": "https://example.com/jp/auction/x1"}, "Only auctions.yahoo.co.jp auction detail URLs are supported"),
        ({"url": "https://auctions.yahoo.co.jp/jp/auction/ab-12"}, "Only auctions.yahoo.co.jp auction detail URLs are supported"),
    ],
)
def test_bad_urls_rejected_before_fetch(fetcher, platform, payload, message):
    response = _client(fetcher, platform).post(IMPORT_PATH, json=payload)

    assert response.status_code == 400
    assert response.json() == {"message": message}
    assert fetcher.requested == []
    assert platform.products == {}


def test_malformed_body(fetcher, platform):
    client = _client(fetcher, platform)

    response = client.post(IMPORT_PATH, content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert "message" in response.json()

    response = client.post(IMPORT_PATH, json={"url": AUCTION_URL, "publish": "sometimes"})
    assert response.status_code == 400
    assert "publish" in response.json()["message"]


def test_upstream_failure(platform):
    fetcher = StubFetcher(error=UpstreamFetchError("Failed to fetch Yahoo page (404)", upstream_status=404))
    response = _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL})

    assert response.status_code == 502
    assert response.json() == {"message": "Failed to fetch Yahoo page (404)"}
    assert platform.products == {}


def test_missing_shipping_profile(fetcher):
    platform = InMemoryCommercePlatform(shipping_profile_id=None)
    response = _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL, "translate": False})

    assert response.status_code == 400
    assert response.json() == {"message": MISSING_SHIPPING_PROFILE_MESSAGE}
    assert platform.products == {}


def test_setup_without_store_still_imports(fetcher):
    """No store document: the first sales channel is used, nothing is linked."""
    platform = InMemoryCommercePlatform(sales_channel_ids=["sc_other"])
    response = _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL, "translate": False})

    assert response.status_code == 200, response.text
    product = next(iter(platform.products.values()))
    assert [channel.id for channel in product.sales_channels] == ["sc_other"]
    assert platform.links == set()


def test_platform_failure_is_500(fetcher):
    class BrokenPlatform(InMemoryCommercePlatform):
        def create_product(self, product):
            raise RuntimeError("database unavailable")

    response = _client(fetcher, BrokenPlatform()).post(IMPORT_PATH, json={"url": AUCTION_URL, "translate": False})

    assert response.status_code == 500
    assert response.json() == {"message": "database unavailable"}


def test_pipeline_factory_failure_is_500(fetcher, platform):
    def factory():
        raise RuntimeError("")

    client = TestClient(create_app(pipeline_factory=factory))
    response = client.post(IMPORT_PATH, json={"url": AUCTION_URL})

    assert response.status_code == 500
    assert response.json() == {"message": "Import failed"}


@pytest.mark.parametrize(
    "raw_url, requested_url",
    [
        (AUCTION_URL + "?ref=カメラ", AUCTION_URL + "?ref=%E3%82%AB%E3%83%A1%E3%83%A9"),
        (AUCTION_URL + "/ extra", AUCTION_URL + "/%20extra"),
    ],
)
def test_urls_needing_escapes_are_fetched(platform, raw_url, requested_url):
    """Valid URLs with non-ASCII or space characters reach the HTTP fetcher encoded."""
    session = FakeSession(FakeHttpResponse(auction_html().encode("utf-8")))
    fetcher = HttpPageFetcher(session=session)

    response = _client(fetcher, platform).post(IMPORT_PATH, json={"url": raw_url, "translate": False})

    assert response.status_code == 200, response.text
    assert response.json()["parsed"]["auction_id"] == AUCTION_ID
    assert [call["url"] for call in session.calls] == [requested_url]


def test_transport_error_is_502(platform):
    session = FakeSession(error=CurlError("Failed to perform, curl: (28) Operation timed out"))
    fetcher = HttpPageFetcher(session=session)

    response = _client(fetcher, platform).post(IMPORT_PATH, json={"url": AUCTION_URL})

    assert response.status_code == 502
    assert response.json()["message"].startswith("Failed to fetch Yahoo page")
    assert platform.products == {}


def test_default_factory_builds_platform_once(monkeypatch, fetcher, platform):
    """The MongoDB platform (and its index setup) is created on the first request only."""
    built = []

    def fake_platform():
        built.append(platform)
        return platform

    monkeypatch.setattr(commerce_module, "get_commerce_platform", fake_platform)
    monkeypatch.setattr(fetcher_module, "get_page_fetcher", lambda kind=None, headless=True: fetcher)

    factory = DefaultPipelineFactory()
    first = factory()
    second = factory()

    assert len(built) == 1
    assert first.platform is second.platform is platform
    assert first.fetcher is fetcher
