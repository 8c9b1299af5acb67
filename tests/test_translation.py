#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for the listing translation task and the OpenAI client.
"""
import io
import json
import urllib.error
import urllib.request

import pytest

from core.errors import TranslationError
from core.llm import client as llm_client_module
from core.llm.client import LLMConfig, OpenAIClient
from core.llm.tasks.translation import (
    DEFAULT_TARGET_LANG,
    normalize_language_tag,
    translate_listing,
)

from fakes import FakeLLMClient


def test_translate_listing_success():
    print("\n=== Listing translation ===")
    client = FakeLLMClient(content='{"title":" 佳能 EOS R5 机身 ","description":"<p>成色 &amp; 良好</p>"}')

    result = translate_listing("Canon EOS R5 ボディ", "美品です", "ja", "zh-CN", client=client)

    assert result.success
    assert result.title == "佳能 EOS R5 机身"
    assert result.description == "成色 & 良好"
    assert result.provider == "openai"
    assert result.source_language == "ja"
    assert result.target_language == "zh-CN"
    assert result.latency_ms == 12.5

    call = client.calls[0]
    assert call["response_format"] == "json_object"
    assert "from ja to zh-CN" in call["system_prompt"]
    assert "Keep brand/model codes unchanged" in call["system_prompt"]
    assert json.loads(call["prompt"]) == {"title": "Canon EOS R5 ボディ", "description": "美品です"}
    print(f"   {result.title}")


def test_provider_error_raises_translation_error():
    client = FakeLLMClient(content="", error="Translation failed (500)", status_code=500)
    with pytest.raises(TranslationError, match=r"Translation failed \(500\)"):
        translate_listing("タイトル", "説明", "ja", "zh-CN", client=client)


@pytest.mark.parametrize(
    "content",
    [
        "not json at all",
        '["title", "description"]',
        '{"title":"只有标题"}',
        '{"title":"   ","description":"描述"}',
        '{"title":123,"description":"描述"}',
    ],
)
def test_malformed_model_output_raises(content):
    with pytest.raises(TranslationError):
        translate_listing("タイトル", "説明", "ja", "zh-CN", client=FakeLLMClient(content=content))


def test_nothing_to_translate():
    client = FakeLLMClient(content='{"title":"a","description":"b"}')
    with pytest.raises(TranslationError, match="nothing to translate"):
        translate_listing("", "  ", "ja", "zh-CN", client=client)
    assert client.calls == []


def test_long_description_is_sent_whole():
    client = FakeLLMClient(content='{"title":"标题","description":"很长的描述"}')
    description = "説明文です。" * 3000

    result = translate_listing("タイトル", description, "ja", "zh-CN", client=client)

    assert result.description == "很长的描述"
    assert json.loads(client.calls[0]["prompt"])["description"] == description


def test_no_credential_skips_translation(monkeypatch):
    monkeypatch.setattr(llm_client_module.app_config, "OPENAI_API_KEY", "")
    assert translate_listing("タイトル", "説明", "ja", "zh-CN") is None


def test_normalize_language_tag():
    assert normalize_language_tag(None) == DEFAULT_TARGET_LANG
    assert normalize_language_tag("   ") == DEFAULT_TARGET_LANG
    assert normalize_language_tag(" en ") == "en"
    assert normalize_language_tag("", "ja") == "ja"


# ============================================================================
# OpenAI client (urllib patched)
# ============================================================================

class _FakeHTTPResponse:
    def __init__(self, body: dict, status: int = 200):
        self._body = json.dumps(body).encode("utf-8")
        self.status = status

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_openai_client_request_shape(monkeypatch):
    captured = {}

    def fake_urlopen(req, timeout=None):
        captured["url"] = req.full_url
        captured["headers"] = dict(req.header_items())
        captured["body"] = json.loads(req.data.decode("utf-8"))
        captured["timeout"] = timeout
        return _FakeHTTPResponse({
            "model": "gpt-4o-mini-2024-07-18",
            "choices": [{"message": {"content": '{"title":"t","description":"d"}'}}],
            "usage": {"total_tokens": 42, "prompt_tokens": 30, "completion_tokens": 12},
        })

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    client = OpenAIClient(LLMConfig(base_url="https://llm.example.com/v1/", timeout=5), api_key="sk-test")
    response = client.generate("hello", system_prompt="sys", response_format="json_object")

    assert response.success
    assert response.tokens_used == 42
    assert response.status_code == 200
    assert captured["url"] == "https://llm.example.com/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    assert captured["timeout"] == 5
    assert captured["body"]["model"] == "gpt-4o-mini"
    assert captured["body"]["temperature"] == 0.2
    assert captured["body"]["response_format"] == {"type": "json_object"}
    assert captured["body"]["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hello"},
    ]


def test_openai_client_http_error(monkeypatch):
    def fake_urlopen(req, timeout=None):
        raise urllib.error.HTTPError(req.full_url, 500, "Server Error", hdrs=None, fp=io.BytesIO(b"boom"))

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    response = OpenAIClient(api_key="sk-test").generate("hello")
    assert not response.success
    assert response.status_code == 500
    assert response.error == "Translation failed (500)"


def test_openai_client_empty_content(monkeypatch):
    monkeypatch.setattr(
        urllib.request,
        "urlopen",
        lambda req, timeout=None: _FakeHTTPResponse({"choices": [{"message": {"content": "  "}}]}),
    )

    response = OpenAIClient(api_key="sk-test").generate("hello")
    assert not response.success
    assert response.error == "Translation failed: empty model response"


def test_openai_client_requires_key(monkeypatch):
    monkeypatch.setattr(llm_client_module.app_config, "OPENAI_API_KEY", "")
    with pytest.raises(ValueError):
        OpenAIClient()
