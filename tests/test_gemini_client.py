"""
Tests for the Gemini generateContent adapter
"""
import asyncio
import json

import httpx
import pytest

from quiz_api.gemini_client import GeminiClient, GeminiConfigError, GeminiError, reply_text
from quiz_api.settings import Settings


def _reply(text):
	return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def _run(client: GeminiClient, prompt: str = "prompt"):
	async def go():
		try:
			return await client.generate(prompt)
		finally:
			await client.aclose()
	return asyncio.run(go())


def _settings(**overrides) -> Settings:
	values = {"gemini_api_key": "secret"}
	values.update(overrides)
	return Settings(_env_file=None, **values)


def test_posts_user_message_with_key_header():
	seen = {}

	def handler(request: httpx.Request) -> httpx.Response:
		seen["url"] = str(request.url)
		seen["key"] = request.headers.get("x-goog-api-key")
		seen["body"] = json.loads(request.content)
		return httpx.Response(200, json=_reply("[1]"))

	client = GeminiClient(_settings(), transport=httpx.MockTransport(handler))
	assert _run(client, "make a quiz") == "[1]"
	assert seen["url"] == "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
	assert seen["key"] == "secret"
	assert seen["body"] == {"contents": [{"role": "user", "parts": [{"text": "make a quiz"}]}]}


def test_generation_config_from_settings():
	client = GeminiClient(_settings(gemini_temperature=0.4, gemini_max_output_tokens=2048, gemini_json_mode=True))
	payload = client.build_payload("p")
	assert payload["generationConfig"] == {"temperature": 0.4, "maxOutputTokens": 2048, "responseMimeType": "application/json"}
	asyncio.run(client.aclose())


def test_model_override_changes_url():
	client = GeminiClient(_settings(gemini_model="gemini-2.5-pro", gemini_base_url="http://localhost:9000/v1/"))
	assert client.base_url == "http://localhost:9000/v1/models/gemini-2.5-pro:generateContent"
	asyncio.run(client.aclose())


def test_missing_key_fails_at_call_time():
	calls = []
	client = GeminiClient(_settings(gemini_api_key=None), transport=httpx.MockTransport(lambda r: calls.append(r)))
	with pytest.raises(GeminiConfigError, match="GEMINI_API_KEY"):
		_run(client)
	assert calls == []


def test_http_error_is_wrapped_without_retry_by_default():
	calls = []

	def handler(request):
		calls.append(request)
		return httpx.Response(503, text="overloaded")

	client = GeminiClient(_settings(), transport=httpx.MockTransport(handler))
	with pytest.raises(GeminiError, match="HTTP 503") as exc:
		_run(client)
	assert exc.value.status_code == 503
	assert len(calls) == 1


def test_retries_transient_failures_when_enabled():
	responses = [httpx.Response(503), httpx.Response(429), httpx.Response(200, json=_reply("ok"))]

	def handler(request):
		return responses.pop(0)

	client = GeminiClient(_settings(gemini_max_retries=2, gemini_retry_backoff=0), transport=httpx.MockTransport(handler))
	assert _run(client) == "ok"
	assert responses == []


def test_client_errors_are_not_retried():
	calls = []

	def handler(request):
		calls.append(request)
		return httpx.Response(400, text="bad request")

	client = GeminiClient(_settings(gemini_max_retries=3, gemini_retry_backoff=0), transport=httpx.MockTransport(handler))
	with pytest.raises(GeminiError, match="HTTP 400"):
		_run(client)
	assert len(calls) == 1


def test_network_error_is_wrapped():
	def handler(request):
		raise httpx.ConnectError("connection refused", request=request)

	client = GeminiClient(_settings(), transport=httpx.MockTransport(handler))
	with pytest.raises(GeminiError, match="ConnectError"):
		_run(client)


def test_non_json_body_yields_empty_text():
	client = GeminiClient(_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>")))
	assert _run(client) == ""


def test_reply_text_joins_all_parts():
	payload = {"candidates": [{"content": {"parts": [{"text": "[1,"}, {"text": " 2]"}]}}]}
	assert reply_text(payload) == "[1, 2]"


def test_reply_text_fallbacks():
	assert reply_text({"text": "plain"}) == "plain"
	assert reply_text({"output_text": "other"}) == "other"
	assert reply_text({"candidates": [], "text": "plain"}) == "plain"


@pytest.mark.parametrize("payload", [None, [], "text", {}, {"candidates": [{"finishReason": "SAFETY"}]}, {"text": 5}])
def test_reply_text_without_text_is_empty(payload):
	assert reply_text(payload) == ""


def test_gives_up_after_configured_retries():
	calls = []

	def handler(request):
		calls.append(request)
		return httpx.Response(500, text="internal")

	client = GeminiClient(_settings(gemini_max_retries=2, gemini_retry_backoff=0), transport=httpx.MockTransport(handler))
	with pytest.raises(GeminiError, match="HTTP 500") as exc:
		_run(client)
	assert exc.value.status_code == 500
	assert len(calls) == 3


def test_retries_network_errors_when_enabled():
	calls = []

	def handler(request):
		calls.append(request)
		if len(calls) == 1:
			raise httpx.ReadTimeout("timed out", request=request)
		return httpx.Response(200, json=_reply("[]"))

	client = GeminiClient(_settings(gemini_max_retries=1, gemini_retry_backoff=0), transport=httpx.MockTransport(handler))
	assert _run(client) == "[]"
	assert len(calls) == 2
