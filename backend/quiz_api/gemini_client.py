from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from .settings import Settings

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class GeminiError(RuntimeError):
	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class GeminiConfigError(GeminiError):
	pass


def _is_transient(exc: BaseException) -> bool:
	if isinstance(exc, httpx.HTTPStatusError):
		return exc.response.status_code in _RETRYABLE_STATUS
	return isinstance(exc, httpx.RequestError)


def reply_text(payload: Any) -> str:
	"""Return the text of a generateContent reply, or "" when there is none."""
	if not isinstance(payload, dict):
		return ""
	candidates = payload.get("candidates")
	if isinstance(candidates, list) and candidates:
		content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
		parts = content.get("parts") if isinstance(content, dict) else None
		if isinstance(parts, list):
			texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
			if texts:
				return "".join(texts)
	for key in ("text", "output_text"):
		value = payload.get(key)
		if isinstance(value, str):
			return value
	return ""


class GeminiClient:
	def __init__(self, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.api_key = settings.gemini_api_key
		self.model = settings.gemini_model
		self.base_url = f"{settings.gemini_base_url.rstrip('/')}/models/{self.model}:generateContent"
		self.max_retries = settings.gemini_max_retries
		self.retry_backoff = settings.gemini_retry_backoff
		self._generation_config: Dict[str, Any] = {}
		if settings.gemini_temperature is not None:
			self._generation_config["temperature"] = settings.gemini_temperature
		if settings.gemini_max_output_tokens is not None:
			self._generation_config["maxOutputTokens"] = settings.gemini_max_output_tokens
		if settings.gemini_json_mode:
			self._generation_config["responseMimeType"] = "application/json"
		self._client = httpx.AsyncClient(timeout=settings.gemini_timeout, transport=transport)

	def build_payload(self, prompt: str) -> Dict[str, Any]:
		payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
		if self._generation_config:
			payload["generationConfig"] = dict(self._generation_config)
		return payload

	async def generate(self, prompt: str) -> str:
		if not self.api_key:
			raise GeminiConfigError("GEMINI_API_KEY is not configured")
		payload = self.build_payload(prompt)
		headers = {"x-goog-api-key": self.api_key}
		try:
			r = await self._post(payload, headers)
		except httpx.HTTPStatusError as http_err:
			status = http_err.response.status_code
			raise GeminiError(f"Gemini request failed with HTTP {status}: {http_err.response.text}", status_code=status) from http_err
		except httpx.RequestError as net_err:
			raise GeminiError(f"Gemini request failed: {net_err!r}") from net_err
		try:
			data = r.json()
		except ValueError:
			logger.warning("Gemini returned a non-JSON body (%d bytes)", len(r.content))
			return ""
		return reply_text(data)

	async def _post(self, payload: Dict[str, Any], headers: Dict[str, str]) -> httpx.Response:
		# max_retries=0 means a single attempt
		retrying = AsyncRetrying(
			stop=stop_after_attempt(self.max_retries + 1),
			wait=wait_exponential_jitter(initial=self.retry_backoff, jitter=self.retry_backoff),
			retry=retry_if_exception(_is_transient),
			before_sleep=before_sleep_log(logger, logging.WARNING),
			reraise=True,
		)
		async for attempt in retrying:
			with attempt:
				r = await self._client.post(self.base_url, headers=headers, json=payload)
				r.raise_for_status()
		return r

	async def aclose(self) -> None:
		await self._client.aclose()
