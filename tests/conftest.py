"""
Pytest configuration and fixtures
"""
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from quiz_api.dependencies import get_gemini_client
from quiz_api.main import create_app
from quiz_api.settings import Settings


class FakeGeminiClient:
	"""Stands in for GeminiClient; returns a canned reply or raises."""

	def __init__(self, reply: Optional[object] = "[]", error: Optional[Exception] = None) -> None:
		self.reply = reply
		self.error = error
		self.prompts: List[str] = []

	async def generate(self, prompt: str):
		self.prompts.append(prompt)
		if self.error is not None:
			raise self.error
		return self.reply


@pytest.fixture
def settings() -> Settings:
	return Settings(_env_file=None, gemini_api_key="test-key")


@pytest.fixture
def fake_model() -> FakeGeminiClient:
	return FakeGeminiClient()


@pytest.fixture
def app(settings, fake_model):
	app = create_app(settings)
	app.dependency_overrides[get_gemini_client] = lambda: fake_model
	yield app
	app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
	return TestClient(app)
