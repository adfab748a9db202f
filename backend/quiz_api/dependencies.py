from __future__ import annotations
from typing import AsyncIterator

from fastapi import Depends, Request

from .gemini_client import GeminiClient
from .settings import Settings


def get_settings(request: Request) -> Settings:
	return request.app.state.settings


async def get_gemini_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[GeminiClient]:
	client = GeminiClient(settings)
	try:
		yield client
	finally:
		await client.aclose()
