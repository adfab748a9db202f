from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ..dependencies import get_settings
from ..settings import Settings

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
	return "Quiz API is running. POST /quiz"


@router.get("/info")
def info(settings: Settings = Depends(get_settings)):
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key), "model": settings.gemini_model}
