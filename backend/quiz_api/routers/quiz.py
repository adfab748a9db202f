from __future__ import annotations
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..dependencies import get_gemini_client, get_settings
from ..extract import extract_json_array, validate_quiz_items
from ..gemini_client import GeminiClient
from ..prompts import build_prompt
from ..schemas import ErrorResponse, QuizRequest, QuizResponse
from ..settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quiz"])

EMPTY_REPLY_ERROR = "Empty response from model"
BODY_TOO_LARGE_ERROR = "Request body too large"


class BodyTooLargeError(ValueError):
	pass


def _error(status_code: int, message: str) -> JSONResponse:
	return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def _read_body(request: Request, limit: int) -> bytes:
	# Content-Length is checked in middleware; chunked bodies are counted here
	chunks = []
	size = 0
	async for chunk in request.stream():
		size += len(chunk)
		if size > limit:
			raise BodyTooLargeError(BODY_TOO_LARGE_ERROR)
		chunks.append(chunk)
	return b"".join(chunks)


@router.post(
	"/quiz",
	response_model=QuizResponse,
	responses={413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_quiz(
	request: Request,
	settings: Settings = Depends(get_settings),
	client: GeminiClient = Depends(get_gemini_client),
):
	# Body: { sections?: [{title, text, img?}] }; read by hand so bad input maps to the 500 envelope
	try:
		raw = await _read_body(request, settings.max_body_bytes)
		body = json.loads(raw) if raw else {}
		req = QuizRequest.model_validate(body)
		prompt = build_prompt(
			req.sections,
			language=settings.quiz_language,
			min_per_section=settings.quiz_min_per_section,
			max_per_section=settings.quiz_max_per_section,
		)
		text = await client.generate(prompt)
		if not text or not isinstance(text, str):
			logger.warning("Model %s returned an empty reply", settings.gemini_model)
			return _error(502, EMPTY_REPLY_ERROR)
		quiz = extract_json_array(text)
		if settings.quiz_validate_items:
			validate_quiz_items(quiz)
		count = len(quiz) if isinstance(quiz, list) else 0
		logger.info("Generated %d quiz items from %d sections", count, len(req.sections or []))
		return QuizResponse(count=count, data=quiz)
	except BodyTooLargeError:
		logger.warning("Rejected request body over %d bytes", settings.max_body_bytes)
		return _error(413, BODY_TOO_LARGE_ERROR)
	except Exception as e:
		logger.exception("Quiz generation failed")
		return _error(500, str(e) or "Unhandled error")
