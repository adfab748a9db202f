from __future__ import annotations
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .routers import health, quiz
from .schemas import ErrorResponse
from .settings import Settings

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("quiz_api.access")


def configure_logging(level: str) -> None:
	logging.basicConfig(
		level=level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	# uvicorn's own access log duplicates ours
	logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
	settings = settings or Settings()

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		if not settings.gemini_api_key:
			logger.warning("Missing GEMINI_API_KEY in environment; /quiz requests will fail until it is set")
		yield

	app = FastAPI(title="Quiz Generator API", version="0.1.0", lifespan=lifespan)
	app.state.settings = settings

	@app.middleware("http")
	async def limit_body_size(request: Request, call_next):
		length = request.headers.get("content-length")
		if length is not None and length.isdigit() and int(length) > settings.max_body_bytes:
			return JSONResponse(status_code=413, content=ErrorResponse(error=quiz.BODY_TOO_LARGE_ERROR).model_dump())
		return await call_next(request)

	@app.middleware("http")
	async def log_requests(request: Request, call_next):
		started = time.perf_counter()
		response = await call_next(request)
		elapsed_ms = (time.perf_counter() - started) * 1000
		access_logger.info("%s %s %d %.1f ms", request.method, request.url.path, response.status_code, elapsed_ms)
		return response

	# Added last so it wraps the other middleware
	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.cors_origins,
		allow_methods=["*"],
		allow_headers=["*"],
	)

	app.include_router(health.router)
	app.include_router(quiz.router)
	return app


def main() -> None:
	import uvicorn

	settings = Settings()
	configure_logging(settings.log_level)
	app = create_app(settings)
	logger.info("Server listening at http://localhost:%d", settings.port)
	uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
