from typing import List, Optional

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# GOOGLE_API_KEY is accepted as an alternative name
	gemini_api_key: Optional[str] = Field(default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"))
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	# Generative Language API root; the model path is appended per request
	gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta", validation_alias="GEMINI_BASE_URL")
	gemini_timeout: float = Field(default=30.0, validation_alias="GEMINI_TIMEOUT")
	# Optional generationConfig; unset values are left out of the payload
	gemini_temperature: Optional[float] = Field(default=None, validation_alias="GEMINI_TEMPERATURE")
	gemini_max_output_tokens: Optional[int] = Field(default=None, validation_alias="GEMINI_MAX_OUTPUT_TOKENS")
	gemini_json_mode: bool = Field(default=False, validation_alias="GEMINI_JSON_MODE")
	# Retries are off unless explicitly configured
	gemini_max_retries: int = Field(default=0, ge=0, validation_alias="GEMINI_MAX_RETRIES")
	gemini_retry_backoff: float = Field(default=0.5, ge=0, validation_alias="GEMINI_RETRY_BACKOFF")

	# Quiz prompt
	quiz_language: str = Field(default="Vietnamese", validation_alias="QUIZ_LANGUAGE")
	quiz_min_per_section: int = Field(default=2, ge=1, validation_alias="QUIZ_MIN_PER_SECTION")
	quiz_max_per_section: int = Field(default=4, ge=1, validation_alias="QUIZ_MAX_PER_SECTION")
	quiz_validate_items: bool = Field(default=False, validation_alias="QUIZ_VALIDATE_ITEMS")

	# Server
	host: str = Field(default="0.0.0.0", validation_alias="HOST")
	port: int = Field(default=8787, validation_alias="PORT")
	cors_origins: List[str] = Field(default_factory=lambda: ["*"], validation_alias="CORS_ORIGINS")
	max_body_bytes: int = Field(default=2 * 1024 * 1024, validation_alias="MAX_BODY_BYTES")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

	@model_validator(mode="after")
	def _check_question_range(self) -> "Settings":
		if self.quiz_min_per_section > self.quiz_max_per_section:
			raise ValueError(
				f"QUIZ_MIN_PER_SECTION ({self.quiz_min_per_section}) must not exceed QUIZ_MAX_PER_SECTION ({self.quiz_max_per_section})"
			)
		return self
