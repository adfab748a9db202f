from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Section(BaseModel):
	model_config = ConfigDict(extra="ignore")

	title: Optional[Any] = None
	text: Optional[Any] = None
	# Accepted for compatibility with existing clients; never sent to the model
	img: Optional[Any] = None


class QuizRequest(BaseModel):
	model_config = ConfigDict(extra="ignore")

	sections: Optional[List[Section]] = None


class QuizItem(BaseModel):
	question: str
	options: List[str] = Field(min_length=4, max_length=4)
	answer: int = Field(ge=0, le=3)
	explanation: str


class QuizResponse(BaseModel):
	ok: bool = True
	count: int
	data: Any


class ErrorResponse(BaseModel):
	ok: bool = False
	error: str
