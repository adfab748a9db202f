from __future__ import annotations
import json
import re
from typing import Any, List

from pydantic import ValidationError

from .schemas import QuizItem


_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class QuizFormatError(ValueError):
	pass


def extract_json_array(text: str) -> Any:
	"""Pull the JSON array out of a model reply.

	Prefers the first fenced code block when there is one, then slices from the
	first ``[`` to the last ``]``. Anything that does not parse raises
	``json.JSONDecodeError``.
	"""
	code_block = _CODE_BLOCK.search(text)
	raw = code_block.group(1) if code_block else text
	start = raw.find("[")
	end = raw.rfind("]")
	if start != -1 and end != -1 and end > start:
		return json.loads(raw[start : end + 1])
	return json.loads(raw)


def validate_quiz_items(data: Any) -> List[QuizItem]:
	if not isinstance(data, list):
		raise QuizFormatError(f"Model did not return a JSON array (got {type(data).__name__})")
	items: List[QuizItem] = []
	for i, entry in enumerate(data):
		try:
			items.append(QuizItem.model_validate(entry))
		except ValidationError as e:
			raise QuizFormatError(f"Invalid quiz item at index {i}: {e.errors()[0]['msg']}") from e
	return items
