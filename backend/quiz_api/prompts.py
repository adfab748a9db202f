from __future__ import annotations
import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .schemas import Section


class InvalidSectionsError(ValueError):
	pass


SectionLike = Union[Section, Mapping[str, Any]]


def _project(section: SectionLike) -> Dict[str, Any]:
	if isinstance(section, Section):
		return {"title": section.title, "text": section.text}
	if isinstance(section, Mapping):
		return {"title": section.get("title"), "text": section.get("text")}
	raise InvalidSectionsError(f"each section must be an object, got {type(section).__name__}")


def _instructions(language: str, min_per_section: int, max_per_section: int) -> str:
	return (
		f"You are an assistant that writes multiple-choice quiz questions (in {language}) from the content below.\n"
		"REQUIREMENTS:\n"
		f"- Write {min_per_section}-{max_per_section} questions for EACH section, merged into ONE single JSON array.\n"
		"- Every item has the schema:\n"
		"  {\n"
		'    "question": "Question?",\n'
		'    "options": ["A", "B", "C", "D"],\n'
		'    "answer": 0,\n'
		'    "explanation": "A short explanation that stays on point."\n'
		"  }\n"
		'- "answer" is the index (0..3) of the correct option in "options".\n'
		"- No repeated questions, nothing ambiguous, stay close to the facts in the text.\n"
		"- Return PURE JSON only (no prose, no markdown).\n"
		"DATA:"
	)


def build_prompt(
	sections: Optional[Sequence[SectionLike]],
	*,
	language: str = "Vietnamese",
	min_per_section: int = 2,
	max_per_section: int = 4,
) -> str:
	if sections is None:
		raise InvalidSectionsError("'sections' is required and must be an array of {title, text}")
	if isinstance(sections, (str, bytes, Mapping)) or not isinstance(sections, Sequence):
		raise InvalidSectionsError(f"'sections' must be an array, got {type(sections).__name__}")
	projected: List[Dict[str, Any]] = [_project(s) for s in sections]
	data = json.dumps(projected, indent=2, ensure_ascii=False)
	guide = _instructions(language, min_per_section, max_per_section)
	return f"{guide}\n{data}\n\nOutput exactly ONE JSON array that follows the schema above."
