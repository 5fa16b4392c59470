# services/gemini.py
import functools
import logging

from google import genai
from google.genai import types, errors as gerrors
from pydantic import ValidationError

from config import settings
from core.models.meal import FoodAnalysis
from scripts.helpers import extract_clean_json

_LOG = logging.getLogger(__name__)


class MealAnalysisError(ValueError):
    """The model answered, but not with usable nutrition JSON."""


class GeminiUnavailable(RuntimeError):
    """The Gemini API call itself failed."""


# ───────────── Client (lazy, one per process) ─────────────
@functools.lru_cache(maxsize=1)
def _client() -> genai.Client:
    if not settings.gemini_api_key:
        raise RuntimeError("GEMINI_API_KEY not set in environment")
    return genai.Client(api_key=settings.gemini_api_key)


# ───────────── Prompt ─────────────
_PROMPT = """You are a helpful nutrition assistant. {task}

IMPORTANT: Respond ONLY with valid JSON, no other text.

JSON format:
{{
  "foods": [
    {{"name": "food name in Italian", "calories": 150, "proteins": 10, "carbs": 20, "fats": 5}}
  ],
  "total_calories": 150,
  "total_proteins": 10,
  "total_carbs": 20,
  "total_fats": 5,
  "confidence": 85
}}

Guidelines:
- Provide realistic nutritional estimates for Italian portions
- Use only numbers for nutritional values
- Calculate totals by summing individual food values
- Confidence should be between 0-100
"""


# ───────────── Generation (sync) ─────────────
def generate(contents: list, temperature: float = 0.3, max_output_tokens: int = 1000) -> str:
    """Run a completion and return the LLM’s text response."""
    try:
        resp = _client().models.generate_content(
            model=settings.gemini_model,
            contents=contents,
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
        )
        return resp.text or ""
    except gerrors.APIError as e:
        _LOG.error("Gemini generation failed: %s", e)
        raise GeminiUnavailable(str(e)) from e


def parse_analysis(raw: str) -> FoodAnalysis:
    data = extract_clean_json(raw)
    if not data:
        raise MealAnalysisError("model reply contained no JSON object")
    try:
        return FoodAnalysis.model_validate(data)
    except ValidationError as e:
        raise MealAnalysisError(f"unexpected nutrition JSON: {e.error_count()} errors") from e


def analyze_meal_text(description: str) -> FoodAnalysis:
    """Estimate macros for a free-text (or transcribed voice) meal description."""
    if not description.strip():
        raise MealAnalysisError("empty meal description")
    task = f"Analyze this meal description and estimate its nutrition: {description!r}"
    return parse_analysis(generate([_PROMPT.format(task=task)]))


def analyze_meal_image(image: bytes, mime_type: str = "image/jpeg") -> FoodAnalysis:
    """Recognise the foods in a meal photo and estimate their macros."""
    if len(image) < 100:
        raise MealAnalysisError("image missing or too small")
    task = "Analyze the food items visible in this image; if unclear, make a best estimate."
    return parse_analysis(
        generate([
            types.Part.from_bytes(data=image, mime_type=mime_type),
            _PROMPT.format(task=task),
        ])
    )
