"""
LLM reply parsing for meal photo / text analysis (no network).
"""

import pytest

from scripts.helpers import extract_clean_json
from services.gemini import MealAnalysisError, parse_analysis

FENCED = """Here you go:
```json
{"foods": [{"name": "Pasta al pomodoro", "calories": 450, "proteins": 14, "carbs": 80, "fats": 8},
           {"name": "Insalata", "calories": 50, "proteins": 2, "carbs": 6, "fats": 2}],
 "total_calories": 500, "total_proteins": 16, "total_carbs": 86, "total_fats": 10,
 "confidence": 80}
```"""


def test_extract_fenced_json():
    assert extract_clean_json(FENCED)["total_calories"] == 500


def test_extract_bare_json():
    assert extract_clean_json('sure! {"a": 1} hope it helps') == {"a": 1}


def test_extract_garbage_returns_empty():
    assert extract_clean_json("no json here") == {}
    assert extract_clean_json("{not: valid}") == {}


def test_parse_analysis():
    res = parse_analysis(FENCED)
    assert len(res.foods) == 2
    assert res.total_calories == 500
    assert res.confidence == 80


def test_missing_totals_are_summed():
    res = parse_analysis('{"foods": [{"name": "Uova", "calories": 155, "proteins": 13, "carbs": 1, "fats": 11},'
                         ' {"name": "Pane", "calories": 80, "proteins": 3, "carbs": 15, "fats": 1}]}')
    assert res.total_calories == 235
    assert res.total_proteins == 16
    assert res.total_fats == 12


def test_unusable_reply_raises():
    with pytest.raises(MealAnalysisError):
        parse_analysis("I can't see any food in this picture.")


def test_confidence_out_of_range_raises():
    with pytest.raises(MealAnalysisError):
        parse_analysis('{"foods": [], "confidence": 250}')
