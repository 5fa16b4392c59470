import json
import logging
import re

_LOG = logging.getLogger(__name__)


def extract_clean_json(raw: str | dict) -> dict:
    """Pull the first JSON object out of an LLM reply (fenced or bare)."""
    if isinstance(raw, dict):
        return raw
    try:
        match = re.search(r'```(?:json)?\s*({[\s\S]*?})\s*```', raw)
        if match:
            json_str = match.group(1)
        else:
            start, end = raw.find("{"), raw.rfind("}")
            if start == -1 or end <= start:
                raise ValueError("No JSON object found in model response")
            json_str = raw[start:end + 1]

        data = json.loads(json_str)
        return data if isinstance(data, dict) else {}
    except (ValueError, TypeError) as e:
        _LOG.warning("Failed to extract JSON: %s", e)
        return {}
