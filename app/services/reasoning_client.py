import json
import logging
import os
from typing import Type

from openai import OpenAI
from pydantic import BaseModel, ValidationError

from app.core.config import get_openai_model, get_openai_temperature
from app.core.errors import AnalysisFailedError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a fraud-detection assistant. Be factual. Do not exaggerate. "
    "Respond with a single JSON object and nothing else."
)

_client: OpenAI | None = None


def get_openai_client() -> OpenAI:
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not set.")
        _client = OpenAI(api_key=api_key)
    return _client


def extract_json_object(raw: str) -> dict:
    """Pull the outermost JSON object out of a model reply."""
    if not raw:
        raise ValueError("Reasoning service returned an empty response")

    start, end = raw.find("{"), raw.rfind("}") + 1
    if start == -1 or end <= start:
        raise ValueError("Reasoning service response did not contain a JSON object")

    parsed = json.loads(raw[start:end])
    if not isinstance(parsed, dict):
        raise ValueError("Reasoning service response was not a JSON object")
    return parsed


def request_structured_verdict(prompt: str, output_schema: Type[BaseModel]) -> dict:
    """
    Send one prompt to the reasoning service and validate the reply against
    ``output_schema``.

    Exactly one call is made. Any failure is raised as AnalysisFailedError with
    the upstream message unchanged.
    """
    try:
        client = get_openai_client()
        resp = client.chat.completions.create(
            model=get_openai_model(),
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=get_openai_temperature(),
            response_format={"type": "json_object"},
        )
        raw = resp.choices[0].message.content
        payload = extract_json_object(raw)
        validated = output_schema.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Reasoning service response failed %s validation", output_schema.__name__)
        raise AnalysisFailedError(str(exc)) from exc
    except Exception as exc:
        logger.exception("Reasoning service call failed")
        raise AnalysisFailedError(str(exc)) from exc

    return validated.model_dump(exclude_none=True)
