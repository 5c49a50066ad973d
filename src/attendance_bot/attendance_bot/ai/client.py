from __future__ import annotations

import base64
import io
import json
import logging
import re
from pathlib import Path
from typing import Protocol, Sequence

from openai import OpenAI, OpenAIError
from PIL import Image, UnidentifiedImageError

from ..core.constants import DEFAULT_AI_TIMEOUT_SECONDS, DEFAULT_CHAT_MODEL, DEFAULT_VISION_MODEL, MAX_IMAGE_SIDE
from ..core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class AIGateway(Protocol):
    """What the parsers need from a language model: JSON in, JSON out."""

    def complete_json(self, *, system: str, user: str) -> dict:
        raise NotImplementedError

    def describe_images(self, *, prompt: str, image_paths: Sequence[str | Path]) -> dict:
        raise NotImplementedError


def parse_json_reply(content: str) -> dict:
    """Parse a model reply as a JSON object, tolerating Markdown code fences."""
    text = _FENCE.sub("", (content or "").strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExternalServiceError(f"AI reply is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise ExternalServiceError("AI reply is not a JSON object")
    return data


def encode_image(path: str | Path, *, max_side: int = MAX_IMAGE_SIDE) -> str:
    """Downscale an image to max_side and return it as a JPEG data URL."""
    try:
        with Image.open(path) as img:
            img = img.convert("RGB")
            img.thumbnail((max_side, max_side))
            buf = io.BytesIO()
            img.save(buf, format="JPEG", quality=90)
    except (OSError, UnidentifiedImageError) as e:
        raise ExternalServiceError(f"Could not read image {Path(path).name}") from e
    return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


class OpenAIGateway(AIGateway):
    """Chat Completions client with a fixed timeout and no automatic retries."""

    def __init__(
        self,
        *,
        api_key: str,
        chat_model: str = DEFAULT_CHAT_MODEL,
        vision_model: str = DEFAULT_VISION_MODEL,
        timeout: float = DEFAULT_AI_TIMEOUT_SECONDS,
        client: OpenAI | None = None,
    ):
        self._client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._chat_model = chat_model
        self._vision_model = vision_model

    def _create(self, **kwargs) -> dict:
        try:
            response = self._client.chat.completions.create(temperature=0.1, **kwargs)
        except OpenAIError as e:
            logger.exception("OpenAI request failed (model=%s)", kwargs.get("model"))
            raise ExternalServiceError("The AI service is unavailable right now") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExternalServiceError("The AI service returned an empty reply")
        return parse_json_reply(content)

    def complete_json(self, *, system: str, user: str) -> dict:
        return self._create(
            model=self._chat_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            response_format={"type": "json_object"},
        )

    def describe_images(self, *, prompt: str, image_paths: Sequence[str | Path]) -> dict:
        content: list[dict] = [{"type": "text", "text": prompt}]
        for path in image_paths:
            content.append({"type": "image_url", "image_url": {"url": encode_image(path), "detail": "high"}})

        return self._create(
            model=self._vision_model,
            messages=[{"role": "user", "content": content}],
            max_tokens=4000,
            response_format={"type": "json_object"},
        )
