"""OpenAI backed assistant drafting blog content for the admin dashboard."""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

from openai import OpenAI, OpenAIError, RateLimitError

from app.config import get_settings

logger = logging.getLogger(__name__)

PROVIDER_NAME = "OpenAI"

BLOG_CATEGORIES: tuple[str, ...] = (
    "Web Development",
    "Mobile Development",
    "UI/UX Design",
    "Frontend Development",
    "Backend Development",
    "Full Stack Development",
)
DEFAULT_BLOG_CATEGORY = BLOG_CATEGORIES[0]
WORDS_PER_MINUTE = 200


class OpenAIConfigurationError(RuntimeError):
    """Raised when the OpenAI credentials are not configured."""


class OpenAIServiceError(RuntimeError):
    """Raised when the OpenAI API does not answer as expected."""


class OpenAIQuotaExceededError(OpenAIServiceError):
    """Raised when the account quota or rate limit has been exhausted."""


def slugify(title: str) -> str:
    """Return a URL friendly slug for ``title``."""

    slug = re.sub(r"[^\w\s-]", "", title.lower())
    slug = re.sub(r"[\s_]+", "-", slug)
    return re.sub(r"-{2,}", "-", slug).strip("-")


def _strip_code_fences(text: str) -> str:
    """Return JSON text without Markdown code fences."""

    s = text.strip()
    if not s.startswith("```"):
        return text
    start = s.find("{")
    end = s.rfind("}")
    if start == -1 or end == -1:
        return text
    return s[start : end + 1]


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",(\s*[}\]])", r"\1", text)


def _decode_json(text: str) -> dict[str, Any]:
    """Decode a model answer, tolerating code fences and trailing commas."""

    for candidate in (text, _strip_code_fences(text)):
        for attempt in (candidate, _remove_trailing_commas(candidate)):
            try:
                payload = json.loads(attempt)
            except json.JSONDecodeError:
                continue
            if isinstance(payload, dict):
                return payload
    logger.error("Could not decode OpenAI response as a JSON object: %s", text)
    raise OpenAIServiceError("The OpenAI response is not a valid JSON object.")


class ContentAssistantService:
    """Ask the model for blog post drafts and validate the answer."""

    def __init__(self) -> None:
        settings = get_settings()

        api_key = (settings.openai_api_key or "").strip()
        if not api_key:
            raise OpenAIConfigurationError("OPENAI_API_KEY is not configured.")

        client_kwargs: dict[str, Any] = {"api_key": api_key}
        base_url = (settings.openai_base_url or "").strip()
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = settings.openai_model
        self._temperature = float(settings.openai_temperature)

    def draft_blog_fields(self, prompt: str, image_url: str | None = None) -> dict[str, Any]:
        """Return ``title``, ``slug``, ``excerpt``, ``content``, ``category``,
        ``tags`` and ``read_time`` for a new blog post about ``prompt``.

        When ``image_url`` is given the screenshot is analysed as well.
        """

        if not prompt or not prompt.strip():
            raise OpenAIServiceError("A prompt is required to draft a blog post.")

        instruction = (
            "Write a technical blog post draft. Return ONLY a JSON object with the fields: "
            "title (SEO friendly, max 60 characters), excerpt (max 160 characters), "
            "content (detailed analysis in Markdown, at least 500 words), "
            f"category (exactly one of: {', '.join(BLOG_CATEGORIES)}), "
            "tags (array of 3 to 5 technical keywords)."
        )
        user_content: list[dict[str, Any]] = [
            {"type": "input_text", "text": instruction},
            {"type": "input_text", "text": prompt.strip()},
        ]
        if image_url:
            user_content.append({"type": "input_image", "image_url": image_url})

        try:
            response = self._client.responses.create(
                model=self._model,
                input=[
                    {
                        "role": "system",
                        "content": [
                            {
                                "type": "input_text",
                                "text": "You answer ONLY with valid JSON. No text outside the JSON.",
                            }
                        ],
                    },
                    {"role": "user", "content": user_content},
                ],
                temperature=self._temperature,
            )
        except RateLimitError as exc:
            raise OpenAIQuotaExceededError("The OpenAI quota has been exceeded.") from exc
        except OpenAIError as exc:
            raise OpenAIServiceError("The request to OpenAI could not be completed.") from exc

        text = getattr(response, "output_text", None)
        if not text:
            try:
                text = response.output[0].content[0].text
            except (AttributeError, IndexError, TypeError) as exc:
                raise OpenAIServiceError("The OpenAI response has no usable text.") from exc

        logger.debug("Raw model answer: %s", text)
        return self._normalize_draft(_decode_json(text))

    @staticmethod
    def _normalize_draft(payload: dict[str, Any]) -> dict[str, Any]:
        title = payload.get("title")
        content = payload.get("content")
        for name, value in (("title", title), ("content", content)):
            if not isinstance(value, str) or not value.strip():
                raise OpenAIServiceError(f"The OpenAI response is missing '{name}'.")

        category = payload.get("category")
        if category not in BLOG_CATEGORIES:
            category = DEFAULT_BLOG_CATEGORY

        tags = payload.get("tags") or []
        if not isinstance(tags, list):
            tags = [tags]

        excerpt = payload.get("excerpt")
        return {
            "title": title.strip(),
            "slug": slugify(title),
            "excerpt": excerpt.strip() if isinstance(excerpt, str) else "",
            "content": content,
            "category": category,
            "tags": [str(tag).strip() for tag in tags if str(tag).strip()],
            "read_time": max(1, math.ceil(len(content.split()) / WORDS_PER_MINUTE)),
        }


__all__ = [
    "BLOG_CATEGORIES",
    "ContentAssistantService",
    "OpenAIConfigurationError",
    "OpenAIQuotaExceededError",
    "OpenAIServiceError",
    "PROVIDER_NAME",
    "slugify",
]
