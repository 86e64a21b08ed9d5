from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from google import genai
from google.genai import types
from google.genai.errors import APIError

from plated.app.domain.models import PromptPayload
from plated.services.errors import (
    EmptyResponseError,
    ModelUnavailableError,
    RateLimitedError,
    ServiceError,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"
DEFAULT_MAX_OUTPUT_TOKENS = 1500
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
# Thinking tokens count against max_output_tokens on 2.5 models.
DEFAULT_THINKING_BUDGET = 0


class GeminiConfigurationError(ServiceError):
    pass


class ModelInvoker(ABC):
    """Sends a prompt to a generative model and returns its raw text."""

    @abstractmethod
    def invoke(self, prompt: PromptPayload) -> str:
        """
        Raises:
            ModelUnavailableError: the upstream call failed or timed out
            EmptyResponseError: the model returned no content
        """
        pass


def _is_rate_limited_error(exc: Exception) -> bool:
    status_code = getattr(exc, "code", None) or getattr(exc, "status_code", None)
    if status_code == 429:
        return True
    return "RESOURCE_EXHAUSTED" in str(exc)


class GeminiClient(ModelInvoker):
    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL_NAME,
        *,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        timeout_seconds: Optional[float] = None,
        thumbnail_timeout_seconds: float = 10.0,
        client: Optional[genai.Client] = None,
    ) -> None:
        if not api_key and client is None:
            raise GeminiConfigurationError("Missing Google API key.")
        self.model_name = model_name
        self.max_output_tokens = max_output_tokens
        self.timeout_seconds = timeout_seconds
        self.thumbnail_timeout_seconds = thumbnail_timeout_seconds
        self._client = client or self._create_client(api_key)

    def _create_client(self, api_key: str) -> genai.Client:
        http_options = None
        if self.timeout_seconds:
            # HttpOptions.timeout is expressed in milliseconds
            http_options = types.HttpOptions(timeout=int(self.timeout_seconds * 1000))
        return genai.Client(api_key=api_key, http_options=http_options)

    def _fetch_image(self, url: str) -> Optional[types.Part]:
        try:
            response = httpx.get(url, timeout=self.thumbnail_timeout_seconds, follow_redirects=True)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as error:
            logger.warning("model.thumbnail_unavailable url=%s error=%s", url, error)
            return None

        mime_type = response.headers.get("content-type", DEFAULT_IMAGE_MIME_TYPE).split(";")[0].strip()
        if not mime_type.startswith("image/"):
            logger.warning("model.thumbnail_not_image url=%s mime=%s", url, mime_type)
            return None
        return types.Part.from_bytes(data=response.content, mime_type=mime_type)

    def _generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json",
            thinking_config=types.ThinkingConfig(thinking_budget=DEFAULT_THINKING_BUDGET),
        )

    def _build_contents(self, prompt: PromptPayload) -> list[Any]:
        contents: list[Any] = [prompt.text]
        if prompt.image_url:
            image = self._fetch_image(prompt.image_url)
            if image is not None:
                contents.append(image)
        return contents

    def invoke(self, prompt: PromptPayload) -> str:
        contents = self._build_contents(prompt)
        try:
            response = self._client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=self._generation_config(),
            )
        except APIError as err:
            if _is_rate_limited_error(err):
                raise RateLimitedError(
                    "Gemini API rate limit reached. Try again in a few moments."
                ) from err
            raise ModelUnavailableError(f"Gemini request failed: {err}") from err
        except httpx.HTTPError as err:
            raise ModelUnavailableError(f"Gemini request failed: {err}") from err

        text = response.text if response is not None else None
        if not text or not text.strip():
            raise EmptyResponseError()
        return text
