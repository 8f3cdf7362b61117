"""Google Gemini commentary provider."""

from __future__ import annotations

import logging
import os

from google import genai
from google.genai import types

from .commentary import CommentaryError, CommentaryProvider, RoundSummary, StaticCommentary, build_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


def _api_key_from_env() -> str | None:
    # GOOGLE_API_KEY is preferred by the google-genai SDK
    return os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")


class GeminiCommentary:
    """Short round reactions generated by a Gemini model.

    Raises ``CommentaryError`` when the API is not configured or the call
    fails; callers are expected to fall back to a static phrase.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_MODEL,
        api_key: str | None = None,
        client: object | None = None,
        temperature: float = 0.8,
        max_output_tokens: int = 50,
    ) -> None:
        self.model_name = model_name
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        if client is not None:
            self.client = client
            return
        key = api_key or _api_key_from_env()
        if not key:
            logger.warning("GOOGLE_API_KEY or GEMINI_API_KEY not found. Commentary will use fallback text.")
            self.client = None
            return
        self.client = genai.Client(api_key=key)

    @property
    def configured(self) -> bool:
        return self.client is not None

    def generate(
        self,
        rank1: str,
        rank2: str,
        winner_label: str,
        is_war: bool,
        count1: int,
        count2: int,
    ) -> str:
        if self.client is None:
            raise CommentaryError("Gemini commentary is not configured (missing API key).")

        prompt = build_prompt(
            RoundSummary(
                rank1=rank1,
                rank2=rank2,
                winner_label=winner_label,
                is_war=is_war,
                count1=count1,
                count2=count2,
            )
        )
        config = types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            candidate_count=1,
        )
        try:
            response = self.client.models.generate_content(  # type: ignore[attr-defined]
                model=self.model_name,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            raise CommentaryError(f"Gemini request failed: {e}") from e
        return (getattr(response, "text", None) or "").strip()


def gemini_or_static(
    fallback: str, model_name: str = DEFAULT_MODEL, api_key: str | None = None
) -> CommentaryProvider:
    """Gemini commentary if an API key is available, else a fixed phrase."""
    provider = GeminiCommentary(model_name=model_name, api_key=api_key)
    if provider.configured:
        return provider
    return StaticCommentary(fallback)
