"""LLM classification client with OpenAI-compatible integration.

Security: Reads API key from settings only, never hardcoded.
Falls back to the deterministic heuristic classifier when no key is present
or whenever the service fails or returns unusable output.
"""

import json
import logging
import re
from typing import Protocol

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from docsense.config import Settings
from docsense.llm.heuristics import HeuristicClassifier
from docsense.models.documents import Category, Classification, Department

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

SOURCE_NOTES = {
    "pdf": "Text content extracted from a PDF (images and graphics ignored).",
    "url": "Readable text content extracted from a web page.",
    "youtube": (
        "YouTube video metadata (title, channel, description, tags). The analysis is based "
        "on video metadata rather than a transcript."
    ),
}


class Classifier(Protocol):
    """Protocol for classifier implementations."""

    async def classify(self, text: str, title: str, source_type: str | None = None) -> Classification:
        """Summarize text and assign category/department labels.

        Args:
            text: Normalized document text
            title: Document title
            source_type: pdf, url or youtube (adds context for the model)

        Returns:
            Classification with labels drawn from the closed vocabularies
        """
        ...


class ClassificationPayload(BaseModel):
    """Expected JSON shape of the model's answer."""

    summary: str
    category: str
    department: str


def clamp_label(value: str, vocabulary: type[Category] | type[Department]) -> str | None:
    """Match a label case-insensitively against a vocabulary."""
    wanted = value.strip().lower()
    for member in vocabulary:
        if member.value.lower() == wanted:
            return member.value
    return None


def parse_completion(content: str | None) -> ClassificationPayload | None:
    """Parse the first JSON object in a completion, or return None."""
    if not content or not content.strip():
        return None

    match = _JSON_OBJECT.search(content)
    if match is None:
        return None

    try:
        payload = ClassificationPayload.model_validate(json.loads(match.group(0)))
    except (json.JSONDecodeError, ValidationError):
        return None

    if not payload.summary.strip():
        return None
    return payload


class OpenAIClassifier:
    """OpenAI-compatible LLM classifier (Groq by default)."""

    def __init__(
        self,
        api_key: str,
        model: str = "llama-3.1-8b-instant",
        base_url: str | None = None,
        timeout: float = 20.0,
        fallback: HeuristicClassifier | None = None,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize LLM classifier.

        Args:
            api_key: API key (read from settings)
            model: Chat model name
            base_url: OpenAI-compatible endpoint (None for api.openai.com)
            timeout: Request timeout in seconds
            fallback: Heuristic used when the model call is unusable
            client: Preconfigured AsyncOpenAI client (for testing)
        """
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.fallback = fallback or HeuristicClassifier()

    async def classify(self, text: str, title: str, source_type: str | None = None) -> Classification:
        """Classify using the model; never raises for service or parse errors."""
        prompt = self._build_prompt(text, title, source_type)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.3,
                max_tokens=500,
            )
            content = response.choices[0].message.content if response.choices else None
        except Exception as e:
            logger.error(f"LLM API call failed: {type(e).__name__}: {e}")
            logger.warning("Falling back to heuristic classifier")
            return self.fallback.classify_sync(text, title)

        payload = parse_completion(content)
        if payload is None:
            logger.warning("LLM returned empty or unparseable response, using heuristic fallback")
            return self.fallback.classify_sync(text, title)

        category = clamp_label(payload.category, Category)
        department = clamp_label(payload.department, Department)

        if category is None or department is None:
            heuristic = self.fallback.classify_sync(text, title)
            if category is None:
                logger.info(f"Unknown category {payload.category!r}, using {heuristic.category}")
                category = heuristic.category
            if department is None:
                logger.info(f"Unknown department {payload.department!r}, using {heuristic.department}")
                department = heuristic.department

        return Classification(
            summary=payload.summary.strip(),
            category=category,
            department=department,
            source="llm",
        )

    def _build_prompt(self, text: str, title: str, source_type: str | None) -> str:
        """Build the classification prompt."""
        categories = ", ".join(c.value for c in Category)
        departments = ", ".join(d.value for d in Department)
        source_note = SOURCE_NOTES.get(source_type or "", "")

        return f"""Analyze the following document text content and provide:
1. A concise summary (2-3 sentences) focusing ONLY on the readable text content
2. A category from: {categories}
3. A department from: {departments}

IMPORTANT INSTRUCTIONS:
- Focus ONLY on the text content provided
- IGNORE any references to images, figures, charts, or graphics in your summary
- Base your analysis solely on the readable text information
- Ignore any image artifacts or non-text elements
- Use exactly one category and one department from the lists above

{source_note}
Document Title: {title}
Document Text Content: {text}

Respond with JSON only, in this format:
{{
  "summary": "Your summary here based only on text content",
  "category": "Category name",
  "department": "Department name"
}}"""


def get_classifier(settings: Settings) -> Classifier:
    """Factory function to get appropriate classifier based on config.

    Returns:
        OpenAIClassifier if an API key is configured, HeuristicClassifier otherwise
    """
    api_key = settings.llm_api_key

    if api_key and api_key.get_secret_value():
        logger.info(f"Using LLM classifier ({settings.llm_model})")
        return OpenAIClassifier(
            api_key=api_key.get_secret_value(),
            model=settings.llm_model,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds,
        )

    logger.warning("No LLM API key configured, using heuristic classifier")
    return HeuristicClassifier()
