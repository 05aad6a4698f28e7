"""
LLM scorer — holistic "same physical object" judgment from a text model.

Sends both item records to an OpenAI-compatible chat-completions endpoint
and asks for a single integer 0-100. Every way this can go wrong (timeout,
rate limit or exhausted quota, bad credentials, connection or API error,
a reply that is not a number) is raised as a SimilarityServiceError, which
is the only error type the scorer chain catches to engage the fallback.
"""

import re
import logging
from dataclasses import dataclass

from openai import (
    OpenAI,
    APIError,
    APIConnectionError,
    APITimeoutError,
    AuthenticationError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"-?\d+")

PROMPT_TEMPLATE = """Compare these two items and determine if they could be the same object.
Rate the similarity from 0-100 where 100 means they are definitely the same item.

Item 1 ({type_a}):
- Title: {title_a}
- Description: {description_a}
- Category: {category_a}
- Location: {location_a}
- Date: {date_a}

Item 2 ({type_b}):
- Title: {title_b}
- Description: {description_b}
- Category: {category_b}
- Location: {location_b}
- Date: {date_b}

Consider:
- Description similarity (color, size, brand, unique features)
- Location proximity
- Time proximity
- Category match

Respond with only a number from 0-100."""


@dataclass(frozen=True)
class ScorerConfig:
    """Connection settings for the text-generation service."""

    enabled: bool = True
    api_key: str | None = None
    base_url: str | None = None
    model: str = "gpt-3.5-turbo"
    timeout_seconds: float = 5.0
    max_retries: int = 0
    max_tokens: int = 10
    temperature: float = 0.1

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.api_key)


class SimilarityServiceError(Exception):
    """The text-generation service could not produce a usable score."""


class SimilarityServiceTimeoutError(SimilarityServiceError):
    """Request timed out."""


class SimilarityServiceRateLimitError(SimilarityServiceError):
    """Rate limit or quota exceeded."""


class SimilarityServiceAuthError(SimilarityServiceError):
    """Credentials rejected."""


class SimilarityServiceInvalidResponseError(SimilarityServiceError):
    """Reply was empty or not a number."""


def _value(value) -> str:
    if value is None or value == "":
        return "Not specified"
    return getattr(value, "value", value)


def build_prompt(item_a, item_b) -> str:
    """Render the comparison prompt for two items."""
    return PROMPT_TEMPLATE.format(
        type_a=_value(item_a.type),
        title_a=_value(item_a.title),
        description_a=_value(item_a.description),
        category_a=_value(item_a.category),
        location_a=_value(item_a.location),
        date_a=_value(item_a.created_at),
        type_b=_value(item_b.type),
        title_b=_value(item_b.title),
        description_b=_value(item_b.description),
        category_b=_value(item_b.category),
        location_b=_value(item_b.location),
        date_b=_value(item_b.created_at),
    )


def parse_score(raw_output: str | None) -> int:
    """
    Parse the model reply into a score clamped to [0, 100].

    Raises:
        SimilarityServiceInvalidResponseError: Reply empty or contains no integer
    """
    text = (raw_output or "").strip()
    if not text:
        raise SimilarityServiceInvalidResponseError("Empty reply from similarity service")

    found = _INTEGER_PATTERN.search(text)
    if found is None:
        raise SimilarityServiceInvalidResponseError(
            f"Non-numeric reply from similarity service: {text[:50]!r}"
        )

    return min(100, max(0, int(found.group())))


class LLMScorer:
    """Primary scorer backed by an OpenAI-compatible chat-completions API."""

    def __init__(self, config: ScorerConfig, client=None):
        """
        Initialize the scorer.

        Args:
            config: Service endpoint, credential and call limits
            client: Pre-built client exposing chat.completions.create
                    (defaults to an OpenAI client built from config)

        Raises:
            ValueError: If no client is given and no API key is configured
        """
        self.config = config
        if client is None:
            if not config.api_key:
                raise ValueError("Similarity service API key not configured")
            client = OpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout_seconds,
                max_retries=config.max_retries,
            )
        self.client = client

    def score(self, item_a, item_b) -> int:
        """
        Ask the model how likely two items are the same physical object.

        Returns:
            Integer similarity in [0, 100]

        Raises:
            SimilarityServiceError: Any failure reaching the service or reading its reply
        """
        messages = [{"role": "user", "content": build_prompt(item_a, item_b)}]

        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                timeout=self.config.timeout_seconds,
            )
            raw_output = response.choices[0].message.content

        except APITimeoutError as e:
            raise SimilarityServiceTimeoutError(f"Similarity service timeout: {str(e)}") from e

        except RateLimitError as e:
            raise SimilarityServiceRateLimitError(f"Similarity service rate limit exceeded: {str(e)}") from e

        except AuthenticationError as e:
            raise SimilarityServiceAuthError(f"Similarity service authentication failed: {str(e)}") from e

        except (APIConnectionError, APIError) as e:
            raise SimilarityServiceError(f"Similarity service error: {str(e)}") from e

        except Exception as e:
            raise SimilarityServiceError(f"Unexpected error calling similarity service: {str(e)}") from e

        return parse_score(raw_output)
