"""Unit tests for the LLM scorer and the primary -> fallback chain."""

import httpx
import openai
import pytest

from lostfound.models import ConfidenceTier, Item, ItemType
from lostfound.matching.llm import (
    LLMScorer,
    ScorerConfig,
    SimilarityServiceAuthError,
    SimilarityServiceError,
    SimilarityServiceInvalidResponseError,
    SimilarityServiceRateLimitError,
    SimilarityServiceTimeoutError,
    build_prompt,
    parse_score,
)
from lostfound.matching.scorer import METHOD_FALLBACK, METHOD_LLM, SimilarityScorer

CONFIG = ScorerConfig(api_key="sk-test", timeout_seconds=3.0)

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_response(code: int) -> httpx.Response:
    return httpx.Response(code, request=_REQUEST)


def _lost() -> Item:
    return Item(
        title="Blue Nike Backpack",
        description="Lost near library, has a dent on front pocket",
        category="Bags",
        location="Main Library",
        type=ItemType.LOST,
    )


def _found() -> Item:
    return Item(
        title="Blue Nike Bag",
        description="Found near library entrance, front pocket scuffed",
        category="Bags",
        location="Main Library",
        type=ItemType.FOUND,
    )


class TestParseScore:

    @pytest.mark.parametrize(
        "reply,expected",
        [("87", 87), (" 42\n", 42), ("Similarity: 73", 73), ("95%", 95), ("0", 0), ("100", 100)],
    )
    def test_parses_first_integer(self, reply, expected):
        assert parse_score(reply) == expected

    def test_clamps_out_of_range(self):
        assert parse_score("150") == 100
        assert parse_score("-5") == 0

    @pytest.mark.parametrize("reply", [None, "", "   ", "definitely the same item"])
    def test_empty_or_non_numeric_is_failure(self, reply):
        with pytest.raises(SimilarityServiceInvalidResponseError):
            parse_score(reply)


class TestBuildPrompt:

    def test_embeds_both_items(self):
        prompt = build_prompt(_lost(), _found())
        assert "Item 1 (lost)" in prompt
        assert "Item 2 (found)" in prompt
        assert "Blue Nike Backpack" in prompt
        assert "front pocket scuffed" in prompt
        assert "Main Library" in prompt
        assert "Respond with only a number from 0-100." in prompt

    def test_missing_fields_marked(self):
        item = _lost()
        item.location = None
        prompt = build_prompt(item, _found())
        assert "- Location: Not specified" in prompt


class TestLLMScorer:

    def test_returns_model_score(self, fake_llm_client):
        client = fake_llm_client(reply="91")
        scorer = LLMScorer(CONFIG, client=client)

        assert scorer.score(_lost(), _found()) == 91

        call = client.calls[0]
        assert call["model"] == "gpt-3.5-turbo"
        assert call["max_tokens"] == 10
        assert call["temperature"] == 0.1
        assert call["timeout"] == 3.0
        assert call["messages"][0]["role"] == "user"

    def test_requires_api_key_without_client(self):
        with pytest.raises(ValueError):
            LLMScorer(ScorerConfig(api_key=None))

    @pytest.mark.parametrize(
        "error,expected",
        [
            (openai.APITimeoutError(request=_REQUEST), SimilarityServiceTimeoutError),
            (
                openai.RateLimitError("insufficient_quota", response=_status_response(429), body=None),
                SimilarityServiceRateLimitError,
            ),
            (
                openai.AuthenticationError("invalid_api_key", response=_status_response(401), body=None),
                SimilarityServiceAuthError,
            ),
            (openai.APIConnectionError(request=_REQUEST), SimilarityServiceError),
            (RuntimeError("socket closed"), SimilarityServiceError),
        ],
    )
    def test_sdk_errors_translated(self, fake_llm_client, error, expected):
        scorer = LLMScorer(CONFIG, client=fake_llm_client(error=error))
        with pytest.raises(expected):
            scorer.score(_lost(), _found())

    def test_non_numeric_reply_is_failure(self, fake_llm_client):
        scorer = LLMScorer(CONFIG, client=fake_llm_client(reply="I cannot tell"))
        with pytest.raises(SimilarityServiceInvalidResponseError):
            scorer.score(_lost(), _found())


class TestSimilarityScorer:

    def test_uses_llm_when_available(self, fake_llm_client):
        scorer = SimilarityScorer(primary=LLMScorer(CONFIG, client=fake_llm_client(reply="88")))
        result = scorer.score(_lost(), _found())

        assert result.similarity == 88.0
        assert result.confidence == ConfidenceTier.HIGH
        assert result.method == METHOD_LLM
        assert result.rule_scores == {}

    @pytest.mark.parametrize(
        "reply,error",
        [
            (None, openai.APITimeoutError(request=_REQUEST)),
            (None, openai.RateLimitError("quota", response=_status_response(429), body=None)),
            ("", None),
            ("no idea", None),
        ],
    )
    def test_falls_back_on_any_service_failure(self, fake_llm_client, reply, error):
        scorer = SimilarityScorer(primary=LLMScorer(CONFIG, client=fake_llm_client(reply=reply, error=error)))
        result = scorer.score(_lost(), _found())

        assert result.method == METHOD_FALLBACK
        assert result.similarity == 80.0
        assert result.confidence == ConfidenceTier.MEDIUM
        assert "category" in result.rule_scores

    def test_fallback_only_when_unconfigured(self):
        scorer = SimilarityScorer.from_config(ScorerConfig(api_key=None))
        assert not scorer.uses_llm

        result = scorer.score(_lost(), _found())
        assert result.method == METHOD_FALLBACK
        assert result.similarity == 80.0

    def test_disabled_flag_skips_llm(self):
        scorer = SimilarityScorer.from_config(ScorerConfig(enabled=False, api_key="sk-test"))
        assert not scorer.uses_llm

    def test_configured_builds_primary(self):
        scorer = SimilarityScorer.from_config(CONFIG)
        assert scorer.uses_llm
        assert isinstance(scorer.primary.client, openai.OpenAI)
        assert scorer.primary.config.timeout_seconds == 3.0

    def test_same_tier_thresholds_for_both_paths(self, fake_llm_client):
        scorer = SimilarityScorer(primary=LLMScorer(CONFIG, client=fake_llm_client(reply="80")))
        assert scorer.score(_lost(), _found()).confidence == ConfidenceTier.MEDIUM

    def test_details_payload(self):
        result = SimilarityScorer().score(_lost(), _found())
        details = result.to_details()
        assert details["method"] == METHOD_FALLBACK
        assert details["similarity"] == 80.0
        assert details["rules"]["location"]["score"] == 10.0
