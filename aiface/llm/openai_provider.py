"""
OpenAI provider implementation.
"""
import logging
from functools import lru_cache
from typing import Optional

from openai import OpenAI, APIError

from aiface.core import config
from aiface.core.exceptions import ProviderFailure
from aiface.llm.prompts import (
    ANALYZE_FACE_FUNCTION,
    CELEBRITY_MATCH_PROMPT,
    FACE_ANALYSIS_PROMPT,
    image_message,
)
from aiface.llm.provider import LLMProvider, LLMResponse
from aiface.llm.router import CELEBRITY_MATCH, FACE_ANALYSIS, get_model_for_feature

logger = logging.getLogger(__name__)

# Model pricing per 1M tokens (input/output)
MODEL_PRICING = {
    "gpt-4.1-mini": {"input": 0.40, "output": 1.60},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4o": {"input": 2.50, "output": 10.00},
}


class OpenAIProvider(LLMProvider):
    """OpenAI provider using official OpenAI SDK."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        """Initialize OpenAI client. Failed calls are never retried."""
        if client is not None:
            self.client = client
        else:
            api_key = api_key or config.OPENAI_API_KEY
            if not api_key:
                raise ValueError("OPENAI_API_KEY not configured")
            self.client = OpenAI(
                api_key=api_key,
                timeout=config.PROVIDER_TIMEOUT_SECONDS,
                max_retries=0,
            )
        logger.info("OpenAI provider initialized")

    def _to_response(self, response, content: str, model: str) -> LLMResponse:
        tokens_in = response.usage.prompt_tokens if response.usage else 0
        tokens_out = response.usage.completion_tokens if response.usage else 0
        return LLMResponse(
            content=content,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            model=model,
            cost_estimate=self.estimate_cost(tokens_in, tokens_out, model),
            metadata={
                "finish_reason": response.choices[0].finish_reason,
            }
        )

    def analyze_face(self, image_b64: str, mimetype: str) -> LLMResponse:
        """Structured face analysis through a forced analyze_face tool call."""
        model = get_model_for_feature(FACE_ANALYSIS)
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=image_message(FACE_ANALYSIS_PROMPT, image_b64, mimetype),
                tools=[{"type": "function", "function": ANALYZE_FACE_FUNCTION}],
                tool_choice={"type": "function", "function": {"name": ANALYZE_FACE_FUNCTION["name"]}},
            )
        except APIError as e:
            logger.error(f"OpenAI API error during face analysis: {e}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"OpenAI error during face analysis: {e}", exc_info=True)
            raise

        message = response.choices[0].message
        if message.tool_calls:
            content = message.tool_calls[0].function.arguments or ""
        else:
            # Model answered in prose; the cache falls back to a text-only analysis
            content = message.content or ""

        result = self._to_response(response, content, model)
        logger.info(
            f"Face analysis completed: model={model}, tokens_in={result.tokens_in}, "
            f"tokens_out={result.tokens_out}, cost=${result.cost_estimate:.5f}"
        )
        return result

    def match_celebrities(self, image_b64: str, mimetype: str) -> LLMResponse:
        """Celebrity likeness matching returned as a JSON object."""
        model = get_model_for_feature(CELEBRITY_MATCH)
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=image_message(CELEBRITY_MATCH_PROMPT, image_b64, mimetype),
                response_format={"type": "json_object"},
            )
        except APIError as e:
            logger.error(f"OpenAI API error during celebrity matching: {e}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"OpenAI error during celebrity matching: {e}", exc_info=True)
            raise

        return self._to_response(response, response.choices[0].message.content or "", model)

    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        """Estimate cost in USD."""
        pricing = MODEL_PRICING.get(model, {"input": 0.40, "output": 1.60})
        cost_input = (tokens_in / 1_000_000) * pricing["input"]
        cost_output = (tokens_out / 1_000_000) * pricing["output"]
        return cost_input + cost_output


@lru_cache(maxsize=1)
def _default_provider() -> OpenAIProvider:
    return OpenAIProvider()


def get_vision_provider() -> LLMProvider:
    """
    Dependency returning the shared vision provider.

    Raises:
        ProviderFailure: If OpenAI is not configured
    """
    try:
        return _default_provider()
    except ValueError as e:
        raise ProviderFailure(str(e)) from e
