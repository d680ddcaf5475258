"""Generation client for OpenAI-compatible chat-completions providers."""

import json
import re
import time
from typing import Any, Optional, Protocol

import openai
from openai import OpenAI
from pydantic import ValidationError

from launchcraft.core.composer import ComposedPrompt, PromptComposer
from launchcraft.core.config import DEFAULT_MODEL
from launchcraft.core.errors import (
    ConfigurationError,
    EmptyResponseError,
    ProviderError,
    SchemaMismatchError,
)
from launchcraft.core.logging import get_logger
from launchcraft.core.usage import UsageTracker, usage_tokens
from launchcraft.core.validator import format_schema_errors
from launchcraft.schemas.copy import GenerationRequest, GenerationResult

logger = get_logger("launchcraft.generation")


class CopyGenerator(Protocol):
    """Anything that turns a GenerationRequest into a GenerationResult."""

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate copy for one request.

        Raises:
            GenerationError: On any failure; there are no partial results
        """
        ...


def extract_json(text: str) -> dict:
    """
    Extract a JSON object from a model response, handling markdown code blocks.

    Args:
        text: Raw response text that may contain JSON

    Returns:
        Parsed JSON object

    Raises:
        ValueError: If no JSON object is found
    """
    try:
        data = json.loads(text.strip())
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    json_block_pattern = r"```(?:json)?\s*(\{.*?\})\s*```"
    match = re.search(json_block_pattern, text, re.DOTALL)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            pass

    json_object_pattern = r"\{.*\}"
    match = re.search(json_object_pattern, text, re.DOTALL)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            pass

    raise ValueError(f"Could not extract a JSON object from response: {text[:200]}...")


class GenerationClient:
    """
    Sends one composed prompt to the provider and returns typed copy.

    Every call is a single provider round-trip: no retries, caching or
    deduplication happen here. Wrap the client (see core.retry) to add them.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 60.0,
        base_url: Optional[str] = None,
        provider: str = "openai",
        composer: Optional[PromptComposer] = None,
        usage_tracker: Optional[UsageTracker] = None,
        client: Optional[OpenAI] = None,
        default_headers: Optional[dict[str, str]] = None,
    ):
        """
        Initialize generation client.

        Args:
            api_key: Provider API key; without one every call raises ConfigurationError
            model: Model identifier
            temperature: Sampling temperature
            max_tokens: Maximum output tokens
            timeout: Request timeout in seconds
            base_url: OpenAI-compatible endpoint (None for the OpenAI default)
            provider: Provider name used in logs and cost tracking
            composer: Prompt composer (a default one is built if omitted)
            usage_tracker: Optional tracker that records token usage
            client: Pre-built OpenAI SDK client (tests inject a fake here)
            default_headers: Extra headers sent with every request
        """
        # Quotes are a common mistake when exporting keys
        cleaned = (api_key or "").strip().strip('"').strip("'")
        self.api_key = cleaned or None
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.base_url = base_url
        self.provider = provider
        self.composer = composer or PromptComposer()
        self.usage_tracker = usage_tracker
        self.default_headers = default_headers
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            # The SDK retries on its own by default; this client makes exactly one attempt
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
                default_headers=self.default_headers,
            )
        return self._client

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Generate copy for one request.

        Args:
            request: Validated description and the kind of copy wanted

        Returns:
            GenerationResult whose payload matches the response shape of the kind

        Raises:
            ConfigurationError: If no API key is configured (no network call is made)
            ProviderError: If the provider reports a failure or is unreachable
            EmptyResponseError: If the provider returns no content
            SchemaMismatchError: If the content is not JSON of the expected shape
        """
        if not self.api_key:
            raise ConfigurationError(
                f"No API key configured for provider '{self.provider}'"
            )

        prompt = self.composer.compose(request.description, request.kind)
        completion, latency_ms = self._call_provider(prompt, request)

        content = completion.choices[0].message.content if completion.choices else None
        usage = completion.usage.model_dump() if completion.usage else {}
        tokens_input, tokens_output = usage_tokens(usage)

        cost = None
        if self.usage_tracker is not None:
            cost = self.usage_tracker.record(self.provider, self.model, usage)

        logger.log_llm_call(
            provider=self.provider,
            model=self.model,
            prompt=prompt.user_instructions,
            response=content or "",
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_ms=latency_ms,
            cost=cost,
            generation_kind=request.kind.value,
        )

        if not content or not content.strip():
            raise EmptyResponseError("Provider returned an empty response")

        payload = self._parse(content, prompt)
        return GenerationResult(
            kind=request.kind,
            data=payload,
            usage=usage,
            model=completion.model or self.model,
        )

    def _call_provider(self, prompt: ComposedPrompt, request: GenerationRequest) -> tuple[Any, float]:
        start_time = time.time()
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=prompt.messages(),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )
        except openai.APIStatusError as e:
            self._log_failure(request, start_time, e, status_code=e.status_code)
            raise ProviderError(e.status_code, e.message) from e
        except openai.APIConnectionError as e:
            self._log_failure(request, start_time, e)
            raise ProviderError(None, f"Could not reach {self.provider}: {e}") from e
        except openai.APIError as e:
            self._log_failure(request, start_time, e)
            raise ProviderError(None, f"{self.provider} request failed: {e.message}") from e

        return completion, (time.time() - start_time) * 1000

    def _log_failure(
        self,
        request: GenerationRequest,
        start_time: float,
        error: Exception,
        status_code: Optional[int] = None,
    ) -> None:
        logger.log_pipeline_stage(
            "provider_call",
            "failed",
            duration_ms=(time.time() - start_time) * 1000,
            provider=self.provider,
            model=self.model,
            generation_kind=request.kind.value,
            status_code=status_code,
            error=str(error),
            error_type=type(error).__name__,
        )

    def _parse(self, content: str, prompt: ComposedPrompt):
        """Parse provider content into the response shape of the prompt."""
        try:
            data = extract_json(content)
        except ValueError as e:
            raise SchemaMismatchError(str(e)) from e

        try:
            return prompt.response_shape.model_validate(data)
        except ValidationError as e:
            raise SchemaMismatchError(format_schema_errors(e, prompt.response_shape)) from e
