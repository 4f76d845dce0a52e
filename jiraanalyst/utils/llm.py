"""
llm.py

Text-generation client used by the report pipeline. The pipeline only depends on the
TextGenerationClient interface: send a prompt, get back a dict validated against a
marshmallow schema, or a SchemaError.
"""
import json
from abc import ABC, abstractmethod

import openai
from marshmallow import ValidationError

from jiraanalyst.constants import LLM_TIMEOUT
from jiraanalyst.errors import ConfigError, SchemaError, TextGenerationError
from jiraanalyst.utils.logging import contextual_log


def parse_json_response(text, schema):
    """
    Parse a raw service response and validate it with schema.
    Markdown code fences around the JSON are tolerated; anything else that is not a single
    JSON object raises SchemaError.
    """
    if not text or not isinstance(text, str):
        raise SchemaError("Empty response from the text-generation service.", raw=text)
    body = text.strip()
    if body.startswith("```"):
        body = body.strip("`")
        if body.lower().startswith("json"):
            body = body[4:]
        body = body.strip()
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Response is not valid JSON: {e}", raw=text) from e
    if not isinstance(payload, dict):
        raise SchemaError("Response must be a single JSON object.", raw=text)
    try:
        return schema.load(payload)
    except ValidationError as err:
        raise SchemaError(f"Response does not match the expected schema: {err.messages}", messages=err.messages, raw=text) from err


class TextGenerationClient(ABC):
    """Interface for the external text-generation service."""

    @abstractmethod
    async def generate(self, prompt, schema):
        """Return the service output for prompt, validated by schema (a marshmallow Schema instance)."""


class OpenAITextGenerationClient(TextGenerationClient):
    """
    Calls the OpenAI chat completions API in JSON mode.
    Args:
        config (dict): Validated OpenAI config (api_key, model, temperature, max_tokens, timeout).
        client: Optional pre-built openai.AsyncOpenAI instance.
    """
    def __init__(self, config, client=None):
        if not config or not config.get('api_key'):
            raise ConfigError("OPENAI_API_KEY is not configured.")
        self.model = config.get('model', 'gpt-4o-mini')
        self.temperature = float(config.get('temperature', 0.2))
        self.max_tokens = int(config.get('max_tokens', 2048))
        self.timeout = float(config.get('timeout', LLM_TIMEOUT))
        self.client = client or openai.AsyncOpenAI(api_key=config['api_key'], timeout=self.timeout, max_retries=0)

    async def generate(self, prompt, schema):
        contextual_log('debug', f"[llm] Sending prompt ({len(prompt)} chars): {prompt[:500]}", operation="llm_call", params={"model": self.model})
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            contextual_log('error', f"[llm] Request failed: {e}", operation="llm_call", error_type=type(e).__name__, status="error")
            raise TextGenerationError(f"Text-generation request failed: {e}") from e
        if not response.choices:
            raise TextGenerationError("Text-generation service returned no choices.")
        content = response.choices[0].message.content
        contextual_log('debug', f"[llm] Raw response: {repr(content)[:1000]}", operation="llm_call")
        return parse_json_response(content, schema)
