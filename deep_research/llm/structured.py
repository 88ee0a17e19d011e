"""Typed (structured) completions on top of any LLMProvider.

The model is asked to answer with a single JSON object matching a pydantic
schema; the reply is located, decoded and validated here so callers only
ever see a typed object or a ProviderError.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from .protocols import LLMProvider

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

JSON_INSTRUCTIONS = """

## Output format
Respond with a single JSON object and nothing else. It must validate against this JSON schema:
{schema}"""


class ProviderError(RuntimeError):
    """The model collaborator failed to produce a valid typed answer.

    Covers transport failures, timeouts (the message contains "Timeout")
    and replies that do not decode or validate against the schema.
    """


def extract_json(response: str) -> dict:
    """
    Pull the outermost JSON object out of a model reply.

    Handles bare JSON as well as JSON wrapped in prose or a fenced block.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    json_start = response.find("{")
    json_end = response.rfind("}") + 1

    if json_start == -1 or json_end <= json_start:
        raise ValueError("no JSON object found in response")

    try:
        data = json.loads(response[json_start:json_end])
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON in response: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("JSON response is not an object")
    return data


async def generate_object(
    prompt: str,
    schema: type[SchemaT],
    system_prompt: str,
    provider: LLMProvider | None = None,
    timeout: float | None = None,
    temperature: float = 0.7,
    max_tokens: int | None = None,
) -> SchemaT:
    """
    Ask the model for an answer shaped like ``schema``.

    Args:
        prompt: The user prompt
        schema: Pydantic model the reply must validate against
        system_prompt: System prompt; the JSON schema is appended to it
        provider: Optional entered LLM provider. Defaults to OpenAIAdapter.
        timeout: Wall-clock limit in seconds (None = provider default)
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate

    Returns:
        A validated ``schema`` instance

    Raises:
        ProviderError: On provider failure, timeout, or invalid output

    Example:
        plan = await generate_object(prompt, SerpQueryPlan, system_prompt(), provider=llm)
    """
    if provider is None:
        from .adapters import OpenAIAdapter

        async with OpenAIAdapter() as llm:
            return await generate_object(
                prompt, schema, system_prompt, llm, timeout, temperature, max_tokens
            )

    system = system_prompt + JSON_INSTRUCTIONS.format(
        schema=json.dumps(schema.model_json_schema(), indent=2)
    )

    try:
        response = await asyncio.wait_for(
            provider.complete(
                prompt=prompt,
                system_prompt=system,
                temperature=temperature,
                max_tokens=max_tokens,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise ProviderError(
            f"Timeout after {timeout}s waiting for {schema.__name__} from {provider.model}"
        ) from e
    except ProviderError:
        raise
    except Exception as e:
        raise ProviderError(f"{type(e).__name__} from {provider.model}: {e}") from e

    try:
        data = extract_json(response)
        return schema.model_validate(data)
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse {schema.__name__}: {e}")
        logger.debug(f"Raw response: {response[:500]}")
        raise ProviderError(f"Failed to parse {schema.__name__}: {e}") from e
