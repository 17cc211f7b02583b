"""
LLM oracle: prompt construction, provider calls and response extraction.
"""
import json
import logging
import re
from typing import Any, Dict, Optional, Protocol

import requests
from langchain_openai import ChatOpenAI

from crudgen.core.config import settings
from crudgen.core.exceptions import OracleError, OracleResponseError

logger = logging.getLogger(__name__)

START_MARKER = "START GENERATED DATA"
END_MARKER = "END GENERATED DATA"

PROVIDER_ENDPOINTS = {
    'openai': 'https://api.openai.com/v1',
    'openrouter': 'https://openrouter.ai/api/v1',
    'xai': 'https://api.x.ai/v1',
    'anthropic': 'https://api.anthropic.com/v1',
    'local': 'http://localhost:11434/v1',
}


class Oracle(Protocol):
    """Anything that turns a prompt into raw text."""

    def invoke(self, prompt: str) -> str:
        ...


def build_value_prompt(field_name: str, schema_type: Optional[str], required: bool, schema: Dict[str, Any]) -> str:
    """Prompt asking for a single value wrapped in the generated-data markers."""
    return f"""Generate a single realistic value for API testing matching the below Field Information:
- Name: "{field_name}"
- Type: {schema_type}
- Required: {str(required).lower()}
Schema: {json.dumps(schema, default=str)}

Requirements:
1. Generate a single value that matches the type {schema_type}
2. Follow the Schema
3. The value must be realistic and suitable for API testing
4. Must conform to any schema constraints (format, pattern, enum, min/max)

Format the response as a single JSON object:
{START_MARKER}
{json.dumps({field_name: "generated_value"})}
{END_MARKER}"""


def extract_generated_value(raw_text: str, field_name: str) -> Any:
    """
    Pull ``field_name`` out of the JSON object between the markers.
    
    Raises:
        OracleResponseError: markers missing, JSON invalid or key missing
    """
    if not isinstance(raw_text, str):
        raise OracleResponseError(f"Oracle returned {type(raw_text).__name__}, expected text")
    
    start = raw_text.find(START_MARKER)
    end = raw_text.find(END_MARKER, start + len(START_MARKER)) if start != -1 else -1
    if start == -1 or end == -1:
        raise OracleResponseError(f"Generated data markers not found. Response preview: {raw_text[:200]}")
    
    content = raw_text[start + len(START_MARKER):end].strip()
    # Remove markdown code block markers (```json ... ```)
    content = re.sub(r'^```[a-zA-Z]*\s*', '', content)
    content = re.sub(r'\s*```$', '', content)
    
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise OracleResponseError(f"Generated data is not valid JSON: {e.msg} at position {e.pos}") from e
    
    if not isinstance(parsed, dict) or field_name not in parsed:
        raise OracleResponseError(f"Generated data has no '{field_name}' key")
    return parsed[field_name]


class LLMOracle:
    """OpenAI-compatible LLM client used as the value oracle."""
    
    def __init__(
        self,
        provider: str = "openai",
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        timeout: float = 60.0,
    ):
        """
        Initialize the oracle.
        
        Args:
            provider: LLM provider (openai, openrouter, xai, anthropic, local)
            model: LLM model name
            api_key: Provider API key (ignored for local)
            endpoint: Custom endpoint URL, defaults to the provider's
            temperature: Sampling temperature
            max_tokens: Completion token limit
            timeout: Request timeout in seconds
        """
        self.provider = provider
        self.model = model
        self.api_key = api_key
        self.endpoint = endpoint or PROVIDER_ENDPOINTS.get(provider, f"https://api.{provider}.com/v1")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._chat: Optional[ChatOpenAI] = None
    
    def _chat_model(self) -> ChatOpenAI:
        if self._chat is None:
            self._chat = ChatOpenAI(
                model=self.model,
                api_key=self.api_key if self.provider != "local" else "ollama",
                base_url=self.endpoint,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._chat
    
    def _invoke_openrouter(self, prompt: str) -> str:
        # OpenRouter is called directly, the LangChain wrapper has compatibility issues
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        response = requests.post(
            f"{self.endpoint}/chat/completions",
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if "choices" in data and len(data["choices"]) > 0:
            return data["choices"][0]["message"]["content"]
        raise OracleError(f"Unexpected OpenRouter response format: {data}")
    
    def invoke(self, prompt: str) -> str:
        """Send ``prompt`` and return the raw completion text."""
        logger.debug(
            "LLM request: provider=%s model=%s endpoint=%s prompt_length=%d chars",
            self.provider,
            self.model,
            self.endpoint,
            len(prompt),
        )
        try:
            if self.provider == "openrouter":
                text = self._invoke_openrouter(prompt)
            else:
                message = self._chat_model().invoke(prompt)
                text = message.content if isinstance(message.content, str) else str(message.content)
        except OracleError:
            raise
        except Exception as e:
            raise OracleError(f"LLM API call failed: {e}") from e
        
        logger.debug("LLM raw response (truncated): %s", text[:1000].replace("\n", " "))
        return text


def build_oracle_from_settings() -> Optional[LLMOracle]:
    """Oracle configured from settings, or None when no credentials exist."""
    provider = settings.DEFAULT_LLM_PROVIDER
    if provider != "local" and not settings.LLM_API_KEY.strip():
        logger.info("No LLM API key configured; values come from the fallback generator")
        return None
    return LLMOracle(
        provider=provider,
        model=settings.DEFAULT_LLM_MODEL,
        api_key=settings.LLM_API_KEY or None,
        endpoint=settings.LLM_ENDPOINT or None,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
        timeout=settings.LLM_TIMEOUT_SECONDS,
    )
