from typing import Protocol

import httpx
import openai
from loguru import logger
from openai import AsyncOpenAI

from clearbudget.config import Settings
from clearbudget.llm.errors import AuthenticationFailed, NoCredential, RemoteCallFailed


class ModelClient(Protocol):
    has_credential: bool

    async def query(self, prompt: str) -> str: ...


class GeminiClient:
    """Single-turn ``generateContent`` calls against the Gemini REST API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        api_base: str = "https://generativelanguage.googleapis.com/v1beta/models",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.url = f"{api_base.rstrip('/')}/{model}:generateContent"
        self.timeout = timeout
        self._transport = transport

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    async def query(self, prompt: str) -> str:
        if not self.api_key:
            raise NoCredential("No Gemini API key provided - falling back to rule-based parsing")

        headers = {
            "Content-Type": "application/json",
            "X-goog-api-key": self.api_key,
        }
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise RemoteCallFailed(f"Gemini request failed: {e}") from e

        if response.status_code == 401:
            raise AuthenticationFailed("Invalid Gemini API key", status_code=401)
        if not response.is_success:
            raise RemoteCallFailed(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RemoteCallFailed("Unexpected response format from Gemini API") from e
        if not isinstance(text, str):
            raise RemoteCallFailed("Unexpected response format from Gemini API")

        logger.debug("Gemini raw response: {}", text)
        return text


class OpenRouterClient:
    """Same contract as GeminiClient, through OpenRouter's OpenAI-compatible API."""

    def __init__(self, api_key: str, model: str, base_url: str = "https://openrouter.ai/api/v1"):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._client: AsyncOpenAI | None = None

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(base_url=self.base_url, api_key=self.api_key)
        return self._client

    async def query(self, prompt: str) -> str:
        if not self.api_key:
            raise NoCredential("No OpenRouter API key provided - falling back to rule-based parsing")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.1,
            )
        except openai.AuthenticationError as e:
            raise AuthenticationFailed("Invalid OpenRouter API key", status_code=401) from e
        except openai.APIStatusError as e:
            raise RemoteCallFailed(f"HTTP error! status: {e.status_code}", status_code=e.status_code) from e
        except openai.OpenAIError as e:
            raise RemoteCallFailed(f"OpenRouter request failed: {e}") from e

        if not response.choices or response.choices[0].message.content is None:
            raise RemoteCallFailed("Unexpected response format from OpenRouter")

        raw = response.choices[0].message.content
        logger.debug("OpenRouter raw response: {}", raw)
        return raw


def build_model_client(settings: Settings) -> ModelClient:
    if settings.llm_provider == "openrouter":
        return OpenRouterClient(api_key=settings.openrouter_api_key, model=settings.llm_model)
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        api_base=settings.gemini_api_base,
        timeout=settings.request_timeout,
    )
