"""
Text-generation providers for deep searches.

- ChatCompletionsProvider: OpenAI-compatible chat completions over HTTP
  (Jina DeepSearch by default), with endpoint fallback and linear backoff
- GeminiProvider: Google Gemini via google-generativeai
"""
import logging
import time
from typing import Callable, Dict, Any, List, Optional

import google.generativeai as genai
import requests

from ..config import (
    DEEPSEARCH_API_KEY, DEEPSEARCH_ENDPOINT, DEEPSEARCH_FALLBACK_ENDPOINTS,
    DEEPSEARCH_MODEL, DEEPSEARCH_MAX_TOKENS, DEEPSEARCH_PROVIDER,
    GEMINI_API_KEY, GEMINI_MODEL, REQUEST_TIMEOUT, RETRY_ATTEMPTS, RETRY_DELAY
)
from ..exceptions import ProviderError
from .stream import fold_stream, read_document

logger = logging.getLogger(__name__)

ChunkCallback = Optional[Callable[[str], None]]


class TextProvider:
    """Base class for providers that turn a prompt into generated text."""

    name = 'base'

    def generate(self, prompt: str, stream: bool = True, on_chunk: ChunkCallback = None) -> str:
        raise NotImplementedError


class ChatCompletionsProvider(TextProvider):
    """Chat completions over HTTP with fallback endpoints."""

    name = 'jina'

    def __init__(
        self,
        api_key: str = DEEPSEARCH_API_KEY,
        endpoint: str = DEEPSEARCH_ENDPOINT,
        fallback_endpoints: Optional[List[str]] = None,
        model: str = DEEPSEARCH_MODEL,
        max_tokens: int = DEEPSEARCH_MAX_TOKENS,
        retry_attempts: int = RETRY_ATTEMPTS,
        retry_delay: float = RETRY_DELAY,
        timeout: int = REQUEST_TIMEOUT
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.fallback_endpoints = (
            list(DEEPSEARCH_FALLBACK_ENDPOINTS) if fallback_endpoints is None else fallback_endpoints
        )
        self.model = model
        self.max_tokens = max_tokens
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.timeout = timeout

    @property
    def endpoints(self) -> List[str]:
        return [self.endpoint] + [e for e in self.fallback_endpoints if e != self.endpoint]

    def build_payload(self, prompt: str, stream: bool = True) -> Dict[str, Any]:
        return {
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "stream": stream,
            "model": self.model
        }

    def generate(self, prompt: str, stream: bool = True, on_chunk: ChunkCallback = None) -> str:
        """Send the prompt, trying every endpoint per round.

        Raises ProviderError when no API key is configured or every round
        failed.
        """
        if not self.api_key or not self.api_key.strip():
            raise ProviderError("No API key provided. Set DEEPSEARCH_API_KEY first.")

        payload = self.build_payload(prompt, stream)
        last_error = None

        for attempt in range(self.retry_attempts):
            for endpoint in self.endpoints:
                try:
                    response = self._post(endpoint, payload, stream)
                except (requests.RequestException, ProviderError) as e:
                    logger.warning("DeepSearch error (attempt %d with %s): %s", attempt + 1, endpoint, e)
                    last_error = e
                    continue

                return self._read(response, stream, on_chunk)

            if attempt + 1 < self.retry_attempts:
                wait_time = self.retry_delay * (attempt + 1)
                logger.info("All endpoints failed, retrying in %.1fs", wait_time)
                time.sleep(wait_time)

        message = str(last_error) if last_error else "Failed to connect to DeepSearch API"
        raise ProviderError(message)

    def _post(self, endpoint: str, payload: Dict[str, Any], stream: bool) -> requests.Response:
        response = requests.post(
            endpoint,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}"
            },
            json=payload,
            stream=stream,
            timeout=self.timeout
        )
        if not response.ok:
            message = self._error_message(response)
            response.close()
            raise ProviderError(message)
        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Server-provided error text when the body is JSON."""
        try:
            body = response.json()
        except ValueError:
            return f"API Error: {response.reason or 'Unknown error'}"

        if isinstance(body, dict):
            if body.get('message'):
                return f"API Error: {body['message']}"
            if body.get('error'):
                return f"API Error: {body['error']}"
        return f"API request failed with status {response.status_code}"

    def _read(self, response: requests.Response, stream: bool, on_chunk: ChunkCallback) -> str:
        try:
            if stream:
                return fold_stream(response.iter_content(chunk_size=None), on_chunk)
            return read_document(response.json(), on_chunk)
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"Error reading response: {e}") from e
        finally:
            response.close()


class GeminiProvider(TextProvider):
    """Gemini text generation, retrying on rate limits."""

    name = 'gemini'

    def __init__(
        self,
        api_key: str = GEMINI_API_KEY,
        model: str = GEMINI_MODEL,
        max_tokens: int = DEEPSEARCH_MAX_TOKENS,
        retry_attempts: int = RETRY_ATTEMPTS,
        retry_delay: float = RETRY_DELAY
    ):
        self.api_key = api_key
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model)
        self.generation_config = genai.GenerationConfig(max_output_tokens=max_tokens)

    def generate(self, prompt: str, stream: bool = True, on_chunk: ChunkCallback = None) -> str:
        if not self.api_key:
            raise ProviderError("No API key provided. Set GEMINI_API_KEY first.")
        return self._call_with_retry(prompt, stream, on_chunk)

    def _call_with_retry(self, prompt: str, stream: bool, on_chunk: ChunkCallback) -> str:
        """Call the API with retry logic for rate limits."""
        for attempt in range(self.retry_attempts):
            try:
                response = self.model.generate_content(
                    prompt,
                    generation_config=self.generation_config,
                    stream=stream
                )
                if not stream:
                    text = response.text
                    if text and on_chunk:
                        on_chunk(text)
                    return text
                return self._collect(response, on_chunk)
            except Exception as e:
                error_str = str(e)
                if '429' in error_str or 'quota' in error_str.lower():
                    wait_time = self.retry_delay * (attempt + 1)
                    logger.warning("Rate limit hit, waiting %.1fs...", wait_time)
                    time.sleep(wait_time)
                else:
                    raise ProviderError(f"Gemini request failed: {e}") from e
        raise ProviderError(f"Failed after {self.retry_attempts} retries")

    @staticmethod
    def _collect(response, on_chunk: ChunkCallback) -> str:
        text = ''
        for chunk in response:
            try:
                piece = chunk.text
            except ValueError as e:
                # Chunks without text parts (e.g. safety stops) carry no content
                logger.warning("Skipping Gemini chunk without text: %s", e)
                continue
            if piece:
                text += piece
                if on_chunk:
                    on_chunk(piece)
        return text


def create_provider(name: Optional[str] = None) -> TextProvider:
    """Provider selected by name, defaulting to DEEPSEARCH_PROVIDER."""
    name = (name or DEEPSEARCH_PROVIDER).lower()
    if name == 'gemini':
        return GeminiProvider()
    return ChatCompletionsProvider()
