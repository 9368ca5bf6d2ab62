"""
LLM client abstraction for guide analysis.

This module provides the text-generation collaborator used by keyword
extraction. Any object with a ``generate(prompt, temperature)`` method
can stand in for it; this implementation calls Claude via the Anthropic
API.
"""

import os
from typing import Optional

try:
    import anthropic
except ImportError:
    anthropic = None  # type: ignore


DEFAULT_MODEL = "claude-sonnet-4-20250514"


class LLMClientError(Exception):
    """Raised when LLM operations fail."""
    pass


# System prompt for gear analysis
ANALYSIS_SYSTEM_PROMPT = """You are an outdoor gear specialist who reads hiking and backpacking guides.

You identify the gear, equipment and products a guide talks about so they can
be matched against a product catalog.

OUTPUT FORMAT:
- Return ONLY a single JSON object
- Do NOT wrap it in markdown code fences
- Do NOT include any explanation or commentary"""


class LLMClient:
    """
    Client for LLM-based text generation.

    Supports Anthropic Claude API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
    ):
        """
        Initialize the LLM client.

        Args:
            api_key: API key for the LLM provider. If None, reads from ANTHROPIC_API_KEY env var.
            model: Model identifier to use.
            timeout: Read timeout for one request, in seconds.
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model

        if not self.api_key:
            raise LLMClientError(
                "No API key provided. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key parameter."
            )

        if anthropic is None:
            raise LLMClientError(
                "anthropic package not installed. Run: pip install anthropic"
            )

        import httpx
        http_client = httpx.Client(
            timeout=httpx.Timeout(timeout, connect=30.0),
            follow_redirects=True,
        )
        self.client = anthropic.Anthropic(
            api_key=self.api_key,
            http_client=http_client,
        )

    def generate(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        system: str = ANALYSIS_SYSTEM_PROMPT,
    ) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: User prompt.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in response.
            system: System prompt.

        Returns:
            The generated text.

        Raises:
            LLMClientError: If the API call fails or returns no text.
        """
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise LLMClientError(f"LLM API call failed: {e}")

        if not response.content:
            raise LLMClientError("LLM API returned an empty response")
        return response.content[0].text


def create_llm_client(
    api_key: Optional[str] = None,
    model: str = DEFAULT_MODEL,
    timeout: float = 60.0,
) -> LLMClient:
    """
    Factory function to create an LLM client.

    Args:
        api_key: Optional API key. If None, uses environment variable.
        model: Model to use.
        timeout: Read timeout for one request, in seconds.

    Returns:
        Configured LLMClient instance.
    """
    return LLMClient(api_key=api_key, model=model, timeout=timeout)
