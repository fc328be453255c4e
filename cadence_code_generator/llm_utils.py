"""
LLM Utilities - OpenAI client wrapper used as the generation backend
"""

from typing import Optional

from openai import OpenAI

from .config import GeneratorConfig


class OpenAIGenerator:
    """
    Implements the generate(system_prompt, user_prompt, temperature) capability
    on top of the OpenAI chat completion API.

    Exactly one request is made per call: retrying is the orchestrator's job.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None, client: Optional[OpenAI] = None, debug: bool = False):
        self.config = config or GeneratorConfig()
        self.debug = debug
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.config.api_key:
                raise RuntimeError(
                    "OpenAI API key not found. Set OPENAI_API_KEY or API_KEY in your environment/.env."
                )
            self._client = OpenAI(api_key=self.config.api_key)
        return self._client

    def generate(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        if self.debug:
            print(f"[OpenAIGenerator] model={self.config.model} temperature={temperature}")

        response = self.client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            timeout=self.config.timeout,
        )

        content = response.choices[0].message.content
        if not content:
            raise RuntimeError("No content returned from model")
        return content

    __call__ = generate
