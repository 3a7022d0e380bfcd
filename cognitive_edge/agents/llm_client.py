# ABOUTME: Shared LLM client wrapper around AsyncOpenAI chat completions.
# ABOUTME: One chat-completion call per invocation; SDK timeouts become ResponderTimeout, other errors LLMCallFailed.

from typing import Any

from openai import APITimeoutError, AsyncOpenAI

from cognitive_edge.agents.exceptions import LLMCallFailed, ResponderTimeout


class LLMClient:
    """
    Thin async wrapper issuing a single protocol chat completion.

    Makes no retries of its own; RetryingResponder owns the retry policy.
    """

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o"):
        """
        Bind the wrapper to an OpenAI client and model.

        Args:
            client: Configured AsyncOpenAI client
            model: Chat model name used for every call
        """
        self.client = client
        self.model = model

    async def call(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        response_format: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> str:
        """
        Call the OpenAI chat completions API once.

        Args:
            system_prompt: System message defining facilitator behavior
            user_prompt: User message with the turn details
            temperature: Sampling temperature
            response_format: Structured output mode, e.g. JSON object mode
            timeout: Optional request timeout in seconds

        Returns:
            LLM response content ("" when the model returned no content)

        Raises:
            ResponderTimeout: When the SDK reports a request timeout
            LLMCallFailed: When the API call fails for any other reason
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }

        if timeout is not None:
            kwargs["timeout"] = timeout

        if response_format:
            kwargs["response_format"] = response_format

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except APITimeoutError as e:
            raise ResponderTimeout(f"OpenAI request timed out: {e}") from e
        except Exception as e:
            raise LLMCallFailed(f"OpenAI API call failed: {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
