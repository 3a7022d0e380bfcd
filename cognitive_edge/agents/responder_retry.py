# ABOUTME: Timeout and bounded retry decorator around any TurnResponder.
# ABOUTME: Each attempt runs under asyncio.wait_for; ResponderTimeout/ResponderFailure are retried with tenacity.

import asyncio

from loguru import logger
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cognitive_edge.agents.exceptions import (
    LLMCallFailed,
    ResponderError,
    ResponderFailure,
    ResponderTimeout,
)
from cognitive_edge.agents.responder import TurnResponder
from cognitive_edge.models.protocol import ResponderReply, TurnContext


class RetryingResponder:
    """
    TurnResponder decorator adding a per-attempt timeout and bounded retries.

    - Each attempt is awaited under asyncio.wait_for; a timeout becomes
      ResponderTimeout
    - LLMCallFailed and unexpected exceptions are wrapped in ResponderFailure
    - ResponderTimeout and ResponderFailure are retried up to `attempts` times
      in total, then re-raised
    - Cancellation propagates immediately and is never retried
    """

    def __init__(
        self,
        responder: TurnResponder,
        attempts: int = 2,
        timeout_seconds: float = 120.0,
        wait_min_seconds: float = 1.0,
        wait_max_seconds: float = 10.0,
    ):
        if attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {attempts}")
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {timeout_seconds}")

        self.responder = responder
        self.attempts = attempts
        self.timeout_seconds = timeout_seconds
        self.wait_min_seconds = wait_min_seconds
        self.wait_max_seconds = wait_max_seconds

    async def respond(self, context: TurnContext) -> ResponderReply:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=1, min=self.wait_min_seconds, max=self.wait_max_seconds),
            retry=retry_if_exception_type(ResponderError),
            before_sleep=before_sleep_log(logger, "WARNING"),
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                return await self._attempt(context, attempt.retry_state.attempt_number)

        # AsyncRetrying either returns or re-raises above
        raise ResponderFailure("Responder retries exhausted")

    async def _attempt(self, context: TurnContext, attempt_number: int) -> ResponderReply:
        try:
            return await asyncio.wait_for(
                self.responder.respond(context), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                f"Responder attempt {attempt_number}/{self.attempts} timed out "
                f"after {self.timeout_seconds}s"
            )
            raise ResponderTimeout(f"Responder timed out after {self.timeout_seconds}s") from e
        except ResponderError as e:
            logger.warning(
                f"Responder attempt {attempt_number}/{self.attempts} failed: "
                f"{type(e).__name__}: {e}"
            )
            raise
        except LLMCallFailed as e:
            logger.warning(f"Responder attempt {attempt_number}/{self.attempts} failed: {e}")
            raise ResponderFailure(str(e)) from e
        except Exception as e:
            logger.error(f"Unexpected responder error: {type(e).__name__}: {e}")
            raise ResponderFailure(f"{type(e).__name__}: {e}") from e
