# ABOUTME: Builders wiring settings into the responder, session store and turn service.
# ABOUTME: Dependencies are constructed explicitly and attached to app.state; there are no module singletons.

from fastapi import Request
from loguru import logger
from openai import AsyncOpenAI
from redis import Redis

from cognitive_edge.agents.openai_responder import OpenAIResponder
from cognitive_edge.agents.responder import TurnResponder
from cognitive_edge.agents.responder_retry import RetryingResponder
from cognitive_edge.config.settings import Settings
from cognitive_edge.orchestration.phase_controller import PhaseController
from cognitive_edge.orchestration.turn_service import ProtocolTurnService
from cognitive_edge.storage.session_store import (
    InMemorySessionStore,
    RedisSessionStore,
    SessionStore,
)


def build_responder(settings: Settings, openai_client: AsyncOpenAI | None = None) -> TurnResponder:
    """
    Build the production responder wrapped with timeout and retry.

    Raises:
        RuntimeError: When no OpenAI client is given and OPENAI_API_KEY is unset
    """
    if openai_client is None:
        if not settings.openai_api_key:
            raise RuntimeError(
                "OPENAI_API_KEY is not configured. Set it in the environment or .env file."
            )
        openai_client = AsyncOpenAI(api_key=settings.openai_api_key)

    return RetryingResponder(
        OpenAIResponder(
            openai_client,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
        ),
        attempts=settings.responder_retry_attempts,
        timeout_seconds=settings.responder_timeout_seconds,
        wait_min_seconds=settings.responder_retry_wait_seconds,
        wait_max_seconds=max(settings.responder_retry_wait_seconds, 10.0),
    )


def build_session_store(settings: Settings, redis_client: Redis | None = None) -> SessionStore:
    if settings.session_backend == "redis":
        if redis_client is None:
            redis_client = Redis.from_url(settings.redis_url, decode_responses=False)
        logger.info(f"Using Redis session store at {settings.redis_url}")
        return RedisSessionStore(redis_client, ttl_seconds=settings.session_ttl_seconds)

    logger.info("Using in-memory session store")
    return InMemorySessionStore()


def build_turn_service(
    settings: Settings,
    responder: TurnResponder | None = None,
    store: SessionStore | None = None,
) -> ProtocolTurnService:
    return ProtocolTurnService(
        responder=responder or build_responder(settings),
        controller=PhaseController(),
        store=store or build_session_store(settings),
    )


def get_turn_service(request: Request) -> ProtocolTurnService:
    return request.app.state.turn_service
