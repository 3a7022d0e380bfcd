# ABOUTME: FastAPI application exposing protocol turns, session-backed turns, phase metadata and health.
# ABOUTME: Maps TurnOutcome errors to 400/500 JSON bodies and never leaks provider error text to clients.

import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import Field

from cognitive_edge.api.dependencies import build_turn_service, get_turn_service
from cognitive_edge.config.settings import Settings, get_settings
from cognitive_edge.models.outcome import GENERIC_FAILURE_MESSAGE, TurnOutcome
from cognitive_edge.models.protocol import CamelModel, ProtocolTurnPayload
from cognitive_edge.orchestration.turn_service import ProtocolTurnService
from cognitive_edge.storage.session_store import SessionStoreError


class SessionTurnBody(CamelModel):
    """Body for a session-backed turn; phase and attempts come from the store"""

    user_input: str | None = Field(default=None)


def _outcome_response(outcome: TurnOutcome) -> JSONResponse:
    if outcome.ok and outcome.result is not None:
        return JSONResponse(
            status_code=200,
            content=outcome.result.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    error = outcome.error
    if error is None:
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.message, "code": error.code},
    )


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) if parts else "body"


def create_app(
    settings: Settings | None = None,
    service: ProtocolTurnService | None = None,
) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        settings: Configuration (default: get_settings())
        service: Prebuilt turn service (default: built from settings)

    Returns:
        Configured FastAPI app with the turn service on app.state
    """
    settings = settings or get_settings()

    app = FastAPI(title="Cognitive Edge Protocol", version="0.1.0")
    app.state.settings = settings
    app.state.turn_service = service or build_turn_service(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = (request.headers.get("x-request-id") or "").strip() or str(uuid.uuid4())
        with logger.contextualize(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = _field_name(tuple(first.get("loc", ())))
        if first.get("type") == "json_invalid":
            message = "Request body is not valid JSON"
        else:
            message = f"Invalid field: {field}"
        logger.info(f"Rejected request to {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"error": message, "code": "invalid_request"})

    @app.exception_handler(SessionStoreError)
    async def session_store_exception_handler(request: Request, exc: SessionStoreError):
        logger.error(f"Session store error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})

    @app.post("/api/protocol")
    async def protocol_turn(
        payload: ProtocolTurnPayload,
        service: ProtocolTurnService = Depends(get_turn_service),
    ) -> JSONResponse:
        outcome = await service.process_turn(payload)
        return _outcome_response(outcome)

    @app.get("/api/protocol/health")
    async def protocol_health(
        service: ProtocolTurnService = Depends(get_turn_service),
    ) -> JSONResponse:
        health = await service.health_check()
        status_code = 200 if health["status"] == "healthy" else 500
        return JSONResponse(status_code=status_code, content=health)

    @app.get("/api/protocol/phases")
    async def protocol_phases(
        service: ProtocolTurnService = Depends(get_turn_service),
    ) -> list[dict]:
        return [
            info.model_dump(mode="json", by_alias=True)
            for info in service.controller.describe_phases()
        ]

    @app.post("/api/sessions/{session_id}/turns")
    async def session_turn(
        session_id: str,
        body: SessionTurnBody,
        service: ProtocolTurnService = Depends(get_turn_service),
    ) -> JSONResponse:
        outcome = await service.process_session_turn(session_id, body.user_input)
        return _outcome_response(outcome)

    @app.get("/api/sessions/{session_id}")
    async def get_session(
        session_id: str,
        service: ProtocolTurnService = Depends(get_turn_service),
    ) -> JSONResponse:
        state = await service.load_session(session_id)
        if state is None:
            return JSONResponse(status_code=404, content={"error": f"Unknown session: {session_id}"})
        return JSONResponse(
            status_code=200,
            content=state.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    @app.delete("/api/sessions/{session_id}")
    async def reset_session(
        session_id: str,
        service: ProtocolTurnService = Depends(get_turn_service),
    ) -> JSONResponse:
        deleted = await service.reset_session(session_id)
        if not deleted:
            return JSONResponse(status_code=404, content={"error": f"Unknown session: {session_id}"})
        return JSONResponse(status_code=200, content={"deleted": True, "sessionId": session_id})

    return app
