# ABOUTME: Command-line entry point: serve the HTTP API, run a single turn, or list the protocol phases.
# ABOUTME: Run with: python -m cognitive_edge serve | turn "<text>" --phase 0 | phases

import argparse
import asyncio
import json
import sys

from cognitive_edge.config.settings import get_settings
from cognitive_edge.orchestration.phase_controller import PhaseController
from cognitive_edge.utils.logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="cognitive_edge",
        description="Cognitive Edge Protocol service"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", type=str, default=None, help="Bind address (default: settings.host)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: settings.port)")

    turn = subparsers.add_parser("turn", help="Run one stateless protocol turn and print the result")
    turn.add_argument("user_input", type=str, help="User message for this turn")
    turn.add_argument(
        "--phase",
        type=str,
        default="0",
        help="Current phase as ordinal or name (default: 0)"
    )
    turn.add_argument("--attempt-count", type=int, default=1, help="Attempts made in this phase")

    subparsers.add_parser("phases", help="Print phase metadata as JSON")

    return parser.parse_args(argv)


def _phase_arg(value: str) -> int | str:
    # CLI phases arrive as text; digits mean an ordinal
    stripped = value.strip()
    if stripped.lstrip("-").isdigit():
        return int(stripped)
    return value


async def _run_turn(args: argparse.Namespace) -> int:
    from cognitive_edge.api.dependencies import build_turn_service
    from cognitive_edge.models.protocol import ProtocolTurnPayload

    settings = get_settings()
    service = build_turn_service(settings)
    outcome = await service.process_turn(
        ProtocolTurnPayload(
            user_input=args.user_input,
            phase=_phase_arg(args.phase),
            attempt_count=args.attempt_count,
        )
    )

    if outcome.ok and outcome.result is not None:
        print(json.dumps(outcome.result.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2))
        return 0

    print(f"Error: {outcome.error.message if outcome.error else 'unknown error'}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Entry point for the protocol CLI"""
    args = parse_args(argv)
    settings = get_settings()

    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        console_output=True,
        file_output=settings.log_to_file,
    )

    if args.command == "phases":
        phases = [info.model_dump(mode="json", by_alias=True) for info in PhaseController().describe_phases()]
        print(json.dumps(phases, indent=2))
        return 0

    if args.command == "turn":
        return asyncio.run(_run_turn(args))

    import uvicorn

    from cognitive_edge.api.app import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
