# ABOUTME: TurnResponder protocol describing the external capability that answers a protocol turn.
# ABOUTME: Production uses OpenAIResponder; tests inject deterministic stubs implementing the same method.

from typing import Protocol, runtime_checkable

from cognitive_edge.models.protocol import ResponderReply, TurnContext


@runtime_checkable
class TurnResponder(Protocol):
    """Produces the user-facing reply and proposes the next phase"""

    async def respond(self, context: TurnContext) -> ResponderReply:
        ...
