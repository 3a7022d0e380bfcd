# ABOUTME: Prompt templates for the OpenAI turn responder across all protocol phases.
# ABOUTME: Builds the system prompt, per-phase guidance and the force-example instruction for critical phases.

import json

from pydantic import BaseModel

from cognitive_edge.models.protocol import PHASE_ORDER, Phase, TurnContext

SYSTEM_PROMPT = """You are a reflective facilitator guiding a user through the Cognitive Edge Protocol,
a six-phase conversation that moves from overwhelm toward an identity-driven next step.

Principles:
- Listen for the user's own mental model and adopt it as the anchor for guidance
- Shift stance between strategist, supporter and facilitator as the user needs
- When the user is stuck, offer a concrete example rather than another question
- When the user shows exhaustion, prioritize psychological safety over progress

Respond ONLY with a JSON object using these keys:
{{
  "response": "<your reply to the user>",
  "nextPhase": "<one of: {phase_names}>",
  "discoveredMentalModel": "<optional>",
  "cognitiveEdgeInsight": "<optional>",
  "aiRoleTransition": {{"newRole": "<role>", "reason": "<why>"}} or null,
  "keyStatement": {{"type": "<reframed_belief|legacy_statement|mental_model|cognitive_edge>",
                    "statement": "<text>", "significance": "<text>"}} or null,
  "tangibleAsset": "<optional>"
}}
Set nextPhase to the current phase to stay, the following phase to advance,
or "Complete" once a meaningful legacy statement has been captured.
"""

PHASE_GUIDANCE: dict[Phase, str] = {
    Phase.STABILIZE_AND_STRUCTURE: (
        "Turn emotional overwhelm into manageable structure. Validate the pressure, "
        "externalize the problems, and advance once the user feels heard."
    ),
    Phase.LISTEN_FOR_CORE_FRAME: (
        "Listen for the user's underlying frame: how they see time, success and identity. "
        "Drop generic frameworks once their own frame appears."
    ),
    Phase.VALIDATE_EMOTION_REFRAME: (
        "Validate feelings while gently challenging limiting beliefs. "
        "Goal: the user states a new, empowering belief."
    ),
    Phase.PROVIDE_GROUNDED_SUPPORT: (
        "Offer grounding and practical strategies aligned with the new perspective. "
        "Restore emotional equilibrium before moving on."
    ),
    Phase.REFLECTIVE_PATTERN_DISCOVERY: (
        "Stop giving answers and facilitate discovery of the user's distinctive thinking "
        "patterns, following their lead."
    ),
    Phase.EMPOWER_AND_LEGACY_STATEMENT: (
        "Help the user synthesize their discoveries into a legacy statement about moving forward. "
        "Set nextPhase to \"Complete\" once that statement exists."
    ),
    Phase.COMPLETE: (
        "The protocol is complete. Acknowledge the user warmly and reflect their legacy statement back."
    ),
}

FORCE_EXAMPLE_INSTRUCTIONS: dict[Phase, str] = {
    Phase.VALIDATE_EMOTION_REFRAME: (
        "The user has not reached a reframe after {attempt_count} attempts. "
        "Propose one concrete reframe built on their own mental model instead of asking again."
    ),
    Phase.EMPOWER_AND_LEGACY_STATEMENT: (
        "The user has not produced a legacy statement after {attempt_count} attempts. "
        "Propose one concrete legacy statement built on their cognitive edge instead of asking again."
    ),
}


class TurnPromptTemplate(BaseModel):
    """Renders the user prompt for a single protocol turn"""

    context: TurnContext

    @property
    def force_example_instruction(self) -> str | None:
        if not self.context.force_example:
            return None
        template = FORCE_EXAMPLE_INSTRUCTIONS.get(self.context.phase)
        if template is None:
            return None
        return template.format(attempt_count=self.context.attempt_count)

    def build_prompt(self) -> str:
        ctx = self.context
        history = json.dumps(ctx.session_history, ensure_ascii=False) if ctx.session_history else "(none)"

        if ctx.phase.is_terminal:
            phase_line = f"CURRENT PHASE: {ctx.phase.value}"
        else:
            phase_line = f"CURRENT PHASE: {ctx.phase.value} ({ctx.phase.ordinal + 1} of {len(PHASE_ORDER) - 1})"

        sections = [phase_line, f"PHASE GUIDANCE: {PHASE_GUIDANCE[ctx.phase]}"]
        if ctx.role is not None:
            sections.append(f"YOUR ROLE: {ctx.role.value}")
        sections.append(f"ATTEMPT COUNT: {ctx.attempt_count}")

        instruction = self.force_example_instruction
        if instruction:
            sections.append(f"REQUIRED: {instruction}")

        if ctx.discovered_mental_model:
            sections.append(f"KNOWN MENTAL MODEL: {ctx.discovered_mental_model}")
        if ctx.cognitive_edge_identified is not None:
            sections.append(f"COGNITIVE EDGE IDENTIFIED: {'yes' if ctx.cognitive_edge_identified else 'no'}")

        sections.append(f"SESSION HISTORY: {history}")
        sections.append(f"USER INPUT: {ctx.user_input}")
        return "\n\n".join(sections)


def build_system_prompt() -> str:
    return SYSTEM_PROMPT.format(phase_names=", ".join(p.value for p in PHASE_ORDER))
