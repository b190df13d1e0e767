"""
Completion Kernel API — FastAPI endpoints.

Exposes the prompting engine to a conversation controller over HTTP:
- Gate evaluation and prompt generation
- Completion response recording
- AI context rendering
- Per-conversation housekeeping
"""

from typing import List, Optional

from fastapi import FastAPI
from pydantic import BaseModel

from completion_kernel.models.config import PromptingConfig
from completion_kernel.models.prompting import PromptRequest
from completion_kernel.models.task import Task, UserTier
from completion_kernel.prompting.engine import CompletionPromptingEngine


# --- Request/Response Models ---

class TurnRequest(BaseModel):
    tier: UserTier
    central_tasks: List[Task] = []
    ai_tasks: List[Task] = []


class ResponseRecordRequest(BaseModel):
    task_id: str
    completed: bool


class GateResponse(BaseModel):
    should_prompt: bool
    response_count: int


def _to_prompt_request(conversation_id: str, req: TurnRequest) -> PromptRequest:
    return PromptRequest(
        conversation_id=conversation_id,
        tier=req.tier,
        central_tasks=req.central_tasks,
        ai_tasks=req.ai_tasks,
    )


# --- Application Factory ---

def create_app(
    engine: Optional[CompletionPromptingEngine] = None,
    config: Optional[PromptingConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Completion Kernel API",
        description="Task completion check-ins for chat sessions",
        version="0.1.0",
    )

    engine = engine or CompletionPromptingEngine(config=config)
    app.state.engine = engine

    # === GATING & PROMPTS ===

    @app.post("/conversations/{conversation_id}/gate", response_model=GateResponse)
    def evaluate_gate(conversation_id: str, req: TurnRequest):
        """Count a turn and report whether a check-in is due."""
        decision = engine.should_prompt(_to_prompt_request(conversation_id, req))
        return GateResponse(
            should_prompt=decision,
            response_count=engine.get_response_count(conversation_id),
        )

    @app.post("/conversations/{conversation_id}/prompt")
    def generate_prompt(conversation_id: str, req: TurnRequest):
        """Count a turn and return a check-in prompt if one is due."""
        prompt = engine.generate_prompt(_to_prompt_request(conversation_id, req))
        return {"prompt": prompt.model_dump(mode="json") if prompt else None}

    @app.get("/conversations/{conversation_id}/counter")
    def get_counter(conversation_id: str):
        return {
            "conversation_id": conversation_id,
            "response_count": engine.get_response_count(conversation_id),
        }

    @app.delete("/conversations/{conversation_id}/counter")
    def reset_counter(conversation_id: str):
        engine.reset_response_counter(conversation_id)
        return {"status": "reset", "conversation_id": conversation_id}

    # === RESPONSES ===

    @app.post("/conversations/{conversation_id}/responses")
    def record_response(conversation_id: str, req: ResponseRecordRequest):
        """Record the user's answer about one task."""
        engine.record_response(conversation_id, req.task_id, req.completed)
        return {
            "status": "recorded",
            "pending": len(engine.get_pending_completions(conversation_id)),
        }

    @app.get("/conversations/{conversation_id}/responses")
    def list_responses(conversation_id: str):
        return [
            r.model_dump(mode="json")
            for r in engine.get_pending_completions(conversation_id)
        ]

    @app.delete("/conversations/{conversation_id}/responses")
    def clear_responses(conversation_id: str):
        engine.clear_pending_completions(conversation_id)
        return {"status": "cleared", "conversation_id": conversation_id}

    # === AI CONTEXT ===

    @app.get("/conversations/{conversation_id}/context")
    def get_context(conversation_id: str, consume: bool = False):
        """Pending answers rendered for the AI prompt. consume=true also clears them."""
        if consume:
            context = engine.consume_completion_context(conversation_id)
        else:
            context = engine.format_completion_context(conversation_id)
        return {"conversation_id": conversation_id, "context": context}

    # === HOUSEKEEPING ===

    @app.delete("/conversations/{conversation_id}")
    def forget_conversation(conversation_id: str):
        engine.forget_conversation(conversation_id)
        return {"status": "forgotten", "conversation_id": conversation_id}

    @app.get("/conversations")
    def list_conversations():
        return engine.active_conversations()

    @app.get("/config")
    def get_config():
        return engine.config.model_dump()

    return app
