"""Prompting Model — gate input, issued prompts and recorded answers."""

from datetime import datetime
from typing import List, Literal, Tuple

from pydantic import BaseModel, ConfigDict

from completion_kernel.models.task import Task, UserTier


class PromptRequest(BaseModel):
    """Everything one gate or prompt evaluation needs for a single turn."""

    conversation_id: str
    tier: UserTier
    central_tasks: List[Task] = []
    ai_tasks: List[Task] = []


class CompletionPrompt(BaseModel):
    """A check-in to show the user. Consumed once by the caller."""

    model_config = ConfigDict(frozen=True)

    id: str
    tasks: Tuple[Task, ...]                 # At most max_tasks_per_prompt, ranked
    prompt_text: str
    created_at: datetime
    conversation_id: str
    tier: UserTier
    source_pool: Literal["central", "ai"]


class CompletionResponse(BaseModel):
    """A user's answer about one task, waiting to be folded into AI context."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    completed: bool
    recorded_at: datetime
    conversation_id: str
