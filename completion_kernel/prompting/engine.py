"""
Completion Prompting Engine — per-conversation task check-ins.

Decides when to interrupt the user with a "did you finish this?" check-in,
which tasks to ask about, and keeps the answers until the caller folds them
into the AI context.

Cadence Rules:
- Free tier: only asks about central tasks, every central_cadence turns
- Paid tiers: central tasks every central_cadence turns, otherwise
  AI-suggested tasks every ai_cadence turns

The turn counter is the only cadence input. It is bumped on every gate
evaluation, whatever the outcome.

State is owned by the engine instance. Callers must serialize access per
conversation; the engine does no locking.
"""

from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Dict, List, Optional
from uuid import uuid4

import structlog

from completion_kernel.models.config import PromptingConfig
from completion_kernel.models.prompting import (
    CompletionPrompt,
    CompletionResponse,
    PromptRequest,
)
from completion_kernel.models.task import Task, TaskStatus, UserTier

logger = structlog.get_logger(__name__)

CONTEXT_TAG = "TASK_COMPLETION_UPDATES"


def category_rank(category: str, config: Optional[PromptingConfig] = None) -> int:
    """Rank of a task category. Lower ranks are asked about first."""
    config = config or PromptingConfig()
    return config.category_ranks.get(category, config.unknown_category_rank)


def _created_ts(task: Task) -> float:
    if task.created_at is None:
        return 0.0
    return task.created_at.timestamp()


def select_relevant_tasks(
    tasks: List[Task],
    max_count: int,
    config: Optional[PromptingConfig] = None,
) -> List[Task]:
    """
    Pick up to max_count open tasks worth asking about.

    Tasks created more than the recency window apart are ordered newest
    first. Closer than that, the category rank decides.
    """
    config = config or PromptingConfig()
    window = config.recency_window_seconds

    def compare(a: Task, b: Task) -> int:
        a_ts = _created_ts(a)
        b_ts = _created_ts(b)
        if abs(a_ts - b_ts) > window:
            return -1 if a_ts > b_ts else 1
        return category_rank(a.category, config) - category_rank(b.category, config)

    open_tasks = [t for t in tasks if t.status != TaskStatus.COMPLETED]
    ranked = sorted(open_tasks, key=cmp_to_key(compare))
    return ranked[:max_count]


class CompletionPromptingEngine:
    """
    Owns the per-conversation turn counters and pending completion answers.
    """

    def __init__(self, config: Optional[PromptingConfig] = None):
        self.config = config or PromptingConfig()
        self._response_counters: Dict[str, int] = {}
        self._pending_completions: Dict[str, List[CompletionResponse]] = {}

    # --- Gating ---

    def should_prompt(self, request: PromptRequest) -> bool:
        """Count this turn and decide whether a check-in is due."""
        return self._evaluate_gate(
            request.conversation_id,
            request.tier,
            has_central=len(request.central_tasks) > 0,
        )

    def _evaluate_gate(self, conversation_id: str, tier: UserTier, has_central: bool) -> bool:
        count = self._response_counters.get(conversation_id, 0) + 1
        self._response_counters[conversation_id] = count

        if has_central:
            decision = count % self.config.central_cadence == 0
        elif tier.is_paid:
            decision = count % self.config.ai_cadence == 0
        else:
            decision = False  # Free tier has nothing to ask about

        logger.debug(
            "completion_gate_evaluated",
            conversation_id=conversation_id,
            tier=tier.value,
            has_central=has_central,
            response_count=count,
            decision=decision,
        )
        return decision

    def generate_prompt(self, request: PromptRequest) -> Optional[CompletionPrompt]:
        """
        Run the gate and, when it passes, build a check-in prompt.
        Both pools are read once so the gate and the selection agree.
        """
        central_tasks = list(request.central_tasks)
        ai_tasks = list(request.ai_tasks)

        if not self._evaluate_gate(
            request.conversation_id, request.tier, has_central=len(central_tasks) > 0
        ):
            return None

        if central_tasks:
            pool, source_pool, prompt_text = central_tasks, "central", self.config.central_prompt_text
        elif request.tier.is_paid:
            pool, source_pool, prompt_text = ai_tasks, "ai", self.config.ai_prompt_text
        else:
            return None

        selected = select_relevant_tasks(pool, self.config.max_tasks_per_prompt, self.config)
        if not selected:
            return None

        prompt = CompletionPrompt(
            id=f"cprompt_{uuid4().hex[:12]}",
            tasks=tuple(t.model_copy() for t in selected),
            prompt_text=prompt_text,
            created_at=datetime.now(timezone.utc),
            conversation_id=request.conversation_id,
            tier=request.tier,
            source_pool=source_pool,
        )
        logger.info(
            "completion_prompt_generated",
            conversation_id=request.conversation_id,
            prompt_id=prompt.id,
            source_pool=source_pool,
            task_ids=[t.id for t in selected],
        )
        return prompt

    def get_response_count(self, conversation_id: str) -> int:
        return self._response_counters.get(conversation_id, 0)

    def reset_response_counter(self, conversation_id: str) -> None:
        self._response_counters.pop(conversation_id, None)

    # --- Responses ---

    def record_response(self, conversation_id: str, task_id: str, completed: bool) -> None:
        """Queue a user's answer. The task id is not checked against issued prompts."""
        response = CompletionResponse(
            task_id=task_id,
            completed=completed,
            recorded_at=datetime.now(timezone.utc),
            conversation_id=conversation_id,
        )
        self._pending_completions.setdefault(conversation_id, []).append(response)
        logger.info(
            "completion_response_recorded",
            conversation_id=conversation_id,
            task_id=task_id,
            completed=completed,
        )

    def get_pending_completions(self, conversation_id: str) -> List[CompletionResponse]:
        return list(self._pending_completions.get(conversation_id, []))

    def clear_pending_completions(self, conversation_id: str) -> None:
        removed = self._pending_completions.pop(conversation_id, None)
        if removed:
            logger.info(
                "completion_responses_cleared",
                conversation_id=conversation_id,
                count=len(removed),
            )

    # --- AI context ---

    def format_completion_context(self, conversation_id: str) -> str:
        """Render pending answers for the AI prompt. Leaves the queue untouched."""
        completions = self._pending_completions.get(conversation_id, [])
        if not completions:
            return ""

        updates = ", ".join(
            f"Task {c.task_id}: {'completed' if c.completed else 'not completed'}"
            for c in completions
        )
        return (
            f"[{CONTEXT_TAG}] User has provided the following task completion "
            f"updates: {updates}. Use this information to update your "
            f"understanding of the player's progress and avoid suggesting "
            f"already completed tasks."
        )

    def consume_completion_context(self, conversation_id: str) -> str:
        """Format pending answers, then clear them."""
        context = self.format_completion_context(conversation_id)
        self.clear_pending_completions(conversation_id)
        return context

    # --- Housekeeping ---

    def forget_conversation(self, conversation_id: str) -> None:
        """Drop all state for an abandoned conversation."""
        self.reset_response_counter(conversation_id)
        self.clear_pending_completions(conversation_id)

    def active_conversations(self) -> List[str]:
        """Conversation ids that currently hold a counter or pending answers."""
        ids = set(self._response_counters) | set(self._pending_completions)
        return sorted(ids)
