"""Completion Kernel data models."""

from completion_kernel.models.config import PromptingConfig
from completion_kernel.models.prompting import (
    CompletionPrompt,
    CompletionResponse,
    PromptRequest,
)
from completion_kernel.models.task import Task, TaskCategory, TaskStatus, UserTier

__all__ = [
    "CompletionPrompt",
    "CompletionResponse",
    "PromptRequest",
    "PromptingConfig",
    "Task",
    "TaskCategory",
    "TaskStatus",
    "UserTier",
]
