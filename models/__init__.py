"""Models exposed by the Taskrank application."""
from .card import ExternalCard
from .task import Task

__all__ = ["ExternalCard", "Task"]
