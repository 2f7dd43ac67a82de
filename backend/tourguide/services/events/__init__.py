"""Observer event bus."""

from .service import EventBus, Observer

__all__ = ["EventBus", "Observer"]
