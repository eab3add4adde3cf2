from easybet.activity.registry import ActivityRegistry

__all__ = ["ActivityRegistry"]
