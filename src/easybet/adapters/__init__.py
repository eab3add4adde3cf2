"""In-memory reference implementations of the external collaborators."""

from easybet.adapters.clock import ManualClock, SystemClock
from easybet.adapters.registry import InMemoryTicketRegistry
from easybet.adapters.token import InMemoryToken

__all__ = ["InMemoryToken", "InMemoryTicketRegistry", "ManualClock", "SystemClock"]
