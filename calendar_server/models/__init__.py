# Domain models package
from calendar_server.models.event import Event

__all__ = ["Event"]
