"""
FosterNarrator - Message composer for foster lifecycle events

Produces the default chat text sent after a transition. An explicit,
non-blank message from the caller always wins over the default.
"""

from typing import Optional


class FosterNarrator:

    @staticmethod
    def choose(custom: Optional[str], default: str) -> str:
        """Trimmed custom text when it has content, else the default"""
        if custom is not None and custom.strip():
            return custom.strip()
        return default

    @staticmethod
    def assigned(foster_name: str, entity_name: str) -> str:
        return f"Hi {foster_name}, {entity_name} has been assigned to you."

    @staticmethod
    def unassigned(foster_name: str, entity_name: str) -> str:
        return f"Hi {foster_name}, {entity_name} is no longer assigned to you."

    @staticmethod
    def request_created(entity_name: str) -> str:
        return f"Hi, I'm interested in fostering {entity_name}."

    @staticmethod
    def request_cancelled(entity_name: str) -> str:
        return f"I have cancelled my request to foster {entity_name}."
