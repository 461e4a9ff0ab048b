from __future__ import annotations

from dataclasses import dataclass, field


# Metadata keys carried on an LRP and round-tripped through Deployment annotations.
PROCESS_GUID = "process_guid"
LAST_UPDATED = "last_updated"
APPLICATION_URIS = "application_uris"

RUNNING_STATE = "RUNNING"


@dataclass
class LRP:
    """Desired long-running process.

    Built per request (converter output or a listed Deployment); never stored.
    """

    name: str
    image: str = ""
    command: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    target_instances: int = 0
    running_instances: int = 0  # observed; filled in by the orchestrator side
    metadata: dict[str, str] = field(default_factory=dict)

    def meta(self, key: str) -> str:
        """Metadata value, or "" when the key is missing."""
        return self.metadata.get(key) or ""
