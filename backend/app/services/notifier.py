"""Change notification: one event per successful mutation, fanned out per owner."""

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"
ACTION_REORDERED = "reordered"

ENTITY_TODO = "todo"
ENTITY_CATEGORY = "category"


@dataclass(frozen=True)
class ChangeEvent:
    action: str
    owner_id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    entity: str = ENTITY_TODO

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Publisher(Protocol):
    """Delivers an event to every live session of one owner."""

    def publish(self, owner_id: str, event: Dict[str, Any]) -> None:
        ...


class ChangeNotifier:
    """
    Best-effort wrapper around an optional Publisher.

    Without a publisher every call is a no-op. Publisher failures are logged
    and never propagate, so a committed mutation is never reported as failed.
    """

    def __init__(self, publisher: Optional[Publisher] = None):
        self.publisher = publisher

    def notify(self, event: ChangeEvent) -> None:
        if self.publisher is None:
            return
        try:
            self.publisher.publish(event.owner_id, event.to_dict())
        except Exception as e:
            logger.warning(
                f"Failed to publish {event.entity} {event.action} for owner {event.owner_id}: {e}"
            )

    def emit(self, action: str, owner_id: str, payload: Dict[str, Any], entity: str = ENTITY_TODO) -> None:
        self.notify(ChangeEvent(action=action, owner_id=owner_id, payload=payload, entity=entity))
