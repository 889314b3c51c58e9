"""
dependencies/invalidation.py - Value change audit trail

Records each value change together with the descendant fields it reset,
so a host can inspect how the cascade reached its current state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging
import uuid

from ..core.constants import DEFAULT_HISTORY_SIZE

logger = logging.getLogger("cascade.invalidation")


def _jsonable(value: Any) -> Any:
    if isinstance(value, frozenset):
        return sorted(value, key=str)
    return value


# =============================================================================
# VALUE CHANGE EVENT
# =============================================================================

@dataclass
class ValueChangeEvent:
    """One set_value call and the downstream fields it cleared."""
    event_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    field_index: int = 0
    old_value: Any = None
    new_value: Any = None

    # Every descendant index reset by this change
    reset_fields: List[int] = field(default_factory=list)
    # Descendant values that were non-empty before the reset
    cleared_values: Dict[int, Any] = field(default_factory=dict)

    generation: int = 0

    @property
    def cleared_count(self) -> int:
        return len(self.cleared_values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "field_index": self.field_index,
            "old_value": _jsonable(self.old_value),
            "new_value": _jsonable(self.new_value),
            "reset_fields": list(self.reset_fields),
            "cleared_values": {str(k): _jsonable(v) for k, v in self.cleared_values.items()},
            "generation": self.generation,
        }


# =============================================================================
# CHANGE LOG
# =============================================================================

class ChangeLog:
    """Bounded history of ValueChangeEvents, oldest dropped first."""

    def __init__(self, max_events: int = DEFAULT_HISTORY_SIZE):
        self._events: List[ValueChangeEvent] = []
        self._max_events = max_events

    def record(self, event: ValueChangeEvent) -> None:
        self._events.append(event)

        # Trim old events
        if self._max_events <= 0:
            self._events.clear()
        elif len(self._events) > self._max_events:
            self._events = self._events[-self._max_events:]

        if event.cleared_values:
            logger.debug(
                f"Field {event.field_index} change cleared "
                f"{event.cleared_count} downstream values"
            )

    def get_events(
        self,
        since: Optional[datetime] = None,
        field_index: Optional[int] = None,
        limit: int = 100,
    ) -> List[ValueChangeEvent]:
        """Get recorded events, optionally filtered by time or field."""
        events = self._events
        if since:
            events = [e for e in events if e.timestamp >= since]
        if field_index is not None:
            events = [e for e in events if e.field_index == field_index]
        if limit <= 0:
            return []
        return events[-limit:]

    def latest(self) -> Optional[ValueChangeEvent]:
        return self._events[-1] if self._events else None

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_events": self._max_events,
            "events": [e.to_dict() for e in self._events],
        }
