"""Narrative log entries and the action result envelope."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Tuple, Union
from uuid import uuid4

from wilds.core.types import LogEntryType

if TYPE_CHECKING:
    from wilds.domain.state import WorldState

MetadataValue = Union[str, int, bool]


def make_log_id() -> str:
    """Return a unique identifier for a log entry."""
    return f"log_{uuid4().hex[:12]}"


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A single entry in the game log."""

    id: str
    type: LogEntryType
    text: str
    timestamp: int
    metadata: Dict[str, MetadataValue] = field(default_factory=dict)


def make_log_entry(entry_type: LogEntryType, text: str, **metadata: MetadataValue) -> LogEntry:
    return LogEntry(
        id=make_log_id(),
        type=entry_type,
        text=text,
        timestamp=int(time.time() * 1000),
        metadata=dict(metadata),
    )


@dataclass(frozen=True, slots=True)
class ActionResult:
    """What every player-facing operation returns.

    The caller folds ``log_entries`` into the state's log (see
    ``WorldState.append_log``) and keeps the new state as current.
    """

    state: WorldState
    log_entries: Tuple[LogEntry, ...] = ()

    @property
    def texts(self) -> List[str]:
        return [entry.text for entry in self.log_entries]

    def folded(self) -> WorldState:
        """Return the new state with this result's entries appended to its log."""
        return self.state.append_log(self.log_entries)
