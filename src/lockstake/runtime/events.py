from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

Json = Dict[str, Any]

# Notification names
CAP_CHANGE = "CapChange"
PAUSED = "Paused"
UNPAUSED = "Unpaused"
REWARD_ADDED = "RewardAdded"
STAKED = "Staked"
WITHDRAWN = "Withdrawn"
REWARD_PAID = "RewardPaid"
OWNERSHIP_TRANSFERRED = "OwnershipTransferred"


@dataclass(frozen=True, slots=True)
class Event:
    name: str
    args: Json
    ts: int
    seq: int = 0

    def to_json(self) -> Json:
        return {"seq": int(self.seq), "name": self.name, "args": dict(self.args), "ts": int(self.ts)}


@dataclass
class EventLog:
    """Append-only record of committed notifications.

    Events raised inside a failed operation never reach the log.
    """

    events: List[Event] = field(default_factory=list)

    def extend(self, pending: List[Event]) -> List[Event]:
        """Commit `pending` in order; returns the committed copies with their seq."""
        base = len(self.events)
        committed = [
            Event(name=ev.name, args=ev.args, ts=ev.ts, seq=base + i + 1) for i, ev in enumerate(pending)
        ]
        self.events.extend(committed)
        return committed

    def since(self, seq: int = 0, name: Optional[str] = None) -> List[Event]:
        out = [e for e in self.events if e.seq > int(seq)]
        if name:
            out = [e for e in out if e.name == name]
        return out

    def last(self, name: Optional[str] = None) -> Optional[Event]:
        for e in reversed(self.events):
            if name is None or e.name == name:
                return e
        return None
