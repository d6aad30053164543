"""DTOs for the audit trail."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from firmspace.domain.enums import Operation


@dataclass(frozen=True)
class AuditRecord:
    """Who did what, when: one record per successful mutation.

    keys holds the mutation's logical key fields (ids and the values written).
    """

    action: Operation
    actor_id: str | None
    at: datetime
    keys: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "by": self.actor_id,
            "at": self.at.isoformat(),
            **self.keys,
        }
