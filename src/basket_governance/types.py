from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

JsonDict = dict[str, Any]


class CommandStatus(StrEnum):
    """Outcome of a CLI command.

    PENDING means the proposal still needs votes, a queue or a delay before
    anything takes effect; EXECUTED means state changed; OK is a pure read.
    """

    PENDING = "pending"
    EXECUTED = "executed"
    OK = "ok"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class CommandResult:
    command: str
    status: CommandStatus
    details: JsonDict = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.status is CommandStatus.FAILED

    def to_dict(self) -> JsonDict:
        return {
            "command": self.command,
            "status": self.status.value,
            "details": self.details,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    def to_text(self) -> str:
        header = f"{self.command}: {self.status.value}"
        if not self.details:
            return header
        return header + "\n" + json.dumps(self.details, indent=2, sort_keys=True)
