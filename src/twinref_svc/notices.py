"""Notices - non-fatal, user-facing messages about partial failures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class NoticeSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    """A severity-tagged message for one failed resolution step."""
    severity: NoticeSeverity
    text: str

    # Position of the input batch this notice is about, if any
    batch_index: int | None = None

    @classmethod
    def warning(cls, text: str, batch_index: int | None = None) -> Notice:
        return cls(NoticeSeverity.WARNING, text, batch_index)

    @classmethod
    def info(cls, text: str, batch_index: int | None = None) -> Notice:
        return cls(NoticeSeverity.INFO, text, batch_index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "text": self.text,
            "batch_index": self.batch_index,
        }
