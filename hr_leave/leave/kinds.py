"""Leave type as a tagged variant: Annual | Personal | Sick | Menstrual | Other(label).

Only the annual kind interacts with the balance ledger; the rest are
informational. Legacy records store the display string ("特休", "其他: 婚假");
``LeaveType.parse`` maps those back onto the variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hr_leave.common.constants import LEAVE_KIND_NAMES, OTHER_LEAVE_PREFIX, LeaveKind

_KIND_BY_NAME = {name: kind for kind, name in LEAVE_KIND_NAMES.items()}


@dataclass(frozen=True)
class LeaveType:
    kind: LeaveKind
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind == LeaveKind.other:
            if not self.label or not self.label.strip():
                raise ValueError("An 'other' leave type needs a label.")
        elif self.label is not None:
            raise ValueError(f"Leave type '{self.kind.value}' does not take a label.")

    @property
    def is_annual(self) -> bool:
        return self.kind == LeaveKind.annual

    @property
    def display_name(self) -> str:
        if self.kind == LeaveKind.other:
            return f"{OTHER_LEAVE_PREFIX} {self.label.strip()}"
        return LEAVE_KIND_NAMES[self.kind]

    @classmethod
    def parse(cls, text: str) -> "LeaveType":
        """Parse a stored display string or an enum value."""
        text = text.strip()
        if text.startswith(OTHER_LEAVE_PREFIX):
            return cls(LeaveKind.other, text[len(OTHER_LEAVE_PREFIX):].strip())
        if text in _KIND_BY_NAME:
            return cls(_KIND_BY_NAME[text])
        try:
            return cls(LeaveKind(text))
        except ValueError:
            raise ValueError(f"Unknown leave type '{text}'.") from None

    def __str__(self) -> str:
        return self.display_name
