"""
Data models shared by the sifting pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Verdict(Enum):
    VALID = "valid"
    INVALID = "invalid"

    @classmethod
    def from_bool(cls, is_valid: bool) -> "Verdict":
        return cls.VALID if is_valid else cls.INVALID


@dataclass
class ValidationResult:
    """
    Ordered partition of one run's addresses.

    Each extracted address appears exactly once, in `valid` or `invalid`,
    and both lists keep the original input order.
    """
    valid: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.invalid)

    @property
    def valid_count(self) -> int:
        return len(self.valid)

    @property
    def invalid_count(self) -> int:
        return len(self.invalid)


@dataclass
class RemoteCheckOutcome:
    is_valid_format: bool
    is_mx_found: bool
    is_smtp_valid: bool
    deliverability: str  # DELIVERABLE, UNDELIVERABLE, RISKY, UNKNOWN

    def verdict(self) -> Verdict:
        return Verdict.from_bool(
            self.is_valid_format
            and self.is_mx_found
            and self.is_smtp_valid
            and self.deliverability != "UNDELIVERABLE"
        )


@dataclass
class ProgressEvent:
    percent: int  # 0..100, reaches 100 only after the last batch
    processed: int
    total: int
    batch_index: int
    valid_count: int
    invalid_count: int

    @property
    def done(self) -> bool:
        return self.processed >= self.total


@dataclass
class RunSummary:
    strategy: str
    total: int
    valid_count: int
    invalid_count: int
    elapsed_seconds: float
    transport_failures: int = 0
    input_name: Optional[str] = None

    @property
    def speed(self) -> float:
        return self.total / self.elapsed_seconds if self.elapsed_seconds > 0 else 0.0
