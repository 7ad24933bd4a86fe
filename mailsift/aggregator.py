"""
Result aggregation: ordered valid/invalid partition of a run.
"""

from typing import Iterable
import logging

from .models import ValidationResult, Verdict

logger = logging.getLogger(__name__)


class ResultAggregator:
    """
    Appends each address to `valid` or `invalid` by verdict.
    Keeps input order within each list; no deduplication, no sorting.
    """

    def __init__(self):
        self.valid = []
        self.invalid = []

    def add(self, address: str, verdict: Verdict):
        if verdict is Verdict.VALID:
            self.valid.append(address)
        else:
            self.invalid.append(address)

    def add_batch(self, addresses: Iterable[str], verdicts: Iterable[Verdict]):
        addresses = list(addresses)
        verdicts = list(verdicts)
        if len(addresses) != len(verdicts):
            raise ValueError(f"Got {len(verdicts)} verdicts for {len(addresses)} addresses")
        for address, verdict in zip(addresses, verdicts):
            self.add(address, verdict)

    def result(self) -> ValidationResult:
        """Snapshot of the current partition (independent copies of both lists)."""
        return ValidationResult(valid=list(self.valid), invalid=list(self.invalid))

    def __len__(self) -> int:
        return len(self.valid) + len(self.invalid)
