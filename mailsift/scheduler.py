"""
Batch scheduler: drives addresses through a validation strategy in
fixed-size batches, throttles, and publishes progress after each batch.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional
import logging
import threading
import time

from .errors import ConfigurationError, RunCancelledError
from .models import ProgressEvent, Verdict

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


class BatchOutcome(NamedTuple):
    addresses: List[str]
    verdicts: List[Verdict]
    progress: ProgressEvent


def progress_percent(processed: int, total: int) -> int:
    """Percentage of processed addresses, rounded half up."""
    if total <= 0:
        return 100
    return (processed * 200 + total) // (2 * total)


class BatchScheduler:
    """
    Sequential batch driver with an explicit throttle policy.

    Within a batch, addresses are classified in input order. With
    max_workers > 1 each batch is spread over a thread pool (only for
    reentrant strategies); verdicts are still collected in input order.
    The scheduler yields control after every batch, which is where
    progress is published and the abort signal is checked.
    """

    def __init__(
        self,
        strategy,
        batch_size: int = 10,
        address_delay: float = 0.0,
        batch_delay: float = 0.0,
        max_workers: int = 1,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize batch scheduler.

        Args:
            strategy: Validation strategy with a classify(email) method
            batch_size: Number of addresses per batch
            address_delay: Pause after each classification in seconds
            batch_delay: Pause after each batch in seconds
            max_workers: Worker threads per batch (1 = strictly sequential)
            sleep: Sleep function used for throttling
        """
        if batch_size < 1:
            raise ConfigurationError(f"batch_size must be at least 1 (got {batch_size})")
        if address_delay < 0 or batch_delay < 0:
            raise ConfigurationError("Throttle delays cannot be negative")
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1 (got {max_workers})")

        self.strategy = strategy
        self.batch_size = batch_size
        self.address_delay = address_delay
        self.batch_delay = batch_delay
        self.max_workers = max_workers
        self.sleep = sleep

        logger.info(
            f"BatchScheduler initialized: batch size {batch_size}, address delay {address_delay}s, "
            f"batch delay {batch_delay}s, workers {max_workers}"
        )

    def iter_batches(self, addresses: Iterable[str]) -> Iterator[List[str]]:
        """
        Split addresses into contiguous batches of batch_size.
        The last batch may be shorter.
        """
        batch: List[str] = []
        for address in addresses:
            batch.append(address)
            if len(batch) == self.batch_size:
                yield batch
                batch = []
        if batch:
            yield batch

    def _classify_one(self, address: str) -> Verdict:
        verdict = self.strategy.classify(address)
        if self.address_delay:
            self.sleep(self.address_delay)
        return verdict

    def _classify_batch(self, batch: List[str], executor: Optional[ThreadPoolExecutor]) -> List[Verdict]:
        if executor is None:
            return [self._classify_one(address) for address in batch]
        # map() returns results in submission order
        return list(executor.map(self._classify_one, batch))

    def run(
        self,
        addresses: Iterable[str],
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> Iterator[BatchOutcome]:
        """
        Classify all addresses batch by batch.

        Args:
            addresses: Sized, restartable sequence of addresses
            on_progress: Called with a ProgressEvent after every batch
            cancel_event: Abort signal checked before each batch

        Yields:
            BatchOutcome(addresses, verdicts, progress) per batch

        Raises:
            RunCancelledError: if cancel_event is set at a batch boundary
        """
        total = len(addresses)
        processed = 0
        valid_count = 0
        invalid_count = 0
        last_percent = 0

        executor = None
        if self.max_workers > 1:
            executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="mailsift")

        try:
            for batch_index, batch in enumerate(self.iter_batches(addresses)):
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f"Run cancelled after {processed}/{total} addresses")
                    raise RunCancelledError(f"Run cancelled after {processed} of {total} addresses")

                verdicts = self._classify_batch(batch, executor)

                processed += len(batch)
                batch_valid = sum(1 for verdict in verdicts if verdict is Verdict.VALID)
                valid_count += batch_valid
                invalid_count += len(verdicts) - batch_valid

                if self.batch_delay:
                    self.sleep(self.batch_delay)

                percent = progress_percent(processed, total)
                if processed < total:
                    percent = min(percent, 99)
                percent = max(percent, last_percent)
                last_percent = percent

                event = ProgressEvent(
                    percent=percent,
                    processed=processed,
                    total=total,
                    batch_index=batch_index,
                    valid_count=valid_count,
                    invalid_count=invalid_count
                )
                logger.debug(f"Batch {batch_index + 1}: {processed}/{total} processed ({percent}%)")

                if on_progress is not None:
                    on_progress(event)

                yield BatchOutcome(batch, verdicts, event)
        finally:
            if executor is not None:
                executor.shutdown(wait=True)
