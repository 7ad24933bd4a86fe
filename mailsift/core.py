"""
Core sifting service: wires extraction, scheduling and aggregation into one run.
"""

from typing import Optional
import logging
import os
import threading
import time

from .aggregator import ResultAggregator
from .errors import ConfigurationError, RunCancelledError
from .extractor import extract_addresses, read_upload
from .models import RunSummary, ValidationResult
from .scheduler import BatchScheduler, ProgressCallback
from .strategies import build_strategy

logger = logging.getLogger(__name__)


class EmailSiftService:
    """
    Runs one email list through the sifting pipeline.

    Run Flow:
    Text → Extract addresses → Batch scheduler (strategy.classify per address) → Aggregate → ValidationResult

    Run-level failures (empty input, bad configuration, cancellation) raise.
    Per-address failures are absorbed by the strategy and end up as invalid.
    """

    def __init__(self, strategy, scheduler: Optional[BatchScheduler] = None):
        """
        Initialize sifting service.

        Args:
            strategy: Validation strategy with a classify(email) method
            scheduler: BatchScheduler to drive the run (default: sequential, batches of 10, no delay)
        """
        self.strategy = strategy
        self.scheduler = scheduler or BatchScheduler(strategy)
        self.last_summary: Optional[RunSummary] = None

        logger.info(f"EmailSiftService initialized with {strategy.name} strategy")

    @classmethod
    def from_config(cls, config: dict, api_key: Optional[str] = None) -> "EmailSiftService":
        """
        Build a service from the settings dictionary.

        Args:
            config: Configuration dictionary (sections: strategy, batch, remote)
            api_key: Explicit remote credential; looked up in the environment when omitted

        Returns:
            Configured EmailSiftService

        Raises:
            ConfigurationError: if the configuration is invalid or incomplete
        """
        if not isinstance(config, dict):
            raise ConfigurationError("Configuration must be a mapping")

        batch_config = config.get('batch') or {}
        remote_config = config.get('remote') or {}

        strategy = build_strategy(config.get('strategy', 'basic'), remote_config=remote_config, api_key=api_key)

        try:
            scheduler = BatchScheduler(
                strategy,
                batch_size=int(batch_config.get('size', 10)),
                address_delay=float(batch_config.get('address_delay', 0.0)),
                batch_delay=float(batch_config.get('batch_delay', 0.0)),
                max_workers=int(batch_config.get('max_workers', 1))
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid batch settings: {e}")

        return cls(strategy, scheduler)

    def sift_text(
        self,
        text: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
        input_name: Optional[str] = None
    ) -> ValidationResult:
        """
        Classify every address in the given text.

        Args:
            text: Raw file content, one address per line
            on_progress: Called with a ProgressEvent after every batch
            cancel_event: Abort signal checked at batch boundaries
            input_name: Label for the run summary

        Returns:
            ValidationResult with valid and invalid addresses in input order

        Raises:
            EmptyInputError: if the text holds no addresses
            RunCancelledError: if cancel_event was set during the run
        """
        addresses = extract_addresses(text)
        failures_before = self._transport_failures()

        aggregator = ResultAggregator()
        start_time = time.time()

        try:
            for outcome in self.scheduler.run(addresses, on_progress=on_progress, cancel_event=cancel_event):
                aggregator.add_batch(outcome.addresses, outcome.verdicts)
        except RunCancelledError:
            logger.warning(f"Discarding partial result ({len(aggregator)} of {len(addresses)} addresses)")
            raise

        result = aggregator.result()
        elapsed = time.time() - start_time

        self.last_summary = RunSummary(
            strategy=self.strategy.name,
            total=result.total,
            valid_count=result.valid_count,
            invalid_count=result.invalid_count,
            elapsed_seconds=elapsed,
            transport_failures=self._transport_failures() - failures_before,
            input_name=input_name
        )

        logger.info(
            f"Run completed: Total={result.total}, Valid={result.valid_count}, "
            f"Invalid={result.invalid_count}, Time={elapsed:.2f}s"
        )
        if self.last_summary.transport_failures:
            logger.warning(f"Remote transport failures: {self.last_summary.transport_failures}")

        return result

    def sift_file(
        self,
        path: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
        encoding: str = "utf-8"
    ) -> ValidationResult:
        """
        Read an uploaded text file and classify its addresses.

        Raises:
            UnsupportedFileError: if the file is not plain text
            EmptyInputError: if the file holds no addresses
            RunCancelledError: if cancel_event was set during the run
        """
        text = read_upload(path, encoding=encoding)
        return self.sift_text(
            text,
            on_progress=on_progress,
            cancel_event=cancel_event,
            input_name=os.path.basename(path)
        )

    def _transport_failures(self) -> int:
        return getattr(self.strategy, 'failure_count', 0)

    def get_service_config(self) -> dict:
        """
        Get current service configuration.

        Returns:
            Dictionary with configuration details
        """
        return {
            'strategy': self.strategy.name,
            'batch_size': self.scheduler.batch_size,
            'address_delay': self.scheduler.address_delay,
            'batch_delay': self.scheduler.batch_delay,
            'max_workers': self.scheduler.max_workers
        }
