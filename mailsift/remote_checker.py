"""
Remote deliverability strategy using an email validation HTTP API.

One GET request per address with `api_key` and `email` query parameters.
Transport failures and malformed responses classify the address as invalid
and are counted; they never abort a run.
"""

import requests
from typing import Any, Dict, Optional, TYPE_CHECKING
import time
import logging
import threading

from .errors import ConfigurationError, RemoteTransportError
from .models import RemoteCheckOutcome, Verdict

if TYPE_CHECKING:
    from .proxy_manager import ProxyManager

logger = logging.getLogger(__name__)

OUTCOME_FLAGS = ('is_valid_format', 'is_mx_found', 'is_smtp_valid')


class RemoteDeliverabilityChecker:
    """
    Deliverability strategy backed by a third-party validation endpoint.

    Valid iff the format is valid, MX records exist, the SMTP check passed
    and deliverability is not UNDELIVERABLE. Includes retry logic for
    temporary failures, a minimum interval between requests and optional
    proxy rotation.
    """

    name = "remote"

    DEFAULT_ENDPOINT = "https://emailvalidation.abstractapi.com/v1/"

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        rate_limit_delay: float = 0.0,
        proxy_manager: Optional['ProxyManager'] = None
    ):
        """
        Initialize remote checker.

        Args:
            api_key: Credential sent as the `api_key` query parameter
            endpoint: Validation endpoint URL
            timeout: Request timeout in seconds
            max_retries: Maximum attempts per address for temporary failures
            retry_delay: Delay between retries in seconds
            rate_limit_delay: Minimum delay between API requests (admission policy)
            proxy_manager: Optional ProxyManager instance for proxy rotation

        Raises:
            ConfigurationError: if no credential is configured
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("Remote strategy selected but no API key is configured")
        if max_retries < 1:
            raise ConfigurationError("remote.max_retries must be at least 1")

        self.api_key = api_key.strip()
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.rate_limit_delay = rate_limit_delay
        self.proxy_manager = proxy_manager
        self.last_request_time = 0.0
        self._rate_limit_lock = threading.Lock()

        self._stats_lock = threading.Lock()
        self._requests = 0
        self._failures = 0
        self._valid = 0
        self._invalid = 0

        logger.info(f"RemoteDeliverabilityChecker initialized: {endpoint} (timeout {timeout}s)")
        if proxy_manager and proxy_manager.is_enabled():
            logger.info(f"Proxy rotation enabled with {proxy_manager.get_proxy_count()} proxies")

    def classify(self, email: str) -> Verdict:
        """
        Classify one address. Never raises for per-address failures.

        Args:
            email: Address to check

        Returns:
            Verdict.VALID or Verdict.INVALID
        """
        try:
            outcome = self.lookup(email)
        except RemoteTransportError as e:
            logger.warning(f"Remote check failed, classifying as invalid: {e}")
            with self._stats_lock:
                self._failures += 1
                self._invalid += 1
            return Verdict.INVALID

        verdict = outcome.verdict()
        logger.debug(f"Remote check {verdict.value.upper()}: {email} - {outcome}")
        with self._stats_lock:
            if verdict is Verdict.VALID:
                self._valid += 1
            else:
                self._invalid += 1
        return verdict

    def lookup(self, email: str) -> RemoteCheckOutcome:
        """
        Query the endpoint for one address, retrying temporary failures.

        Args:
            email: Address to check

        Returns:
            Parsed RemoteCheckOutcome

        Raises:
            RemoteTransportError: on timeout, connection error, bad status or malformed body
        """
        last_error = RemoteTransportError(email, "No attempt made")

        for attempt in range(self.max_retries):
            try:
                return self._lookup_once(email)
            except RemoteTransportError as e:
                last_error = e
                if not e.temporary or attempt >= self.max_retries - 1:
                    raise
                wait_time = self.retry_delay
                if e.status_code == 429:
                    wait_time = self.retry_delay * (2 ** attempt)
                logger.debug(f"Retrying {email} in {wait_time}s (attempt {attempt + 1}/{self.max_retries}): {e.reason}")
                time.sleep(wait_time)

        raise last_error

    def _lookup_once(self, email: str) -> RemoteCheckOutcome:
        self._apply_rate_limit()

        proxy = None
        if self.proxy_manager and self.proxy_manager.is_enabled():
            proxy = self.proxy_manager.get_next_proxy()

        with self._stats_lock:
            self._requests += 1

        try:
            response = requests.get(
                self.endpoint,
                params={'api_key': self.api_key, 'email': email},
                timeout=self.timeout,
                proxies=proxy,
                headers={'Accept': 'application/json'}
            )
        except requests.exceptions.Timeout:
            raise RemoteTransportError(email, "Request timeout", temporary=True)
        except requests.exceptions.ProxyError as e:
            raise RemoteTransportError(email, f"Proxy error: {e}")
        except requests.exceptions.ConnectionError as e:
            raise RemoteTransportError(email, f"Connection error: {e}", temporary=True)
        except requests.exceptions.RequestException as e:
            raise RemoteTransportError(email, f"Request error: {e}")

        if response.status_code == 429:
            raise RemoteTransportError(email, "API rate limit exceeded (HTTP 429)", temporary=True, status_code=429)
        if response.status_code >= 500:
            raise RemoteTransportError(email, f"API server error (HTTP {response.status_code})", temporary=True,
                                       status_code=response.status_code)
        if response.status_code != 200:
            raise RemoteTransportError(email, f"API error (HTTP {response.status_code})",
                                       status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteTransportError(email, f"Invalid JSON response: {e}")

        return self._parse_outcome(email, data)

    def _parse_outcome(self, email: str, data: Any) -> RemoteCheckOutcome:
        """
        Parse API response into a RemoteCheckOutcome.

        Flag fields may be plain booleans or objects of the form
        {"value": bool, "text": "TRUE"}.

        Raises:
            RemoteTransportError: if the response does not have the expected shape
        """
        if not isinstance(data, dict):
            raise RemoteTransportError(email, f"Malformed response (expected object, got {type(data).__name__})")

        flags: Dict[str, bool] = {}
        for key in OUTCOME_FLAGS:
            value = data.get(key)
            if isinstance(value, dict):
                value = value.get('value')
            if not isinstance(value, bool):
                raise RemoteTransportError(email, f"Malformed response (field '{key}' missing or not boolean)")
            flags[key] = value

        deliverability = data.get('deliverability')
        if not isinstance(deliverability, str):
            raise RemoteTransportError(email, "Malformed response (field 'deliverability' missing)")

        return RemoteCheckOutcome(deliverability=deliverability.strip().upper(), **flags)

    def _apply_rate_limit(self):
        """Apply rate limiting to stay under the provider's request limit. Thread-safe."""
        if self.rate_limit_delay <= 0:
            return

        with self._rate_limit_lock:
            current_time = time.time()
            time_since_last = current_time - self.last_request_time

            if time_since_last < self.rate_limit_delay:
                sleep_time = self.rate_limit_delay - time_since_last
                time.sleep(sleep_time)

            self.last_request_time = time.time()

    @property
    def failure_count(self) -> int:
        with self._stats_lock:
            return self._failures

    def get_stats(self) -> dict:
        """
        Get lookup statistics.

        Returns:
            Dictionary with requests, failures, valid and invalid counts
        """
        with self._stats_lock:
            return {
                'requests': self._requests,
                'failures': self._failures,
                'valid': self._valid,
                'invalid': self._invalid
            }
