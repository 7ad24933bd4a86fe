"""
Validation strategy selection.

A strategy is anything with a `classify(email) -> Verdict` method and a
`name`. The kind is chosen once per run from configuration.
"""

from enum import Enum
from typing import Optional, Protocol
import logging
import os

from .errors import ConfigurationError
from .models import Verdict
from .proxy_manager import ProxyManager
from .remote_checker import RemoteDeliverabilityChecker
from .syntax_validator import BasicSyntaxStrategy, StrictSyntaxStrategy

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_ENV = "MAILSIFT_API_KEY"


class ValidationStrategy(Protocol):
    name: str

    def classify(self, email: str) -> Verdict:
        ...


class StrategyKind(Enum):
    BASIC = "basic"
    STRICT = "strict"
    REMOTE = "remote"

    @classmethod
    def parse(cls, value) -> "StrategyKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise ConfigurationError(f"Unknown validation strategy '{value}' (expected one of: {choices})")


def resolve_api_key(remote_config: dict) -> Optional[str]:
    """
    Look up the remote credential in the environment.

    Args:
        remote_config: `remote` section of the configuration

    Returns:
        The credential, or None when the variable is unset or blank
    """
    env_name = remote_config.get('api_key_env', DEFAULT_API_KEY_ENV)
    api_key = os.environ.get(env_name, "").strip()
    if not api_key:
        logger.debug(f"Environment variable {env_name} is not set")
        return None
    return api_key


def build_strategy(kind, remote_config: Optional[dict] = None, api_key: Optional[str] = None) -> ValidationStrategy:
    """
    Build the validation strategy for one run.

    Args:
        kind: StrategyKind or its name ('basic', 'strict', 'remote')
        remote_config: `remote` section of the configuration (remote strategy only)
        api_key: Explicit credential; looked up in the environment when omitted

    Returns:
        Strategy instance

    Raises:
        ConfigurationError: for an unknown kind or a remote strategy without credential
    """
    kind = StrategyKind.parse(kind)

    if kind is StrategyKind.BASIC:
        strategy = BasicSyntaxStrategy()
    elif kind is StrategyKind.STRICT:
        strategy = StrictSyntaxStrategy()
    else:
        remote_config = remote_config or {}
        if api_key is None:
            api_key = resolve_api_key(remote_config)
        if not api_key:
            env_name = remote_config.get('api_key_env', DEFAULT_API_KEY_ENV)
            raise ConfigurationError(f"Remote strategy requires an API key (set {env_name})")

        proxy_manager = None
        proxy_file = remote_config.get('proxy_list')
        if proxy_file:
            proxy_manager = ProxyManager(proxy_file, rate_limit_seconds=remote_config.get('proxy_rate_limit', 1.0))
            if not proxy_manager.is_enabled():
                logger.warning("Proxy list configured but no valid proxies loaded. Continuing without proxy.")
                proxy_manager = None

        strategy = RemoteDeliverabilityChecker(
            api_key=api_key,
            endpoint=remote_config.get('endpoint', RemoteDeliverabilityChecker.DEFAULT_ENDPOINT),
            timeout=remote_config.get('timeout', 10),
            max_retries=remote_config.get('max_retries', 3),
            retry_delay=remote_config.get('retry_delay', 1.0),
            rate_limit_delay=remote_config.get('rate_limit_delay', 0.0),
            proxy_manager=proxy_manager
        )

    logger.info(f"Validation strategy: {strategy.name}")
    return strategy
