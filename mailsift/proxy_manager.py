"""
Proxy rotation for remote deliverability lookups.
Loads proxies from a list file and hands out requests-style proxy mappings
in round-robin order, with a minimum interval between uses of each proxy.
SOCKS5 proxies need the PySocks extra of requests.
"""

import logging
import time
from typing import Optional, Dict, List, Any
from threading import Lock

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ('http', 'https', 'socks5', 'socks5h')


class ProxyManager:
    """
    Manages a list of proxies loaded from a file.
    Supports rotation, authentication and per-proxy rate limiting.
    """

    def __init__(self, proxy_file: str, rate_limit_seconds: float = 1.0, default_scheme: str = 'socks5h'):
        """
        Initialize proxy manager.

        Args:
            proxy_file: Path to file containing proxy list
            rate_limit_seconds: Minimum seconds between requests per proxy
            default_scheme: Scheme used for entries written as host:port[:user:password]
        """
        self.proxy_file = proxy_file
        self.rate_limit_seconds = rate_limit_seconds
        self.default_scheme = default_scheme
        self.proxies: List[Dict[str, Any]] = []
        self.current_index = 0
        self.lock = Lock()

        self._load_proxies()

    def _load_proxies(self):
        """Load proxies from file, skipping blank lines and # comments."""
        try:
            with open(self.proxy_file, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except FileNotFoundError:
            logger.warning(f"Proxy file not found: {self.proxy_file}")
            return

        for line_num, line in enumerate(lines, 1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            proxy = self._parse_proxy(line)
            if proxy:
                self.proxies.append(proxy)
            else:
                logger.warning(f"Invalid proxy format at line {line_num}: {line}")

        if self.proxies:
            logger.info(f"Loaded {len(self.proxies)} proxies from {self.proxy_file}")
        else:
            logger.warning(f"No valid proxies found in {self.proxy_file}")

    def _parse_proxy(self, proxy_str: str) -> Optional[Dict[str, Any]]:
        """
        Parse one proxy entry.

        Supported formats:
        - host:port
        - host:port:user:password
        - scheme://[user:password@]host:port

        Returns:
            Dictionary with url and last_used timestamp, or None if malformed
        """
        if '://' in proxy_str:
            scheme, rest = proxy_str.split('://', 1)
            if scheme.lower() not in SUPPORTED_SCHEMES:
                return None
            hostport = rest.rsplit('@', 1)[-1]
            if ':' not in hostport or not hostport.rsplit(':', 1)[1].isdigit():
                return None
            return {'url': f"{scheme.lower()}://{rest}", 'last_used': 0.0}

        parts = proxy_str.split(':')
        if len(parts) == 2:
            host, port = parts
            credentials = ""
        elif len(parts) == 4:
            host, port, username, password = parts
            credentials = f"{username}:{password}@"
        else:
            return None

        if not host or not port.isdigit():
            return None

        return {'url': f"{self.default_scheme}://{credentials}{host}:{port}", 'last_used': 0.0}

    def get_next_proxy(self) -> Optional[Dict[str, str]]:
        """
        Get next proxy in rotation (round-robin) with rate limiting.
        Waits if every proxy was used too recently.

        Returns:
            Mapping suitable for the `proxies` argument of requests, or None
        """
        if not self.proxies:
            return None

        while True:
            with self.lock:
                for _ in range(len(self.proxies)):
                    proxy = self.proxies[self.current_index]
                    self.current_index = (self.current_index + 1) % len(self.proxies)

                    current_time = time.time()
                    if current_time - proxy['last_used'] >= self.rate_limit_seconds:
                        proxy['last_used'] = current_time
                        return {'http': proxy['url'], 'https': proxy['url']}

                oldest_proxy = min(self.proxies, key=lambda p: p['last_used'])
                wait_time = self.rate_limit_seconds - (time.time() - oldest_proxy['last_used'])

            # Lock released before sleeping so other workers can proceed
            if wait_time > 0:
                logger.debug(f"All proxies rate limited, waiting {wait_time:.2f}s")
                time.sleep(wait_time)

    def get_proxy_count(self) -> int:
        return len(self.proxies)

    def is_enabled(self) -> bool:
        return len(self.proxies) > 0
