"""
Local email syntax strategies.

Two interchangeable offline classifiers:
- BasicSyntaxStrategy: loose local@domain.tld shape check
- StrictSyntaxStrategy: RFC 5321/5322-leaning grammar (dot-atoms, quoted
  strings, IP-literal domains) plus structural length and dot rules
"""

import re
from typing import Tuple
import logging

from .models import Verdict

logger = logging.getLogger(__name__)


class BasicSyntaxStrategy:
    """
    Loose syntax check: non-whitespace, non-@ local part, "@", and a
    non-whitespace, non-@ domain containing at least one dot.
    """

    name = "basic"

    EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')

    def validate(self, email: str) -> Tuple[bool, str]:
        """
        Check email shape.

        Args:
            email: Address to check

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not isinstance(email, str) or not self.EMAIL_PATTERN.fullmatch(email):
            return False, "Email must look like local@domain.tld"
        return True, ""

    def classify(self, email: str) -> Verdict:
        is_valid, error = self.validate(email)
        if not is_valid:
            logger.debug(f"Basic syntax FAIL: {email} - {error}")
        return Verdict.from_bool(is_valid)


class StrictSyntaxStrategy:
    """
    RFC-leaning syntax check.

    Rules, in order:
    - Total length at most 254 characters (RFC 5321)
    - Address cannot start or end with a dot
    - Must pass the basic shape check (so every basic rejection is a strict rejection)
    - Local part at most 64 characters
    - Local part: dot-atom of atext characters, or a quoted string
    - Domain: hostname labels (no leading/trailing hyphen, alphabetic TLD of
      2+ characters) or an IP literal ([IPv4] or [IPv6:...])
    """

    name = "strict"

    MAX_EMAIL_LENGTH = 254
    MAX_LOCAL_LENGTH = 64

    ATEXT = r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]"
    DOT_ATOM = rf"{ATEXT}+(?:\.{ATEXT}+)*"
    QUOTED_STRING = r'"(?:[\x21\x23-\x5b\x5d-\x7e]|\\[\x20-\x7e])*"'
    LOCAL_PART_PATTERN = rf"(?:{DOT_ATOM}|{QUOTED_STRING})"

    HOSTNAME = r"(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}"
    IPV4_OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])"
    IPV4 = rf"{IPV4_OCTET}(?:\.{IPV4_OCTET}){{3}}"
    IP_LITERAL = rf"\[(?:{IPV4}|IPv6:[0-9A-Fa-f:.]+)\]"
    DOMAIN_PATTERN = rf"(?:{HOSTNAME}|{IP_LITERAL})"

    EMAIL_PATTERN = re.compile(rf"(?P<local>{LOCAL_PART_PATTERN})@(?P<domain>{DOMAIN_PATTERN})")

    def __init__(self):
        self.basic = BasicSyntaxStrategy()

    def validate(self, email: str) -> Tuple[bool, str]:
        """
        Validate email address syntax with strict rules.

        Args:
            email: Address to check

        Returns:
            Tuple of (is_valid, error_message)
            If valid, error_message is empty string
        """
        if not email or not isinstance(email, str):
            return False, "Email must be a non-empty string"

        if len(email) > self.MAX_EMAIL_LENGTH:
            return False, f"Email exceeds {self.MAX_EMAIL_LENGTH} characters"

        if email.startswith('.'):
            return False, "Email cannot start with dot"

        if email.endswith('.'):
            return False, "Email cannot end with dot"

        is_valid, error = self.basic.validate(email)
        if not is_valid:
            return False, error

        match = self.EMAIL_PATTERN.fullmatch(email)
        if not match:
            return False, "Email does not match RFC 5322 grammar"

        if len(match.group('local')) > self.MAX_LOCAL_LENGTH:
            return False, f"Local part exceeds {self.MAX_LOCAL_LENGTH} characters"

        return True, ""

    def classify(self, email: str) -> Verdict:
        is_valid, error = self.validate(email)
        if not is_valid:
            logger.debug(f"Strict syntax FAIL: {email} - {error}")
        return Verdict.from_bool(is_valid)
