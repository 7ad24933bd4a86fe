"""
Error taxonomy for email list sifting.

Run-level errors (empty input, bad configuration, cancellation) abort a run.
Per-address errors (RemoteTransportError) are contained by the strategy that
raised them and never escalate.
"""


class MailsiftError(Exception):
    """Base class for all mailsift errors."""


class EmptyInputError(MailsiftError):
    """No addresses could be extracted from the input."""


class UnsupportedFileError(MailsiftError):
    """The uploaded file is not a plain text file."""


class ConfigurationError(MailsiftError):
    """Configuration is missing or invalid (e.g. remote strategy without credential)."""


class RemoteTransportError(MailsiftError):
    """Network or parse failure for one address during a remote lookup."""

    def __init__(self, email: str, reason: str, temporary: bool = False, status_code=None):
        super().__init__(f"{email}: {reason}")
        self.email = email
        self.reason = reason
        self.temporary = temporary
        self.status_code = status_code


class RunCancelledError(MailsiftError):
    """The abort signal was set while a run was in progress."""
