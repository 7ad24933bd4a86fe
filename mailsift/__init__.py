"""
Email list sifting package with modular components.
"""

from .core import EmailSiftService
from .errors import (
    ConfigurationError,
    EmptyInputError,
    MailsiftError,
    RemoteTransportError,
    RunCancelledError,
    UnsupportedFileError,
)
from .extractor import AddressList, extract_addresses, read_upload
from .models import ProgressEvent, RemoteCheckOutcome, RunSummary, ValidationResult, Verdict
from .remote_checker import RemoteDeliverabilityChecker
from .report import REPORT_FILENAME, format_report, write_report
from .scheduler import BatchScheduler
from .strategies import StrategyKind, build_strategy
from .syntax_validator import BasicSyntaxStrategy, StrictSyntaxStrategy

__all__ = [
    'EmailSiftService',
    'BatchScheduler',
    'BasicSyntaxStrategy',
    'StrictSyntaxStrategy',
    'RemoteDeliverabilityChecker',
    'StrategyKind',
    'build_strategy',
    'AddressList',
    'extract_addresses',
    'read_upload',
    'format_report',
    'write_report',
    'REPORT_FILENAME',
    'Verdict',
    'ValidationResult',
    'RemoteCheckOutcome',
    'ProgressEvent',
    'RunSummary',
    'MailsiftError',
    'EmptyInputError',
    'UnsupportedFileError',
    'ConfigurationError',
    'RemoteTransportError',
    'RunCancelledError',
]
