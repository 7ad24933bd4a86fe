"""
Address extraction from uploaded text.
"""

from typing import Iterator, Optional
import logging
import mimetypes
import os

from .errors import EmptyInputError, UnsupportedFileError

logger = logging.getLogger(__name__)

PLAIN_TEXT_MIME = "text/plain"
PLAIN_TEXT_EXTENSIONS = (".txt",)


class AddressList:
    """
    Lazy, restartable sequence of candidate addresses from raw file text.

    Every iteration starts over from the first line. Lines are trimmed and
    lines that are blank after trimming are skipped. Duplicates are kept.
    """

    def __init__(self, text: str):
        self.text = text
        self._count: Optional[int] = None

    def __iter__(self) -> Iterator[str]:
        for line in self.text.split('\n'):
            address = line.strip()
            if address:
                yield address

    def __len__(self) -> int:
        if self._count is None:
            self._count = sum(1 for _ in self)
        return self._count

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"AddressList({len(self)} addresses)"


def extract_addresses(text: str) -> AddressList:
    """
    Split raw file text into candidate addresses.

    Args:
        text: Raw file content

    Returns:
        AddressList over the non-empty trimmed lines

    Raises:
        EmptyInputError: if no address remains after trimming
    """
    addresses = AddressList(text or "")
    if not addresses:
        logger.error("No addresses found in input")
        raise EmptyInputError("No email addresses found in input")

    logger.info(f"Extracted {len(addresses)} addresses")
    return addresses


def is_plain_text_file(path: str) -> bool:
    """Accept files with a .txt extension or a text/plain guessed type."""
    if path.lower().endswith(PLAIN_TEXT_EXTENSIONS):
        return True
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type == PLAIN_TEXT_MIME


def read_upload(path: str, encoding: str = "utf-8") -> str:
    """
    Read an uploaded address file.

    Undecodable bytes are replaced rather than failing the run, and a
    leading byte order mark is dropped.

    Args:
        path: Path to uploaded file
        encoding: Text encoding of the file

    Returns:
        File content as text

    Raises:
        UnsupportedFileError: if the file is not plain text
        FileNotFoundError: if the file does not exist
    """
    if not is_plain_text_file(path):
        logger.error(f"Rejected upload (not a plain text file): {path}")
        raise UnsupportedFileError(f"Please upload a .txt file: {os.path.basename(path)}")

    with open(path, 'r', encoding=encoding, errors='replace') as f:
        text = f.read()

    if text.startswith('\ufeff'):
        text = text[1:]

    logger.info(f"Read {len(text)} characters from {path}")
    return text
