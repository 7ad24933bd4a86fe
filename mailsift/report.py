"""
Report formatting and output for a finished run.
"""

import os
import logging

from .models import ValidationResult

logger = logging.getLogger(__name__)

REPORT_FILENAME = "validation-results.txt"


def format_report(result: ValidationResult) -> str:
    """
    Render the downloadable report text.

    Format: "Valid Emails:" header, newline-joined valid addresses, a blank
    line, then "Invalid Emails:" header and newline-joined invalid addresses.
    """
    valid = "\n".join(result.valid)
    invalid = "\n".join(result.invalid)
    return f"Valid Emails:\n{valid}\n\nInvalid Emails:\n{invalid}"


def write_report(result: ValidationResult, output_dir: str) -> str:
    """
    Write the report to `output_dir`/validation-results.txt, replacing any
    previous report.

    Args:
        result: Finished run result
        output_dir: Directory for the report file

    Returns:
        Path of the written file
    """
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)
        logger.info(f"Created output directory: {output_dir}")

    output_file = os.path.join(output_dir, REPORT_FILENAME)
    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(format_report(result))

    logger.info(f"Wrote {result.valid_count} valid and {result.invalid_count} invalid emails to {output_file}")
    return output_file
