"""
Email List Sifter - Main Entry Point

Reads a plain text file with one email address per line, classifies every
address with the configured strategy (basic syntax, strict syntax or remote
deliverability lookup) and writes validation-results.txt.

All configuration is externalized in config/settings.yaml; the remote API key
is read from the environment (or a .env file).

Usage:
    python sift.py [INPUT_FILE]
"""

from mailsift import (
    EmailSiftService,
    MailsiftError,
    ConfigurationError,
    EmptyInputError,
    UnsupportedFileError,
    RunCancelledError,
    write_report,
)
from dotenv import load_dotenv
import yaml
import os
import signal
import sys
import threading
import logging

DEFAULT_CONFIG_FILE = "config/settings.yaml"


class ProgressDisplay:
    """
    Single-line progress bar that updates in place on a terminal
    """
    def __init__(self, bar_length: int = 40):
        self.bar_length = bar_length
        self.is_terminal = sys.stdout.isatty()

    def print_progress(self, event):
        """Print progress bar for a ProgressEvent"""
        filled = self.bar_length * event.percent // 100
        bar = '█' * filled + '░' * (self.bar_length - filled)
        line = (
            f"Progress: [{bar}] {event.percent:>3}% | {event.processed}/{event.total} "
            f"| ✓ {event.valid_count} ✗ {event.invalid_count}"
        )
        if self.is_terminal:
            sys.stdout.write('\r' + line)
            sys.stdout.flush()
        else:
            print(line, flush=True)

    def finish(self):
        """Move cursor to the next line once progress is complete"""
        if self.is_terminal:
            print()


def load_config(config_file: str = DEFAULT_CONFIG_FILE) -> dict:
    """
    Load configuration from YAML file.

    Args:
        config_file: Path to configuration file

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        print(f"Error: Configuration file '{config_file}' not found!")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error loading configuration: {e}")
        sys.exit(1)

    if not isinstance(config, dict):
        print(f"Error: Configuration file '{config_file}' must contain a mapping")
        sys.exit(1)
    return config


def setup_logging(config: dict):
    """
    Setup logging based on configuration.

    Args:
        config: Configuration dictionary
    """
    log_config = config.get('logging', {})
    log_file = config.get('paths', {}).get('log_file', 'mailsift.log')

    handlers = [logging.FileHandler(log_file)]

    if log_config.get('console_output', False):
        handlers.append(logging.StreamHandler(sys.stdout))

    logging.basicConfig(
        level=getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO),
        format=log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s'),
        handlers=handlers
    )


def main(argv=None) -> int:
    """Main function - orchestrates one sifting run. Returns the process exit code."""
    argv = sys.argv[1:] if argv is None else argv

    load_dotenv()
    config = load_config(os.environ.get("MAILSIFT_CONFIG", DEFAULT_CONFIG_FILE))
    setup_logging(config)
    logger = logging.getLogger(__name__)

    paths_config = config.get('paths', {})
    input_file = argv[0] if argv else paths_config.get('input_file', 'data/emails.txt')
    output_dir = paths_config.get('output_dir', 'output')

    print("=" * 70)
    print("EMAIL LIST SIFTER")
    print("=" * 70)

    logger.info("=" * 70)
    logger.info("Sifting run started")

    try:
        service = EmailSiftService.from_config(config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Configuration error: {e}")
        return 2

    service_config = service.get_service_config()
    print(f"Strategy:   {service_config['strategy']}")
    print(f"Batch size: {service_config['batch_size']} (workers: {service_config['max_workers']})")
    print(f"Input file: {input_file}\n")

    # Ctrl+C stops the run at the next batch boundary
    cancel_event = threading.Event()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel_event.set())

    display = ProgressDisplay()
    try:
        result = service.sift_file(input_file, on_progress=display.print_progress, cancel_event=cancel_event)
    except UnsupportedFileError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        return 1
    except EmptyInputError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        return 1
    except FileNotFoundError:
        logger.error(f"Input file not found: {input_file}")
        print(f"Error: Input file '{input_file}' not found!")
        return 1
    except RunCancelledError as e:
        display.finish()
        logger.warning(str(e))
        print(f"Cancelled: {e}")
        return 130
    except MailsiftError as e:
        logger.error(f"Error processing file: {e}")
        print(f"Error processing file: {e}")
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    display.finish()
    output_file = write_report(result, output_dir)
    summary = service.last_summary

    print("\n" + "=" * 70)
    print("VALIDATION SUMMARY")
    print("=" * 70)
    print(f"Total Emails:   {summary.total}")
    print(f"Valid:          {summary.valid_count}")
    print(f"Invalid:        {summary.invalid_count}")
    if summary.transport_failures:
        print(f"Lookup errors:  {summary.transport_failures} (counted as invalid)")
    print(f"Time Taken:     {summary.elapsed_seconds:.2f} seconds")
    print(f"Speed:          {summary.speed:.2f} emails/second")
    print(f"Results file:   {output_file}")
    print("=" * 70)

    stats = getattr(service.strategy, 'get_stats', None)
    if stats:
        logger.info(f"Remote lookup stats: {stats()}")

    logger.info("Sifting run completed successfully")
    logger.info("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
