# utils.py
"""
Utility functions for the particle field engine.

This module provides helpers that are used across different parts of the
application but do not belong to a specific component: logging setup,
configuration loading and argument validation.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Sequence, Tuple

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#
# validate_bounds(bounds: Sequence[float]) -> Tuple[float, float]:
#   - Outputs: (width, height) as floats.
#   - Raises: InvalidArgument if either dimension is not strictly positive.


class InvalidArgument(ValueError):
    """Raised when a count, bound, interval, threshold or range is invalid."""


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/particle_field.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise


def reject(message: str) -> None:
    """Logs a configuration error and raises it as InvalidArgument."""
    logging.critical(message)
    raise InvalidArgument(message)


def validate_bounds(bounds: Sequence[float]) -> Tuple[float, float]:
    """Returns bounds as a (width, height) float pair, rejecting non-positive sizes."""
    try:
        width, height = bounds
        width, height = float(width), float(height)
    except (TypeError, ValueError):
        reject(f"Viewport bounds must be a (width, height) pair, got {bounds!r}.")
    if not (width > 0 and height > 0):
        reject(f"Viewport bounds must be positive, got ({width}, {height}).")
    return width, height


def validate_range(name: str, value: Sequence[float], lower: float = 0.0) -> Tuple[float, float]:
    """Returns a (low, high) float pair with lower <= low <= high."""
    try:
        low, high = value
        low, high = float(low), float(high)
    except (TypeError, ValueError):
        reject(f"Configuration error: {name} must be a [low, high] pair, got {value!r}.")
    if low < lower or high < low:
        reject(
            f"Configuration error: {name} must satisfy {lower} <= low <= high, "
            f"got [{low}, {high}]."
        )
    return low, high


def validate_count(name: str, value) -> int:
    """Returns value as an int, rejecting negative or fractional counts."""
    if isinstance(value, bool):
        reject(f"Configuration error: {name} must be a whole number, got {value!r}.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        reject(f"Configuration error: {name} must be a whole number, got {value!r}.")
    if not number.is_integer():
        reject(f"Configuration error: {name} must be a whole number, got {value!r}.")
    if number < 0:
        reject(f"Configuration error: {name} must be >= 0, got {value!r}.")
    return int(number)
