#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Common utility functions
Provides logging setup, route normalisation and JSON list encoding
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union
from datetime import datetime
from urllib.parse import urlsplit

from .constants import DEFAULT_DATA_DIRECTORY, DEFAULT_ROUTE


def setup_logging(verbose: bool = False, log_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Setup logging system

    Args:
        verbose: Whether to enable verbose logging mode
        log_dir: Directory for the daily log file, defaults to ~/.haloguide/logs

    Returns:
        Configured logger object
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    # Create log format
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Configure package logger
    logger = logging.getLogger('haloguide')
    logger.setLevel(log_level)

    # Avoid duplicate handlers
    if not logger.handlers:
        # Console output
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # File output (optional)
        log_path = Path(log_dir) if log_dir else Path(DEFAULT_DATA_DIRECTORY).expanduser() / 'logs'
        try:
            log_path.mkdir(parents=True, exist_ok=True)
            log_file = log_path / f'haloguide_{datetime.now().strftime("%Y%m%d")}.log'
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"File logging disabled: {e}")

    return logger


def normalize_route(route: Optional[str], default_route: str = DEFAULT_ROUTE) -> str:
    """
    Normalise a navigation path for hint matching

    Query string and fragment are dropped, trailing slashes removed and the
    path lower-cased. An empty path or the bare root maps to ``default_route``.

    Args:
        route: Raw route or URL supplied by the host navigation
        default_route: Route used for the application root

    Returns:
        Normalised route, always starting with '/'
    """
    if not route:
        return default_route

    path = urlsplit(route.strip()).path.lower().rstrip('/')
    if not path:
        return default_route
    if not path.startswith('/'):
        path = '/' + path
    return path


def encode_id_list(values: Iterable[str]) -> str:
    """Encode an ordered id collection as a JSON array string"""
    return json.dumps(list(values), ensure_ascii=False)


def decode_id_list(raw: Optional[str]) -> List[str]:
    """
    Decode a JSON array of strings

    Non-string entries and duplicates are dropped, first occurrence wins.

    Raises:
        ValueError: If the payload is not valid JSON or not an array
    """
    if raw is None:
        return []

    data: Any = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError(f"expected JSON array, got {type(data).__name__}")

    result: List[str] = []
    for item in data:
        if isinstance(item, str) and item not in result:
            result.append(item)
    return result


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure directory exists, create if it doesn't exist

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path_obj = Path(path).expanduser()
    path_obj.mkdir(parents=True, exist_ok=True)
    return path_obj
