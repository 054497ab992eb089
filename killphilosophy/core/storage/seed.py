"""
Seed dataset loading.

The seed dataset is a single JSON object mapping normalized keys to academic
records. It can live on disk or behind an http(s) URL.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict

import requests

from ..config import REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def fetch_seed_dataset(source: str, timeout: int = REQUEST_TIMEOUT) -> Dict[str, Any]:
    """Fetch the seed dataset from a path or URL.

    Raises OSError, requests.RequestException or ValueError when the dataset
    cannot be read or is not a JSON object.
    """
    if source.startswith(("http://", "https://")):
        response = requests.get(source, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    else:
        with open(Path(source), 'r', encoding='utf-8') as f:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Seed dataset at {source} is not a JSON object")

    logger.debug("Fetched seed dataset with %d entries from %s", len(data), source)
    return data
