"""Load CLI specifications from a local file, a URL, or stdin.

This module handles all I/O for fetching a spec document and decoding it
into a :class:`~mandate.models.Spec`. YAML is the native format; JSON is
accepted too (it is valid YAML, but is tried first with the stricter
parser when the source hints at it).

The two public functions are:

* :func:`load_spec` -- Load, decode and validate a spec from any source.
* :func:`parse_spec_text` -- Decode and validate an in-memory document.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from mandate.exceptions import InvalidSpecError
from mandate.models import Spec

logger = logging.getLogger(__name__)


def load_spec(source: str | Path) -> Spec:
    """Load a CLI spec from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The validated specification.

    Raises:
        InvalidSpecError: If the source cannot be read, decoded or validated.
    """
    source = str(source)
    logger.debug("Loading spec %s", source)
    if source == "-":
        raw = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        raw = _load_from_url(source)
    else:
        raw = _load_from_file(source)
    return Spec.parse(raw)


def parse_spec_text(content: str, hint: str = "") -> Spec:
    """Decode *content* as YAML (or JSON) and validate it as a :class:`Spec`."""
    return Spec.parse(_parse_content(content, hint=hint))


def _load_from_stdin() -> Any:
    """Read a spec document from stdin.

    Raises:
        InvalidSpecError: If stdin cannot be read or is empty.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise InvalidSpecError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise InvalidSpecError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> Any:
    """Fetch a spec document over HTTP(S).

    Raises:
        InvalidSpecError: If the URL cannot be fetched.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise InvalidSpecError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise InvalidSpecError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = "json" if "json" in content_type else ""
    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> Any:
    """Read a spec document from a local file.

    ``.json`` files are decoded as JSON; everything else as YAML.

    Raises:
        InvalidSpecError: If the file is missing, unreadable or empty.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise InvalidSpecError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidSpecError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise InvalidSpecError(f"Spec file is empty: {path}")

    hint = "json" if file_path.suffix.lower() == ".json" else "yaml"
    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> Any:
    """Decode *content*, returning whatever value the document holds.

    A ``json`` hint uses the JSON decoder only. Any other hint uses
    ``yaml.safe_load``, which also reads JSON documents.

    Raises:
        InvalidSpecError: If the content cannot be decoded.
    """
    if hint == "json":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            raise InvalidSpecError(f"Invalid JSON: {exc}") from exc

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise InvalidSpecError(f"Invalid YAML: {exc}") from exc
