"""Snippet content files.

Snippet definitions live in data files next to the rest of a world's
content.  A file holds either one snippet record or a list of records::

    - type: snippet
      category: <greeting>
      text:
        - "Well met."
        - { id: greet_formal, text: "Good day to you, <title>.", name: "Formal" }

JSON (``.json``) and YAML (``.yml``/``.yaml``) are both accepted.  Records
that declare a ``type`` other than ``"snippet"`` are skipped so snippet
records can share files with other content.

These helpers only read files; validation and indexing happen in
:class:`~text_snippets.registry.SnippetLibrary`.  Errors from a record are
re-raised with the file path attached.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from text_snippets.errors import MalformedEntryError, SnippetLoadError
from text_snippets.registry import SnippetLibrary

logger = logging.getLogger(__name__)

#: File suffixes recognised by :func:`load_snippet_directory`.
SUPPORTED_SUFFIXES: frozenset[str] = frozenset({".json", ".yaml", ".yml"})

SNIPPET_TYPE = "snippet"


def read_records(path: Path) -> list[Any]:
    """Parse *path* and return its top-level records as a list.

    Raises:
        MalformedEntryError: The file cannot be read, decoded or parsed,
                             or has an unsupported suffix.
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise MalformedEntryError(f"unsupported snippet file type {suffix!r}").with_source(
            str(path)
        )
    try:
        with path.open(encoding="utf-8") as fh:
            if suffix == ".json":
                raw = json.load(fh)
            else:
                raw = yaml.safe_load(fh)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise MalformedEntryError(f"cannot parse file: {exc}").with_source(str(path)) from exc
    except OSError as exc:
        raise MalformedEntryError(f"cannot read file: {exc}").with_source(str(path)) from exc

    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    return [raw]


def load_snippet_file(library: SnippetLibrary, path: str | Path) -> int:
    """Load every snippet record in *path* into *library*.

    Returns:
        Number of snippet records loaded.

    Raises:
        SnippetLoadError: Any record fails validation.  The error names
                          *path* as its source.
    """
    path = Path(path)
    loaded = 0
    for record in read_records(path):
        if isinstance(record, dict) and record.get("type", SNIPPET_TYPE) != SNIPPET_TYPE:
            continue
        try:
            library.load(record)
        except SnippetLoadError as exc:
            raise exc.with_source(str(path)) from exc
        loaded += 1
    logger.debug("Loaded %d snippet record(s) from %s", loaded, path)
    return loaded


def iter_snippet_files(root: Path, suffixes: Iterable[str] = SUPPORTED_SUFFIXES) -> list[Path]:
    """Return snippet files under *root*, recursively, in sorted order."""
    wanted = {s.lower() for s in suffixes}
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in wanted)


def load_snippet_directory(
    library: SnippetLibrary,
    root: str | Path,
    *,
    suffixes: Iterable[str] = SUPPORTED_SUFFIXES,
) -> int:
    """Load all snippet files below *root* into *library*.

    Files are read in sorted path order so load order, and with it the
    index order used by seeded draws, is stable between runs.

    Returns:
        Number of files read.

    Raises:
        FileNotFoundError: *root* does not exist.
        SnippetLoadError:  A record in one of the files is invalid.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Snippet content root not found: {root}")
    files = iter_snippet_files(root, suffixes)
    for path in files:
        load_snippet_file(library, path)
    logger.info("Loaded %d snippet file(s) from %s", len(files), root)
    return len(files)
