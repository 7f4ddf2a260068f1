"""
Shared pytest fixtures for the snippet test suite.

Every test gets its own SnippetLibrary so no state leaks between tests.
Libraries are built with a seeded random source so unseeded draws are
reproducible as well.
"""

import random

import pytest

from text_snippets.registry import SnippetLibrary


@pytest.fixture
def library() -> SnippetLibrary:
    """An empty library with a seeded default random source."""
    return SnippetLibrary(rng=random.Random(1234))


@pytest.fixture
def greetings(library: SnippetLibrary) -> SnippetLibrary:
    """
    A library with one mixed category and one anonymous-only category.

    ``<greeting>`` holds two identified and one anonymous entry;
    ``<title>`` holds two anonymous entries.
    """
    library.load(
        {
            "category": "<greeting>",
            "text": [
                {"id": "greet_formal", "text": "Good day.", "name": "Formal"},
                {"id": "greet_gruff", "text": "What?"},
                "Hello.",
            ],
        }
    )
    library.load({"category": "<title>", "text": ["friend", "stranger"]})
    return library
