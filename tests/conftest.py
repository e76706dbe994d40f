"""Shared fixtures for the test suite."""

import pytest

from fakes import HashingEmbedder, ScriptedCompleter


@pytest.fixture
def embedder():
    return HashingEmbedder()


@pytest.fixture
def completer():
    return ScriptedCompleter()
