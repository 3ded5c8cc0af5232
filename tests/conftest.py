"""Shared pytest fixtures for grapes-translator tests."""

import pytest
import structlog

from grapes_translator.models import Artifact


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def acme_artifact():
    return Artifact(
        group_id="org.acme",
        artifact_id="lib",
        version="1.2.3",
        classifier=None,
        type="jar",
        extension="jar",
    )
