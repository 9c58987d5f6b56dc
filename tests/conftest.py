"""
Pytest Configuration and Fixtures

This module provides:
- Shared fixtures for all tests (sample records, stores, fake AI, Flask client)
- Test category markers
"""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tests.test_config import (
    CONFIG, EXPECTED, TEST_DATA, MESSAGES,
    get_all_sample_ideas, get_completion,
)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def sample_ideas():
    """Sample Idea instances (normal/active, urgent/active, important/archived)."""
    from sparks.models.idea import Idea
    return [Idea.from_dict(row) for row in get_all_sample_ideas()]


@pytest.fixture
def known_categories():
    """Category names as the store would list them."""
    return list(TEST_DATA["categories"])


@pytest.fixture
def memory_storage(known_categories):
    """A MemoryStorage seeded with the known categories."""
    from sparks.storage.memory import MemoryStorage

    storage = MemoryStorage()
    for name in known_categories:
        storage.create_category(name)
    return storage


@pytest.fixture
def completion_client():
    """A completion client stand-in returning a well-formed completion."""
    from sparks.services.completion import CompletionClient

    client = Mock(spec=CompletionClient)
    client.is_available.return_value = True
    client.complete.return_value = get_completion("well_formed")
    return client


@pytest.fixture
def normalizer(completion_client):
    """A real IdeaNormalizer over the fake completion client."""
    from sparks.services.normalizer import IdeaNormalizer
    return IdeaNormalizer(completion_client)


@pytest.fixture
def workflow(memory_storage, normalizer):
    """CaptureWorkflow wired to the memory store and fake AI."""
    from sparks.capture.workflow import CaptureWorkflow
    return CaptureWorkflow(memory_storage, normalizer)


@pytest.fixture
def app(memory_storage, normalizer):
    """Flask app with injected memory store and fake AI."""
    from web.app import create_app

    app = create_app(
        storage=memory_storage,
        normalizer=normalizer,
        allowed_user=CONFIG["allowed_user"],
        auth_header=CONFIG["auth_header"],
    )
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def auth_headers():
    """Headers that pass the access gate."""
    return {CONFIG["auth_header"]: CONFIG["allowed_user"]}


@pytest.fixture
def expected_values():
    """Provide access to expected values."""
    return EXPECTED


@pytest.fixture
def messages():
    """Provide access to expected messages."""
    return MESSAGES


# =============================================================================
# MARKERS FOR TEST CATEGORIES
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "config_validation: Configuration validation tests"
    )
    config.addinivalue_line(
        "markers", "cli_behavior: CLI interface tests"
    )
    config.addinivalue_line(
        "markers", "idea_lifecycle: End-to-end create/list/update/delete tests"
    )
