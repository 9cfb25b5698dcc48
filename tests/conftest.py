from pathlib import Path

import pytest

from riven_grader.models import RollComposition
from riven_grader.oracle import TableValuationOracle
from riven_grader.range_resolver import RangeResolver
from riven_grader.stat_catalog import CatalogStore, reset_catalog_store
from tests.conftest_utils import build_test_snapshot

# =============================================================================
# Global singleton reset fixture for test isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_catalog_singleton():
    """
    Reset the process-wide catalog store after each test.

    No test can leak a published snapshot to another test through
    get_catalog_store().
    """
    yield
    reset_catalog_store()


# =============================================================================
# Catalog fixtures
# =============================================================================


@pytest.fixture
def snapshot():
    """In-memory test catalog (see tests/conftest_utils.py)."""
    return build_test_snapshot()


@pytest.fixture
def store(snapshot):
    """CatalogStore with the test catalog already published."""
    return CatalogStore(snapshot=snapshot)


@pytest.fixture
def oracle(snapshot):
    return TableValuationOracle(snapshot)


@pytest.fixture
def resolver(snapshot):
    return RangeResolver(snapshot)


@pytest.fixture
def composition():
    """Three buffs, one curse."""
    return RollComposition(3, 1)


def pytest_collection_modifyitems(config, items):
    """Assign tier markers based on test location."""
    integration_files = {
        "test_packaged_catalog.py",
        "test_cli.py",
    }

    for item in items:
        path = Path(str(item.fspath)).as_posix()
        filename = Path(path).name

        if "/tests/integration/" in path or filename in integration_files:
            item.add_marker(pytest.mark.integration)
        elif "/tests/unit/" in path:
            item.add_marker(pytest.mark.unit)
