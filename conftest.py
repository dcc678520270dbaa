"""
Pytest configuration for ccu test suite.

This configuration enables the --full flag to run integration tests.
"""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (slow)",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: end-to-end tests against the live sys.modules")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --full or -m integration is given."""
    if config.getoption("--full") or "integration" in (config.getoption("-m") or ""):
        return
    skip_integration = pytest.mark.skip(reason="needs --full to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def _isolate_default_registry():
    """Keep the process-wide dependency registry empty between tests."""
    from ccu.reconcile.registry import default_registry

    saved = default_registry.records()
    default_registry.clear()
    yield
    default_registry.clear()
    for record in saved:
        default_registry.register(record.dependent_class, record.define)
