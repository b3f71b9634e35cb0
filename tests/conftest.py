import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """The CLI reconfigures structlog; don't let that leak between tests."""
    yield
    structlog.reset_defaults()
