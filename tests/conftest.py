import sys

import pytest

from version_tracker.utils.logging import configure_logging


@pytest.fixture(autouse=True)
def reset_logging():
    # CliRunner swaps and closes stderr, so point structlog back at the live one
    configure_logging(level="debug", format_type="text", stream=sys.stderr)
    yield
