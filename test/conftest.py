import pytest
from loguru import logger


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks test as slow running test")
    config.addinivalue_line(
        "markers", "hardware: marks test that require physical hardware"
    )


@pytest.fixture
def log_messages():
    """Records (level name, message) of everything logged during a test."""
    messages = []
    handler_id = logger.add(
        lambda msg: messages.append((msg.record["level"].name, msg.record["message"])),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
