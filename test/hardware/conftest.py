import os

import pytest

from galvostim.util import get_hw_ports


@pytest.fixture(scope="session")
def dsp_port():
    """Serial port of a connected scan controller, from $GALVOSTIM_PORT."""
    port = os.environ.get("GALVOSTIM_PORT", "")
    if not port:
        pytest.skip("GALVOSTIM_PORT not set")
    if port not in get_hw_ports():
        pytest.skip(f"No hardware on {port}")
    return port
