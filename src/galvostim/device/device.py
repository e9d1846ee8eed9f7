"""Device base class.

Hardware drivers inherit from `Device`, which validates constructor
configuration against `required_config` and defines the connection methods
every driver overrides:

- open(): connect to the hardware, returning `(ok, message)`
- close(): disconnect
- is_connected(): connection status
"""

from __future__ import annotations

from typing import Type

from loguru import logger


class Device:
    """Base class for hardware devices.

    Attributes
    ----------
    required_config : dict[str, Type]
        Required configuration parameters and their types

    Examples
    --------
    ```python
    class MyController(Device):
        required_config = {"port": str}

        def open(self) -> tuple[bool, str]:
            self.connected = True
            return True, "Connected"

        def close(self):
            self.connected = False

        def is_connected(self) -> bool:
            return self.connected
    ```
    """

    required_config: dict[str, Type] = {}

    def __init__(self, **config_kwargs):
        for key, value in config_kwargs.items():
            setattr(self, key, value)
        for key, value in self.required_config.items():
            if not hasattr(self, key):
                logger.error(
                    f"Device {self.__class__.__name__} missing required config key: "
                    + f"{key}"
                )
                raise ValueError(
                    f"Device {self.__class__.__name__} missing required config "
                    + f"key: {key}"
                )
            if not isinstance(getattr(self, key), value):
                logger.error(
                    f"Device {self.__class__.__name__} config key {key} "
                    + f"has wrong type: {type(getattr(self, key))} (expected {value})"
                )
                raise ValueError(
                    f"Device {self.__class__.__name__} config key {key} has "
                    + f"wrong type: {type(getattr(self, key))} (expected {value})"
                )

    def open(self) -> tuple[bool, str]:
        raise NotImplementedError()

    def close(self):
        raise NotImplementedError()

    def is_connected(self) -> bool:
        raise NotImplementedError()
