"""nidefaults base device template."""

from argparse import Namespace
from typing import Any

from nidefaults.exceptions import EnvConfigError


class NIDefaultsDevice:
    """nidefaults base device which all devices inherit from."""

    def __init__(self, config: dict, cmdline_args: Namespace) -> None:
        """Initialize nidefaults base device.

        :param config: device configuration
        :param cmdline_args: command line arguments
        """
        self._config: dict = config
        self._cmdline_args = cmdline_args

    @property
    def config(self) -> dict:
        """Get device configuration.

        :returns: device configuration
        """
        return self._config

    @property
    def device_name(self) -> str:
        """Get name of the device.

        :returns: device name
        """
        return self._config.get("name")

    @property
    def device_type(self) -> str:
        """Get type of the device.

        :returns: device type
        """
        return self._config.get("type")

    def _get_port_config(self, port_id: str) -> Any:  # noqa: ANN401
        """Get the inventory entry of a test port.

        :param port_id: test port identifier
        :returns: port entry from the "ports" section of the device config
        :raises EnvConfigError: when the port is not in the device config
        """
        ports: dict[str, Any] = self._config.get("ports", {})
        if port_id not in ports:
            msg = f"{self.device_name} - {port_id!r} is not in the ports config"
            raise EnvConfigError(msg)
        return ports[port_id]
