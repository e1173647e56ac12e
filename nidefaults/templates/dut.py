"""nidefaults device under test template."""

from abc import ABC, abstractmethod
from typing import Any


class DUT(ABC):
    """nidefaults device under test template."""

    @abstractmethod
    def port_name(self, port_id: str) -> str:
        """Get the device interface name of a test port.

        :param port_id: test port identifier, e.g. port1
        :returns: device interface name
        """
        raise NotImplementedError

    @abstractmethod
    def apply_config(self, config_tree: dict[str, Any]) -> None:
        """Merge the given configuration tree into the device configuration.

        :param config_tree: OpenConfig JSON configuration tree
        :raises ConfigRejected: when the device refuses the configuration
        """
        raise NotImplementedError

    @abstractmethod
    def get_state(self, path: str) -> Any:  # noqa: ANN401
        """Read operational state at the given path.

        :param path: state path
        :returns: state value or None when not present
        """
        raise NotImplementedError
