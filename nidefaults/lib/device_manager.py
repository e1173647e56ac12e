"""nidefaults device manager."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from nidefaults.exceptions import DeviceNotFound

if TYPE_CHECKING:
    from pluggy import PluginManager

    from nidefaults.devices.base_devices import NIDefaultsDevice

T = TypeVar("T")  # pylint: disable=invalid-name


class DeviceManager:
    """Manages all the devices in the environment."""

    def __init__(self, plugin_manager: PluginManager) -> None:
        """Initialize device manager.

        :param plugin_manager: plugin manager
        """
        self._plugin_manager = plugin_manager

    def get_devices_by_type(self, device_type: type[T]) -> dict[str, T]:
        """Get devices of given type.

        :param device_type: device type
        :returns: devices of given type
        """
        return {
            name: plugin
            for name, plugin in self._plugin_manager.list_name_plugin()
            if isinstance(plugin, device_type)
        }

    def get_device_by_type(self, device_type: type[T]) -> T:
        """Get first device of the given type.

        In order to get all devices of given type use get_devices_by_type.

        :param device_type: device type
        :returns: device of given type
        :raises DeviceNotFound: when device of given type not available
        """
        for _, plugin in self._plugin_manager.list_name_plugin():
            if isinstance(plugin, device_type):
                return plugin
        msg = f"No device available of type {device_type}"
        raise DeviceNotFound(msg)

    def register_device(self, device: NIDefaultsDevice) -> None:
        """Register a device as plugin with nidefaults.

        :param device: device instance to register
        :type device: NIDefaultsDevice
        """
        self._plugin_manager.register(device, device.device_name)
