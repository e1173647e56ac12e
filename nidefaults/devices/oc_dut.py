"""OpenConfig device under test managed over RESTCONF."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any
from urllib.parse import quote

from nidefaults.devices.base_devices import RESTDevice
from nidefaults.exceptions import ConfigRejected, DeviceConnectionError
from nidefaults.templates.dut import DUT

_LOGGER = logging.getLogger(__name__)
_DATA_ROOT = "/restconf/data"
_YANG_JSON = "application/yang-data+json"


class OpenConfigDUT(RESTDevice, DUT):
    """Device under test exposing the OpenConfig models over RESTCONF.

    Inventory example::

        {
            "name": "dut",
            "type": "oc_dut",
            "ipaddr": "10.64.1.2",
            "http_port": 443,
            "ports": {"port1": "Ethernet1", "port2": "Ethernet2"}
        }
    """

    def port_name(self, port_id: str) -> str:
        """Get the device interface name of a test port.

        :param port_id: test port identifier, e.g. port1
        :returns: device interface name
        """
        return str(self._get_port_config(port_id))

    def apply_config(self, config_tree: dict[str, Any]) -> None:
        """Merge the given configuration tree into the device configuration.

        :param config_tree: OpenConfig JSON configuration tree
        :raises ConfigRejected: when the device answers with an error
        """
        _LOGGER.info("Applying configuration on %s", self.device_name)
        response = self._request(
            "PATCH",
            _DATA_ROOT,
            json=config_tree,
            headers={"Content-Type": _YANG_JSON, "Accept": _YANG_JSON},
        )
        if response.is_error:
            msg = (
                f"{self.device_name} rejected the configuration: "
                f"{response.status_code} {response.text}"
            )
            raise ConfigRejected(msg)

    def get_state(self, path: str) -> Any:  # noqa: ANN401
        """Read operational state at the given path.

        Single leaf answers are unwrapped, e.g. ``{"module:leaf": 1}`` gives 1.

        :param path: RESTCONF data path, e.g.
            ``openconfig-interfaces:interfaces/interface=Ethernet1/state``
        :returns: state value or None when not present
        :raises DeviceConnectionError: when the device answers with an error
        """
        response = self._request(
            "GET",
            f"{_DATA_ROOT}/{quote(path.strip('/'), safe='/:=,')}",
            headers={"Accept": _YANG_JSON},
        )
        if response.status_code in {HTTPStatus.NOT_FOUND, HTTPStatus.NO_CONTENT}:
            return None
        if response.is_error:
            msg = (
                f"{self.device_name} - reading {path} failed: "
                f"{response.status_code} {response.text}"
            )
            raise DeviceConnectionError(msg)
        value = response.json()
        if isinstance(value, dict) and len(value) == 1:
            return next(iter(value.values()))
        return value
