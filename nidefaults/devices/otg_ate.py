"""Open Traffic Generator (OTG) automated test equipment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nidefaults.devices.base_devices import RESTDevice
from nidefaults.exceptions import DeviceConnectionError, TopologyPushError
from nidefaults.lib.dataclass.flow import FlowCounters
from nidefaults.templates.traffic_generator import TrafficGenerator

if TYPE_CHECKING:
    import httpx

_LOGGER = logging.getLogger(__name__)


def _errors(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("errors"):
        return "; ".join(str(error) for error in body["errors"])
    return response.text


class OTGTrafficGenerator(RESTDevice, TrafficGenerator):
    """Traffic generator driven through the OTG REST API.

    Inventory example::

        {
            "name": "ate",
            "type": "otg_ate",
            "ipaddr": "10.64.1.3",
            "http_port": 8443,
            "ports": {"port1": "eth1", "port2": "eth2"}
        }
    """

    def _post(self, endpoint: str, payload: dict[str, Any]) -> Any:  # noqa: ANN401
        response = self._request("POST", endpoint, json=payload)
        if response.is_error:
            msg = (
                f"{self.device_name} - {endpoint} failed with "
                f"{response.status_code}: {_errors(response)}"
            )
            raise DeviceConnectionError(msg)
        return response.json() if response.content else {}

    def _set_state(self, payload: dict[str, Any]) -> None:
        self._post("/control/state", payload)

    def port_location(self, port_id: str) -> str:
        """Get the location of a test port on the generator.

        :param port_id: test port identifier, e.g. port1
        :returns: port location
        """
        return str(self._get_port_config(port_id))

    def push_topology(self, topology: dict[str, Any]) -> None:
        """Replace the generator configuration with the given topology.

        :param topology: OTG configuration
        :raises TopologyPushError: when the generator rejects the topology
        """
        _LOGGER.info("Pushing topology to %s", self.device_name)
        response = self._request("POST", "/config", json=topology)
        if response.is_error:
            msg = (
                f"{self.device_name} rejected the topology: "
                f"{response.status_code} {_errors(response)}"
            )
            raise TopologyPushError(msg)

    def start_protocols(self) -> None:
        """Start protocol emulation on all emulated devices."""
        _LOGGER.info("Starting protocols on %s", self.device_name)
        self._set_state(
            {
                "choice": "protocol",
                "protocol": {"choice": "all", "all": {"state": "start"}},
            },
        )

    def _set_flow_transmit(self, state: str) -> None:
        self._set_state(
            {
                "choice": "traffic",
                "traffic": {
                    "choice": "flow_transmit",
                    "flow_transmit": {"flow_names": [], "state": state},
                },
            },
        )

    def start_traffic(self) -> None:
        """Start transmitting all flows."""
        _LOGGER.info("Starting traffic on %s", self.device_name)
        self._set_flow_transmit("start")

    def stop_traffic(self) -> None:
        """Stop transmitting all flows."""
        _LOGGER.info("Stopping traffic on %s", self.device_name)
        self._set_flow_transmit("stop")

    def get_flow_counters(self, flow_name: str) -> FlowCounters:
        """Get the packet counters of a flow.

        :param flow_name: name of the flow
        :returns: flow counters
        :raises DeviceConnectionError: when the generator has no metrics for it
        """
        response = self._post(
            "/monitor/metrics",
            {"choice": "flow", "flow": {"flow_names": [flow_name]}},
        )
        for metric in response.get("flow_metrics", []):
            if metric.get("name") == flow_name:
                return FlowCounters(
                    flow_name=flow_name,
                    tx_packets=int(metric.get("frames_tx", 0)),
                    rx_packets=int(metric.get("frames_rx", 0)),
                )
        msg = f"{self.device_name} - no metrics for flow {flow_name!r}"
        raise DeviceConnectionError(msg)

    def get_ipv4_neighbor_link_layer_addresses(self, eth_name: str) -> list[str]:
        """Get resolved link layer addresses of the IPv4 neighbors of an interface.

        :param eth_name: emulated ethernet interface name
        :returns: resolved MAC addresses, empty when nothing is resolved
        """
        response = self._post(
            "/monitor/states",
            {
                "choice": "ipv4_neighbors",
                "ipv4_neighbors": {"ethernet_names": [eth_name]},
            },
        )
        return [
            neighbor["link_layer_address"]
            for neighbor in response.get("ipv4_neighbors", [])
            if neighbor.get("ethernet_name") == eth_name
            and neighbor.get("link_layer_address")
        ]

    def get_port_metrics(self) -> list[dict[str, Any]]:
        """Get the metrics of all generator ports.

        :returns: port metrics
        """
        response = self._post(
            "/monitor/metrics",
            {"choice": "port", "port": {"port_names": []}},
        )
        return list(response.get("port_metrics", []))
