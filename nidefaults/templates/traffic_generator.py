"""nidefaults traffic generator template."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from nidefaults.lib.dataclass.flow import FlowCounters


class TrafficGenerator(ABC):
    """Traffic generator template class.

    Protocol emulation and packet generation are done by the generator, the
    framework only drives it. All control calls return once the request is
    acknowledged.
    """

    @abstractmethod
    def port_location(self, port_id: str) -> str:
        """Get the location of a test port on the generator.

        :param port_id: test port identifier, e.g. port1
        :returns: port location
        """
        raise NotImplementedError

    @abstractmethod
    def push_topology(self, topology: dict[str, Any]) -> None:
        """Replace the generator configuration with the given topology.

        :param topology: ports, emulated devices and flows
        :raises TopologyPushError: when the generator rejects the topology
        """
        raise NotImplementedError

    @abstractmethod
    def start_protocols(self) -> None:
        """Start protocol emulation on all emulated devices."""
        raise NotImplementedError

    @abstractmethod
    def start_traffic(self) -> None:
        """Start transmitting all flows."""
        raise NotImplementedError

    @abstractmethod
    def stop_traffic(self) -> None:
        """Stop transmitting all flows."""
        raise NotImplementedError

    @abstractmethod
    def get_flow_counters(self, flow_name: str) -> FlowCounters:
        """Get the packet counters of a flow.

        :param flow_name: name of the flow
        :returns: flow counters
        """
        raise NotImplementedError

    @abstractmethod
    def get_ipv4_neighbor_link_layer_addresses(self, eth_name: str) -> list[str]:
        """Get resolved link layer addresses of the IPv4 neighbors of an interface.

        :param eth_name: emulated ethernet interface name
        :returns: resolved MAC addresses, empty when nothing is resolved
        """
        raise NotImplementedError

    @abstractmethod
    def get_port_metrics(self) -> list[dict[str, Any]]:
        """Get the metrics of all generator ports.

        :returns: port metrics
        """
        raise NotImplementedError
