"""Data classes to store traffic flow definitions, counters and verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from nidefaults.exceptions import AmbiguousLoss

if TYPE_CHECKING:
    from nidefaults.lib.dataclass.endpoint import EndpointAttributes


class AddressFamily(Enum):
    """Address family carried by a flow."""

    IPV4 = "ipv4"
    IPV6 = "ipv6"


@dataclass(frozen=True)
class FlowDefinition:
    """A unidirectional flow between two emulated endpoints."""

    name: str
    address_family: AddressFamily
    source: EndpointAttributes
    destination: EndpointAttributes
    metrics_enabled: bool = True

    def to_otg(self) -> dict[str, Any]:
        """Return the flow in Open Traffic Generator JSON form.

        :return: OTG flow
        :rtype: dict[str, Any]
        """
        if self.address_family is AddressFamily.IPV4:
            tx_name = self.source.ipv4_device_name
            rx_name = self.destination.ipv4_device_name
            src, dst = self.source.ipv4, self.destination.ipv4
        else:
            tx_name = self.source.ipv6_device_name
            rx_name = self.destination.ipv6_device_name
            src, dst = self.source.ipv6, self.destination.ipv6
        family = self.address_family.value
        return {
            "name": self.name,
            "tx_rx": {
                "choice": "device",
                "device": {"tx_names": [tx_name], "rx_names": [rx_name]},
            },
            "packet": [
                {
                    "choice": "ethernet",
                    "ethernet": {
                        "src": {"choice": "value", "value": self.source.require_mac()},
                    },
                },
                {
                    "choice": family,
                    family: {
                        "src": {"choice": "value", "value": src},
                        "dst": {"choice": "value", "value": dst},
                    },
                },
            ],
            "metrics": {"enable": self.metrics_enabled},
        }


@dataclass(frozen=True)
class FlowCounters:
    """Snapshot of the packet counters of a flow."""

    flow_name: str
    tx_packets: int
    rx_packets: int

    @property
    def loss_pct(self) -> float:
        """Packet loss in percent of the transmitted packets.

        :raises AmbiguousLoss: when no packet was transmitted
        """
        if self.tx_packets <= 0:
            raise AmbiguousLoss(self)
        return (self.tx_packets - self.rx_packets) * 100 / self.tx_packets


@dataclass(frozen=True)
class Verdict:
    """Outcome of the loss check of one flow."""

    flow_name: str
    passed: bool
    loss_pct: float
    counters: FlowCounters
