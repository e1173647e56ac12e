"""Data classes describing one default address families scenario."""

from __future__ import annotations

from dataclasses import dataclass, field

from nidefaults.lib.dataclass.endpoint import EndpointAttributes
from nidefaults.lib.device_config import Deviations
from nidefaults.lib.traffic_session import TrafficTimings

DUT_PORT1 = EndpointAttributes(
    name="dut:port1",
    ipv4="192.0.2.0",
    ipv4_len=31,
    ipv6="2001:db8::1",
    ipv6_len=64,
)
DUT_PORT2 = EndpointAttributes(
    name="dut:port2",
    ipv4="192.0.2.2",
    ipv4_len=31,
    ipv6="2001:db8:1::1",
    ipv6_len=64,
)
ATE_PORT1 = EndpointAttributes(
    name="port1",
    ipv4="192.0.2.1",
    ipv4_len=31,
    ipv6="2001:db8::2",
    ipv6_len=64,
    mac="02:00:01:01:01:01",
)
ATE_PORT2 = EndpointAttributes(
    name="port2",
    ipv4="192.0.2.3",
    ipv4_len=31,
    ipv6="2001:db8:1::2",
    ipv6_len=64,
    mac="02:00:02:01:01:01",
)


@dataclass(frozen=True)
class ScenarioConfig:  # pylint: disable=too-many-instance-attributes
    """Everything a scenario run needs besides the devices.

    Port ids name the test ports shared by the DUT and the ATE inventory
    entries, port1 of the DUT is cabled to port1 of the ATE.
    """

    dut_port1: EndpointAttributes = DUT_PORT1
    dut_port2: EndpointAttributes = DUT_PORT2
    ate_port1: EndpointAttributes = ATE_PORT1
    ate_port2: EndpointAttributes = ATE_PORT2
    port1_id: str = "port1"
    port2_id: str = "port2"
    timings: TrafficTimings = field(default_factory=TrafficTimings)
    deviations: Deviations = field(default_factory=Deviations)
