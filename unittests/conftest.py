"""Shared fixtures and fake collaborators for the nidefaults unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from nidefaults.exceptions import ConfigRejected, TopologyPushError
from nidefaults.lib.dataclass.flow import FlowCounters
from nidefaults.lib.dataclass.scenario import ScenarioConfig
from nidefaults.lib.traffic_session import TrafficTimings
from nidefaults.templates.dut import DUT
from nidefaults.templates.traffic_generator import TrafficGenerator


class FakeDUT(DUT):
    """DUT recording the configuration applied to it."""

    def __init__(self, reject: bool = False) -> None:
        """Initialize the fake DUT.

        :param reject: refuse every configuration, defaults to False
        :type reject: bool
        """
        self.ports = {"port1": "Ethernet1", "port2": "Ethernet2"}
        self.applied: list[dict[str, Any]] = []
        self.reject = reject

    def port_name(self, port_id: str) -> str:
        return self.ports[port_id]

    def apply_config(self, config_tree: dict[str, Any]) -> None:
        if self.reject:
            msg = "invalid config"
            raise ConfigRejected(msg)
        self.applied.append(config_tree)

    def get_state(self, path: str) -> Any:  # noqa: ANN401
        return None


class FakeTrafficGenerator(TrafficGenerator):
    """Traffic generator answering from in-memory tables."""

    def __init__(self) -> None:
        """Initialize the fake traffic generator."""
        self.calls: list[str] = []
        self.topologies: list[dict[str, Any]] = []
        self.counters: dict[str, tuple[int, int]] = {}
        self.neighbors: dict[str, list[str]] = {}
        self.reject_topology = False

    def port_location(self, port_id: str) -> str:
        return f"eth{port_id[-1]}"

    def push_topology(self, topology: dict[str, Any]) -> None:
        self.calls.append("push_topology")
        if self.reject_topology:
            msg = "duplicate names"
            raise TopologyPushError(msg)
        self.topologies.append(topology)

    def start_protocols(self) -> None:
        self.calls.append("start_protocols")

    def start_traffic(self) -> None:
        self.calls.append("start_traffic")

    def stop_traffic(self) -> None:
        self.calls.append("stop_traffic")

    def get_flow_counters(self, flow_name: str) -> FlowCounters:
        tx_packets, rx_packets = self.counters[flow_name]
        return FlowCounters(flow_name, tx_packets, rx_packets)

    def get_ipv4_neighbor_link_layer_addresses(self, eth_name: str) -> list[str]:
        return list(self.neighbors.get(eth_name, []))

    def get_port_metrics(self) -> list[dict[str, Any]]:
        return [
            {"name": "port1", "frames_tx": 1000, "frames_rx": 0},
            {"name": "port2", "frames_tx": 0, "frames_rx": 1000},
        ]


@pytest.fixture(name="fake_dut")
def fake_dut_fixture() -> FakeDUT:
    """Get a fake DUT.

    :return: fake DUT
    :rtype: FakeDUT
    """
    return FakeDUT()


@pytest.fixture(name="rejecting_dut")
def rejecting_dut_fixture() -> FakeDUT:
    """Get a fake DUT refusing every configuration.

    :return: fake DUT
    :rtype: FakeDUT
    """
    return FakeDUT(reject=True)


@pytest.fixture(name="fake_ate")
def fake_ate_fixture() -> FakeTrafficGenerator:
    """Get a fake traffic generator with both neighbors resolved.

    :return: fake traffic generator
    :rtype: FakeTrafficGenerator
    """
    ate = FakeTrafficGenerator()
    ate.neighbors = {
        "port1.Eth": ["02:1a:c0:00:02:00"],
        "port2.Eth": ["02:1a:c0:00:02:02"],
    }
    ate.counters = {"ipv4": (500, 500), "ipv6": (500, 500)}
    return ate


@pytest.fixture(name="fast_timings")
def fast_timings_fixture() -> TrafficTimings:
    """Get timings suitable for unit tests.

    :return: traffic timings
    :rtype: TrafficTimings
    """
    return TrafficTimings(
        protocol_settle=10.0,
        convergence_deadline=0.3,
        poll_interval=0.01,
        traffic_settle=15.0,
    )


@pytest.fixture(name="scenario")
def scenario_fixture(fast_timings: TrafficTimings) -> ScenarioConfig:
    """Get the default scenario with fast timings.

    :param fast_timings: traffic timings
    :type fast_timings: TrafficTimings
    :return: scenario configuration
    :rtype: ScenarioConfig
    """
    return ScenarioConfig(timings=fast_timings)
