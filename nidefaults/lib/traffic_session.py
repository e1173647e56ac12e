"""Traffic generation session lifecycle."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from nidefaults.exceptions import (
    InvalidSessionTransition,
    PrematureTrafficStart,
    TopologyPushError,
)
from nidefaults.lib.convergence import (
    PollingStateSource,
    WatchRequest,
    is_present,
    wait_for_convergence,
)
from nidefaults.lib.dataclass.flow import AddressFamily, FlowDefinition

if TYPE_CHECKING:
    from collections.abc import Callable

    from nidefaults.lib.convergence import ConvergenceResult
    from nidefaults.lib.dataclass.endpoint import EndpointAttributes
    from nidefaults.templates.traffic_generator import TrafficGenerator

_LOGGER = logging.getLogger(__name__)


class SessionState(Enum):
    """States of a traffic session."""

    IDLE = "idle"
    TOPOLOGY_PUSHED = "topology pushed"
    PROTOCOLS_STARTED = "protocols started"
    TRAFFIC_RUNNING = "traffic running"
    TRAFFIC_STOPPED = "traffic stopped"


@dataclass(frozen=True)
class TrafficTimings:
    """Tunable waits of a traffic session, in seconds.

    :param protocol_settle: wait after starting protocols
    :param convergence_deadline: upper bound for neighbor resolution per endpoint
    :param poll_interval: time between two neighbor state reads
    :param traffic_settle: how long traffic runs before it is stopped
    """

    protocol_settle: float = 10.0
    convergence_deadline: float = 60.0
    poll_interval: float = 1.0
    traffic_settle: float = 15.0


@dataclass(frozen=True)
class _EmulatedEndpoint:
    port_id: str
    attributes: EndpointAttributes
    gateway: EndpointAttributes


class TrafficSessionController:
    """Drive a traffic generator through one traffic session.

    IDLE -> TOPOLOGY_PUSHED -> PROTOCOLS_STARTED -> TRAFFIC_RUNNING ->
    TRAFFIC_STOPPED -> IDLE. Transitions are never retried, a failing
    collaborator call leaves the session in its current state.
    """

    def __init__(
        self,
        traffic_generator: TrafficGenerator,
        timings: TrafficTimings | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the traffic session controller.

        :param traffic_generator: traffic generator to drive
        :type traffic_generator: TrafficGenerator
        :param timings: session timings, defaults to TrafficTimings()
        :type timings: TrafficTimings | None
        :param sleep: sleep function, defaults to time.sleep
        :type sleep: Callable[[float], None]
        """
        self._traffic_generator = traffic_generator
        self._timings = timings or TrafficTimings()
        self._sleep = sleep
        self._state = SessionState.IDLE
        self._endpoints: dict[str, _EmulatedEndpoint] = {}
        self._flows: dict[str, FlowDefinition] = {}
        self._convergence: ConvergenceResult | None = None

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def timings(self) -> TrafficTimings:
        """Session timings."""
        return self._timings

    @property
    def flows(self) -> list[FlowDefinition]:
        """Flows of the session in insertion order."""
        return list(self._flows.values())

    @property
    def endpoints(self) -> list[EndpointAttributes]:
        """Emulated endpoints of the session in insertion order."""
        return [endpoint.attributes for endpoint in self._endpoints.values()]

    def _expect_state(self, expected: SessionState, action: str) -> None:
        if self._state is not expected:
            msg = (
                f"Cannot {action} in state '{self._state.value}', "
                f"expected '{expected.value}'"
            )
            raise InvalidSessionTransition(msg)

    def _move_to(self, state: SessionState) -> None:
        _LOGGER.debug("Traffic session %s -> %s", self._state.value, state.value)
        self._state = state

    def add_endpoint(
        self,
        port_id: str,
        attributes: EndpointAttributes,
        gateway: EndpointAttributes,
    ) -> None:
        """Add an emulated endpoint attached to a generator port.

        :param port_id: generator port identifier
        :type port_id: str
        :param attributes: addressing of the emulated endpoint
        :type attributes: EndpointAttributes
        :param gateway: addressing of the DUT port the endpoint connects to
        :type gateway: EndpointAttributes
        :raises TopologyPushError: when the endpoint name is already used
        """
        self._expect_state(SessionState.IDLE, "add an endpoint")
        attributes.require_mac()
        if attributes.name in self._endpoints:
            msg = f"Duplicate endpoint name {attributes.name!r}"
            raise TopologyPushError(msg)
        self._endpoints[attributes.name] = _EmulatedEndpoint(
            port_id,
            attributes,
            gateway,
        )

    def add_flow(self, flow: FlowDefinition) -> None:
        """Add a flow between two emulated endpoints.

        :param flow: flow definition
        :type flow: FlowDefinition
        :raises TopologyPushError: on duplicate flow names or unknown endpoints
        """
        self._expect_state(SessionState.IDLE, "add a flow")
        if flow.name in self._flows:
            msg = f"Duplicate flow name {flow.name!r}"
            raise TopologyPushError(msg)
        for endpoint in (flow.source, flow.destination):
            known = self._endpoints.get(endpoint.name)
            if known is None or known.attributes != endpoint:
                msg = (
                    f"Flow {flow.name!r} uses {endpoint.name!r}"
                    " which is not an emulated endpoint of this session"
                )
                raise TopologyPushError(msg)
        self._flows[flow.name] = flow

    def build_default_flows(
        self,
        source: EndpointAttributes,
        destination: EndpointAttributes,
    ) -> list[FlowDefinition]:
        """Add one IPv4 and one IPv6 flow from source to destination.

        :param source: transmitting endpoint
        :type source: EndpointAttributes
        :param destination: receiving endpoint
        :type destination: EndpointAttributes
        :return: the added flows, named ipv4 and ipv6
        :rtype: list[FlowDefinition]
        """
        flows = [
            FlowDefinition(family.value, family, source, destination)
            for family in AddressFamily
        ]
        for flow in flows:
            self.add_flow(flow)
        return flows

    def topology(self) -> dict[str, Any]:
        """Return the session topology in Open Traffic Generator form.

        :return: ports, emulated devices and flows
        :rtype: dict[str, Any]
        """
        ports = []
        devices = []
        for endpoint in self._endpoints.values():
            attrs = endpoint.attributes
            ports.append(
                {
                    "name": endpoint.port_id,
                    "location": self._traffic_generator.port_location(
                        endpoint.port_id,
                    ),
                },
            )
            devices.append(
                {
                    "name": attrs.name,
                    "ethernets": [
                        {
                            "name": attrs.eth_name,
                            "connection": {
                                "choice": "port_name",
                                "port_name": endpoint.port_id,
                            },
                            "mac": attrs.require_mac(),
                            "mtu": 1500,
                            "ipv4_addresses": [
                                {
                                    "name": attrs.ipv4_device_name,
                                    "address": attrs.ipv4,
                                    "gateway": endpoint.gateway.ipv4,
                                    "prefix": attrs.ipv4_len,
                                },
                            ],
                            "ipv6_addresses": [
                                {
                                    "name": attrs.ipv6_device_name,
                                    "address": attrs.ipv6,
                                    "gateway": endpoint.gateway.ipv6,
                                    "prefix": attrs.ipv6_len,
                                },
                            ],
                        },
                    ],
                },
            )
        return {
            "ports": ports,
            "devices": devices,
            "flows": [flow.to_otg() for flow in self._flows.values()],
        }

    def push_topology(self) -> None:
        """Submit the topology to the traffic generator.

        :raises TopologyPushError: when the topology is empty or rejected
        """
        self._expect_state(SessionState.IDLE, "push the topology")
        if not self._endpoints:
            msg = "Topology has no emulated endpoint"
            raise TopologyPushError(msg)
        self._traffic_generator.push_topology(self.topology())
        self._move_to(SessionState.TOPOLOGY_PUSHED)

    def start_protocols(self) -> None:
        """Start protocol emulation and give it the protocol settle time."""
        self._expect_state(SessionState.TOPOLOGY_PUSHED, "start protocols")
        self._traffic_generator.start_protocols()
        self._move_to(SessionState.PROTOCOLS_STARTED)
        if self._timings.protocol_settle > 0:
            self._sleep(self._timings.protocol_settle)

    def neighbor_watch_requests(self) -> list[WatchRequest]:
        """Build a watch on the IPv4 neighbor link layer address of every endpoint.

        :return: one watch request per emulated endpoint
        :rtype: list[WatchRequest]
        """
        requests = []
        for attrs in self.endpoints:
            eth_name = attrs.eth_name
            requests.append(
                WatchRequest(
                    endpoint=attrs.name,
                    source=PollingStateSource(
                        lambda name=eth_name: (
                            self._traffic_generator.get_ipv4_neighbor_link_layer_addresses(
                                name,
                            )
                        ),
                        self._timings.poll_interval,
                    ),
                    predicate=is_present,
                    path=f"Interface({eth_name}).Ipv4NeighborAny().LinkLayerAddress",
                ),
            )
        return requests

    def mark_converged(self, result: ConvergenceResult) -> None:
        """Record the outcome of the convergence wait.

        :param result: convergence result covering every emulated endpoint
        :type result: ConvergenceResult
        """
        self._expect_state(SessionState.PROTOCOLS_STARTED, "record convergence")
        self._convergence = result

    def wait_for_neighbors(self) -> ConvergenceResult:
        """Block until every emulated endpoint resolved its IPv4 neighbor.

        :raises ConvergenceTimeout: naming the endpoints without a neighbor
        :return: convergence result
        :rtype: ConvergenceResult
        """
        self._expect_state(SessionState.PROTOCOLS_STARTED, "wait for neighbors")
        result = wait_for_convergence(
            self.neighbor_watch_requests(),
            self._timings.convergence_deadline,
        )
        self.mark_converged(result)
        result.raise_for_timeout()
        return result

    def _is_converged(self) -> bool:
        if self._convergence is None or not self._convergence.converged:
            return False
        return all(
            attrs.name in self._convergence.satisfied for attrs in self.endpoints
        )

    def start_traffic(self) -> None:
        """Start traffic once every endpoint converged.

        :raises PrematureTrafficStart: when called before convergence
        :raises InvalidSessionTransition: when traffic already ran
        """
        if self._state in {
            SessionState.IDLE,
            SessionState.TOPOLOGY_PUSHED,
        } or (self._state is SessionState.PROTOCOLS_STARTED and not self._is_converged()):
            msg = (
                f"Traffic start requested in state '{self._state.value}' before "
                "every endpoint converged"
            )
            raise PrematureTrafficStart(msg)
        self._expect_state(SessionState.PROTOCOLS_STARTED, "start traffic")
        self._traffic_generator.start_traffic()
        self._move_to(SessionState.TRAFFIC_RUNNING)

    def stop_traffic(self) -> None:
        """Stop traffic."""
        self._expect_state(SessionState.TRAFFIC_RUNNING, "stop traffic")
        self._traffic_generator.stop_traffic()
        self._move_to(SessionState.TRAFFIC_STOPPED)

    def run_traffic(self) -> None:
        """Start traffic, let it run for the traffic settle time and stop it."""
        self.start_traffic()
        try:
            _LOGGER.info("Running traffic for %ss", self._timings.traffic_settle)
            self._sleep(self._timings.traffic_settle)
        finally:
            self.stop_traffic()

    def reset(self) -> None:
        """Return a finished session to IDLE, dropping its topology."""
        self._expect_state(SessionState.TRAFFIC_STOPPED, "reset the session")
        self._endpoints.clear()
        self._flows.clear()
        self._convergence = None
        self._move_to(SessionState.IDLE)
