"""Default address families Use Cases.

Verify that IPv4 and IPv6 are forwarded by default within the default
network instance without any address family specific configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nidefaults.lib.dataclass.scenario import ScenarioConfig
from nidefaults.lib.device_config import build_device_config, log_query
from nidefaults.lib.loss_verifier import (
    LossVerifier,
    assert_no_loss,
    log_flow_metrics,
    log_port_metrics,
)
from nidefaults.lib.traffic_session import TrafficSessionController

if TYPE_CHECKING:
    from collections.abc import Callable

    from nidefaults.lib.dataclass.flow import Verdict
    from nidefaults.lib.device_config import DeviceConfig
    from nidefaults.templates.dut import DUT
    from nidefaults.templates.traffic_generator import TrafficGenerator

_LOGGER = logging.getLogger(__name__)


def configure_dut(dut: DUT, scenario: ScenarioConfig) -> DeviceConfig:
    """Assign both DUT test ports to the default network instance.

    .. hint:: This Use Case implements statements from the test suite such as:

        - Assign two ports into the default network instance

    :param dut: device under test
    :type dut: DUT
    :param scenario: scenario configuration
    :type scenario: ScenarioConfig
    :raises ConfigError: when the port addressing is malformed
    :raises ConfigRejected: when the DUT refuses the configuration
    :return: the configuration applied to the DUT
    :rtype: DeviceConfig
    """
    device_config = build_device_config(
        scenario.deviations.default_network_instance,
        [
            (dut.port_name(scenario.port1_id), scenario.dut_port1),
            (dut.port_name(scenario.port2_id), scenario.dut_port2),
        ],
        scenario.deviations,
    )
    config_tree = device_config.to_dict()
    log_query("test configuration", config_tree)
    dut.apply_config(config_tree)
    return device_config


def setup_traffic_session(
    ate: TrafficGenerator,
    scenario: ScenarioConfig,
    sleep: Callable[[float], None] | None = None,
) -> TrafficSessionController:
    """Create the ATE topology with an IPv4 and an IPv6 flow from port1 to port2.

    :param ate: traffic generator
    :type ate: TrafficGenerator
    :param scenario: scenario configuration
    :type scenario: ScenarioConfig
    :param sleep: sleep function, defaults to time.sleep
    :type sleep: Callable[[float], None] | None
    :return: controller in IDLE state holding the topology
    :rtype: TrafficSessionController
    """
    kwargs = {"sleep": sleep} if sleep is not None else {}
    session = TrafficSessionController(ate, scenario.timings, **kwargs)
    session.add_endpoint(scenario.port1_id, scenario.ate_port1, scenario.dut_port1)
    session.add_endpoint(scenario.port2_id, scenario.ate_port2, scenario.dut_port2)
    session.build_default_flows(scenario.ate_port1, scenario.ate_port2)
    return session


def verify_default_address_families(
    dut: DUT,
    ate: TrafficGenerator,
    scenario: ScenarioConfig | None = None,
    sleep: Callable[[float], None] | None = None,
) -> dict[str, Verdict]:
    """Verify IPv4 and IPv6 flows cross the default network instance without loss.

    .. hint:: This Use Case implements statements from the test suite such as:

        - Verify that IPv4 and IPv6 are enabled by default in the
          default network instance

    :param dut: device under test
    :type dut: DUT
    :param ate: traffic generator cabled to the DUT test ports
    :type ate: TrafficGenerator
    :param scenario: scenario configuration, defaults to ScenarioConfig()
    :type scenario: ScenarioConfig | None
    :param sleep: sleep function, defaults to time.sleep
    :type sleep: Callable[[float], None] | None
    :raises ConvergenceTimeout: when an ATE port did not resolve its neighbor
    :raises AmbiguousLoss: when a flow transmitted no packets
    :raises TrafficLossError: when a flow lost packets
    :return: verdict per flow
    :rtype: dict[str, Verdict]
    """
    scenario = scenario or ScenarioConfig()
    configure_dut(dut, scenario)

    session = setup_traffic_session(ate, scenario, sleep)
    session.push_topology()
    session.start_protocols()
    session.wait_for_neighbors()
    session.run_traffic()

    flow_names = [flow.name for flow in session.flows]
    log_flow_metrics(ate, flow_names)
    log_port_metrics(ate)

    verdicts = LossVerifier(ate).verify(flow_names)
    session.reset()
    assert_no_loss(verdicts)
    return verdicts
