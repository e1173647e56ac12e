"""Packet loss verification of traffic flows."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rich.box import HORIZONTALS
from rich.console import Console
from rich.table import Table

from nidefaults.exceptions import TrafficLossError
from nidefaults.lib.dataclass.flow import Verdict

if TYPE_CHECKING:
    from collections.abc import Iterable

    from nidefaults.lib.dataclass.flow import FlowCounters
    from nidefaults.templates.traffic_generator import TrafficGenerator

_LOGGER = logging.getLogger(__name__)

_PORT_METRIC_COLUMNS = (
    "name",
    "frames_tx",
    "frames_rx",
    "bytes_tx",
    "bytes_rx",
    "frames_tx_rate",
    "frames_rx_rate",
)


def calculate_loss_pct(counters: FlowCounters) -> float:
    """Return the packet loss of a flow in percent.

    :param counters: flow counters
    :type counters: FlowCounters
    :raises AmbiguousLoss: when the flow transmitted no packets
    :return: loss percentage
    :rtype: float
    """
    return counters.loss_pct


def classify(counters: FlowCounters) -> Verdict:
    """Classify a flow as passed when it lost no packets.

    :param counters: flow counters
    :type counters: FlowCounters
    :return: flow verdict
    :rtype: Verdict
    """
    loss_pct = calculate_loss_pct(counters)
    return Verdict(
        flow_name=counters.flow_name,
        passed=loss_pct == 0,
        loss_pct=loss_pct,
        counters=counters,
    )


class LossVerifier:
    """Read flow counters from a traffic generator and judge them."""

    def __init__(self, traffic_generator: TrafficGenerator) -> None:
        """Initialize the loss verifier.

        :param traffic_generator: traffic generator holding the counters
        :type traffic_generator: TrafficGenerator
        """
        self._traffic_generator = traffic_generator

    def verify(self, flow_names: Iterable[str]) -> dict[str, Verdict]:
        """Return the verdict of every given flow.

        :param flow_names: names of the flows to verify
        :type flow_names: Iterable[str]
        :raises AmbiguousLoss: when a flow transmitted no packets
        :return: verdict per flow name
        :rtype: dict[str, Verdict]
        """
        verdicts = {}
        for flow_name in flow_names:
            counters = self._traffic_generator.get_flow_counters(flow_name)
            verdict = classify(counters)
            if verdict.passed:
                _LOGGER.info("Flow %s passed, no packet lost", flow_name)
            else:
                _LOGGER.error(
                    "Flow %s lost %s%% of packets (tx=%s, rx=%s)",
                    flow_name,
                    verdict.loss_pct,
                    counters.tx_packets,
                    counters.rx_packets,
                )
            verdicts[flow_name] = verdict
        return verdicts


def assert_no_loss(verdicts: dict[str, Verdict]) -> None:
    """Raise when any flow lost packets.

    :param verdicts: verdicts as returned by LossVerifier.verify
    :type verdicts: dict[str, Verdict]
    :raises TrafficLossError: naming every failing flow
    """
    if failed := [verdict for verdict in verdicts.values() if not verdict.passed]:
        raise TrafficLossError(failed)


def _log_table(table: Table) -> None:
    console = Console(width=140)
    with console.capture() as capture:
        console.print(table)
    _LOGGER.info("\n%s", capture.get())


def log_flow_metrics(
    traffic_generator: TrafficGenerator,
    flow_names: Iterable[str],
) -> None:
    """Log the counters of the given flows as a table.

    :param traffic_generator: traffic generator holding the counters
    :type traffic_generator: TrafficGenerator
    :param flow_names: names of the flows
    :type flow_names: Iterable[str]
    """
    table = Table(title="Flow Metrics", box=HORIZONTALS, show_lines=True)
    for column in ("Flow", "Tx Packets", "Rx Packets", "Loss %"):
        table.add_column(column, justify="right" if column != "Flow" else None)
    for flow_name in flow_names:
        counters = traffic_generator.get_flow_counters(flow_name)
        loss = f"{counters.loss_pct:.2f}" if counters.tx_packets > 0 else "n/a"
        table.add_row(
            flow_name,
            str(counters.tx_packets),
            str(counters.rx_packets),
            loss,
        )
    _log_table(table)


def log_port_metrics(traffic_generator: TrafficGenerator) -> None:
    """Log the metrics of all generator ports as a table.

    :param traffic_generator: traffic generator
    :type traffic_generator: TrafficGenerator
    """
    table = Table(title="Port Metrics", box=HORIZONTALS, show_lines=True)
    for column in _PORT_METRIC_COLUMNS:
        table.add_column(column.replace("_", " ").title())
    metrics: list[dict[str, Any]] = traffic_generator.get_port_metrics()
    for port in metrics:
        table.add_row(*(str(port.get(column, "")) for column in _PORT_METRIC_COLUMNS))
    _log_table(table)
