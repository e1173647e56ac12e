"""nidefaults exceptions for all plugins and modules used by the framework."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nidefaults.lib.dataclass.flow import FlowCounters, Verdict


class NIDefaultsException(Exception):
    """Base exception all nidefaults exceptions inherit from."""


class DeviceConnectionError(NIDefaultsException):
    """Raise this on device connection error."""


class EnvConfigError(NIDefaultsException):
    """Raise this on environment configuration error."""


class DeviceNotFound(NIDefaultsException):
    """Raise this on device is not available."""


class NotSupportedError(NIDefaultsException):
    """Raise this on feature not supported."""


class ConfigError(NIDefaultsException):
    """Raise this on malformed input to the device config builder."""


class ConfigRejected(NIDefaultsException):
    """Raise this when the DUT refuses a configuration tree."""


class TopologyPushError(NIDefaultsException):
    """Raise this when the traffic generator rejects a topology."""


class ConvergenceTimeout(NIDefaultsException):
    """Raise this when endpoints did not converge before the deadline."""

    def __init__(self, endpoints: tuple[str, ...], observed: dict[str, object]):
        """Initialize the exception.

        :param endpoints: names of the endpoints that did not converge
        :type endpoints: tuple[str, ...]
        :param observed: last observed state per unresolved endpoint
        :type observed: dict[str, object]
        """
        self.endpoints = endpoints
        self.observed = observed
        details = ", ".join(
            f"{endpoint} (last observed: {observed.get(endpoint)!r})"
            for endpoint in endpoints
        )
        super().__init__(f"Endpoints did not converge: {details}")


class PrematureTrafficStart(NIDefaultsException):
    """Raise this when traffic is started before every endpoint converged."""


class InvalidSessionTransition(NIDefaultsException):
    """Raise this on a traffic session transition from the wrong state."""


class AmbiguousLoss(NIDefaultsException):
    """Raise this when a flow transmitted no packets."""

    def __init__(self, counters: FlowCounters):
        """Initialize the exception.

        :param counters: counters read for the flow
        :type counters: FlowCounters
        """
        self.flow_name = counters.flow_name
        self.counters = counters
        super().__init__(
            f"Flow {counters.flow_name!r} transmitted no packets "
            f"(tx={counters.tx_packets}, rx={counters.rx_packets}), "
            "loss cannot be computed",
        )


class TrafficLossError(NIDefaultsException):
    """Raise this when one or more flows lost packets."""

    def __init__(self, verdicts: list[Verdict]):
        """Initialize the exception.

        :param verdicts: verdicts of the failing flows
        :type verdicts: list[Verdict]
        """
        self.verdicts = verdicts
        details = "; ".join(
            f"LossPct for flow {verdict.flow_name}: got {verdict.loss_pct}, want 0 "
            f"(tx={verdict.counters.tx_packets}, rx={verdict.counters.rx_packets})"
            for verdict in verdicts
        )
        super().__init__(details)
