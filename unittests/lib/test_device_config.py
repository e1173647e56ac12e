"""Unit tests for the device config builder."""

from __future__ import annotations

import logging

import pytest

from nidefaults.exceptions import ConfigError
from nidefaults.lib.dataclass.scenario import DUT_PORT1, DUT_PORT2
from nidefaults.lib.device_config import (
    DEFAULT_INSTANCE,
    Deviations,
    RoutingDomainConfig,
    build_device_config,
    log_query,
)

_PORTS = [("Ethernet1", DUT_PORT1), ("Ethernet2", DUT_PORT2)]


def test_build_device_config_is_idempotent() -> None:
    """Verify the builder gives equal results for equal input."""
    first = build_device_config("DEFAULT", _PORTS)
    second = build_device_config("DEFAULT", list(_PORTS))
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_build_device_config_routing_domain() -> None:
    """Verify one default instance binds both interfaces."""
    device_config = build_device_config("DEFAULT", _PORTS)
    assert device_config.network_instances == (
        RoutingDomainConfig(
            identifier="DEFAULT",
            type=DEFAULT_INSTANCE,
            interfaces=("Ethernet1", "Ethernet2"),
        ),
    )
    tree = device_config.to_dict()
    (instance,) = tree["openconfig-network-instance:network-instances"][
        "network-instance"
    ]
    assert instance["config"] == {
        "name": "DEFAULT",
        "type": "openconfig-network-instance-types:DEFAULT_INSTANCE",
    }
    assert "interfaces" not in instance
    interfaces = tree["openconfig-interfaces:interfaces"]["interface"]
    assert [interface["name"] for interface in interfaces] == ["Ethernet1", "Ethernet2"]


def test_build_device_config_explicit_binding() -> None:
    """Verify interfaces are listed in the instance when the deviation asks."""
    tree = build_device_config(
        "default",
        _PORTS,
        Deviations(
            default_network_instance="default",
            explicit_interface_in_default_vrf=True,
        ),
    ).to_dict()
    (instance,) = tree["openconfig-network-instance:network-instances"][
        "network-instance"
    ]
    assert instance["interfaces"]["interface"] == [
        {
            "id": "Ethernet1.0",
            "config": {"id": "Ethernet1.0", "interface": "Ethernet1", "subinterface": 0},
        },
        {
            "id": "Ethernet2.0",
            "config": {"id": "Ethernet2.0", "interface": "Ethernet2", "subinterface": 0},
        },
    ]


@pytest.mark.parametrize(
    ("network_instance", "ports", "error"),
    [
        ("DEFAULT", [("", DUT_PORT1)], "Empty interface name"),
        ("", _PORTS, "Network instance name must not be empty"),
        (
            "DEFAULT",
            [("Ethernet1", DUT_PORT1), ("Ethernet1", DUT_PORT2)],
            "assigned more than once",
        ),
        ("DEFAULT", [("Ethernet1", {"ipv4": "192.0.2.0"})], "malformed attributes"),
    ],
)
def test_build_device_config_invalid(
    network_instance: str,
    ports: list,
    error: str,
) -> None:
    """Ensure malformed input raises ConfigError.

    :param network_instance: network instance name
    :type network_instance: str
    :param ports: interface names and attributes
    :type ports: list
    :param error: expected error message fragment
    :type error: str
    """
    with pytest.raises(ConfigError, match=error):
        build_device_config(network_instance, ports)


def test_log_query(caplog: pytest.LogCaptureFixture) -> None:
    """Verify the configuration tree is logged as JSON.

    :param caplog: log capture fixture
    :type caplog: pytest.LogCaptureFixture
    """
    with caplog.at_level(logging.INFO):
        log_query("test configuration", {"a": {"b": 1}})
    assert "test configuration" in caplog.text
    assert '"b": 1' in caplog.text
