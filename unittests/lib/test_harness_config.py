"""Unit tests for the nidefaults harness config module."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from nidefaults.exceptions import EnvConfigError
from nidefaults.lib.dataclass.scenario import ATE_PORT1, DUT_PORT2, ScenarioConfig
from nidefaults.lib.device_config import Deviations
from nidefaults.lib.harness_config import (
    HarnessConfig,
    get_json,
    parse_harness_config,
)
from nidefaults.lib.traffic_session import TrafficTimings

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture

_INVENTORY = {
    "lab-1": {
        "devices": [
            {"name": "dut", "type": "oc_dut", "ipaddr": "10.64.1.2"},
            {"name": "ate", "type": "otg_ate", "ipaddr": "10.64.1.3"},
        ],
    },
}


def _harness_config(scenario: dict[str, Any]) -> HarnessConfig:
    return parse_harness_config("lab-1", _INVENTORY, {"scenario": scenario})


def test_parse_harness_config_merges_environment() -> None:
    """Verify environment definitions are merged into the inventory devices."""
    config = parse_harness_config(
        "lab-1",
        _INVENTORY,
        {"environment_def": {"dut": {"ports": {"port1": "Ethernet1"}}}},
    )
    assert config.get_device_config("dut") == {
        "name": "dut",
        "type": "oc_dut",
        "ipaddr": "10.64.1.2",
        "ports": {"port1": "Ethernet1"},
    }
    assert config.get_device_config("ate")["ipaddr"] == "10.64.1.3"
    assert len(config.get_devices_config()) == 2
    assert config.inventory_config is _INVENTORY


def test_parse_harness_config_unknown_resource() -> None:
    """Ensure an unknown resource name raises EnvConfigError."""
    with pytest.raises(EnvConfigError, match="'lab-2' resource not found"):
        parse_harness_config("lab-2", _INVENTORY, {})


def test_get_device_config_unknown_device() -> None:
    """Ensure an unknown device name raises EnvConfigError."""
    with pytest.raises(EnvConfigError, match="Unknown device name"):
        _harness_config({}).get_device_config("cpe")


def test_get_scenario_config_defaults() -> None:
    """Verify an empty scenario section gives the default scenario."""
    assert _harness_config({}).get_scenario_config() == ScenarioConfig()


def test_get_scenario_config_overrides() -> None:
    """Verify scenario sections override the defaults."""
    scenario = _harness_config(
        {
            "timings": {"convergence_deadline": 30, "traffic_settle": "5"},
            "deviations": {
                "default_network_instance": "default",
                "explicit_interface_in_default_vrf": True,
            },
            "addressing": {"ate_port1": {"mac": "02:00:01:01:01:02"}},
            "ports": {"port2": "port3"},
        },
    ).get_scenario_config()
    assert scenario.timings == TrafficTimings(
        convergence_deadline=30.0,
        traffic_settle=5.0,
    )
    assert scenario.deviations == Deviations(
        default_network_instance="default",
        explicit_interface_in_default_vrf=True,
    )
    assert scenario.ate_port1.mac == "02:00:01:01:01:02"
    assert scenario.ate_port1.ipv4 == ATE_PORT1.ipv4
    assert scenario.dut_port2 == DUT_PORT2
    assert (scenario.port1_id, scenario.port2_id) == ("port1", "port3")


@pytest.mark.parametrize(
    ("scenario", "error"),
    [
        ({"timings": {"warmup": 1}}, "Unknown timings"),
        ({"timings": {"traffic_settle": "long"}}, "Invalid timings"),
        ({"timings": {"traffic_settle": -1}}, "must not be negative"),
        ({"timings": [1, 2]}, "scenario.timings must be a JSON object"),
        ({"deviations": {"bgp": True}}, "Unknown deviations"),
        (
            {"deviations": {"ipv4_enabled": "false"}},
            r"Invalid deviations \['ipv4_enabled'\], expected ipv4_enabled: bool",
        ),
        (
            {"deviations": {"default_network_instance": 0}},
            "Invalid deviations",
        ),
        ({"addressing": {"dut_port1": {"ipv4_len": 40}}}, "Invalid addressing"),
        ({"addressing": {"dut_port1": {"vlan": 10}}}, "Invalid addressing"),
    ],
)
def test_get_scenario_config_invalid(scenario: dict[str, Any], error: str) -> None:
    """Ensure malformed scenario sections raise EnvConfigError.

    :param scenario: scenario section of the environment config
    :type scenario: dict[str, Any]
    :param error: expected error message fragment
    :type error: str
    """
    with pytest.raises(EnvConfigError, match=error):
        _harness_config(scenario).get_scenario_config()


def test_get_json_from_file(tmp_path: Path) -> None:
    """Verify JSON documents are read from files.

    :param tmp_path: temporary directory
    :type tmp_path: Path
    """
    env_file = tmp_path / "env.json"
    env_file.write_text(json.dumps({"environment_def": {}}), encoding="utf-8")
    assert get_json(str(env_file)) == {"environment_def": {}}


def test_get_json_from_url(mocker: MockerFixture) -> None:
    """Verify JSON documents are fetched from URLs.

    :param mocker: pytest mock object
    :type mocker: MockerFixture
    """
    response = mocker.Mock(text=json.dumps(_INVENTORY))
    get = mocker.patch(
        "nidefaults.lib.harness_config.requests.get",
        return_value=response,
    )
    assert get_json("https://inventory.example.com/lab.json") == _INVENTORY
    get.assert_called_once_with("https://inventory.example.com/lab.json", timeout=30)
