"""nidefaults environment config module."""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, cast

import jsonmerge
import requests

from nidefaults.exceptions import ConfigError, EnvConfigError
from nidefaults.lib.dataclass.endpoint import EndpointAttributes
from nidefaults.lib.dataclass.scenario import ScenarioConfig
from nidefaults.lib.device_config import Deviations
from nidefaults.lib.traffic_session import TrafficTimings

_ENDPOINTS = ("dut_port1", "dut_port2", "ate_port1", "ate_port2")


class HarnessConfig:
    """nidefaults environment config."""

    _merged_devices_config: list[dict]

    def __init__(
        self,
        merged_config: list[dict],
        env_config: dict[str, Any],
        inventory_config: dict[str, Any],
    ):
        """Initialize harness config.

        :param merged_config: merged devices config
        :param env_config: environment configuration
        :param inventory_config: inventory configuration
        """
        self._env_config = env_config
        self._inventory_config = inventory_config
        self._merged_devices_config = merged_config

    @property
    def env_config(self) -> dict[str, Any]:
        """Environment config dictionary."""
        return self._env_config

    @property
    def inventory_config(self) -> dict[str, Any]:
        """Inventory config dictionary."""
        return self._inventory_config

    def get_devices_config(self) -> list[dict]:
        """Get merged devices config.

        :returns: merged devices config
        """
        return self._merged_devices_config

    def get_device_config(self, device_name: str) -> dict[str, Any]:
        """Get device merged config.

        :param device_name: device name
        :returns: merged device config
        :raises EnvConfigError: when given device name is unknown
        """
        for device_config in self._merged_devices_config:
            if device_config.get("name") == device_name:
                return device_config
        msg = f"{device_name} - Unknown device name"
        raise EnvConfigError(msg)

    def _get_scenario_section(self, section: str) -> dict[str, Any]:
        value = self.env_config.get("scenario", {}).get(section, {})
        if not isinstance(value, dict):
            msg = f"scenario.{section} must be a JSON object"
            raise EnvConfigError(msg)
        return value

    def get_timings(self) -> TrafficTimings:
        """Return the traffic timings of the env config ["scenario"]["timings"].

        Missing entries keep their default value.

        :return: traffic timings
        :raises EnvConfigError: on unknown or non numeric entries
        """
        timings = self._get_scenario_section("timings")
        known = {item.name for item in fields(TrafficTimings)}
        if unknown := set(timings) - known:
            msg = f"Unknown timings {sorted(unknown)}, expected some of {sorted(known)}"
            raise EnvConfigError(msg)
        try:
            values = {name: float(value) for name, value in timings.items()}
        except (TypeError, ValueError) as e:
            raise EnvConfigError(f"Invalid timings {timings}") from e
        if negative := [name for name, value in values.items() if value < 0]:
            msg = f"Timings must not be negative: {negative}"
            raise EnvConfigError(msg)
        return TrafficTimings(**values)

    def get_deviations(self) -> Deviations:
        """Return the device deviations of the env config ["scenario"]["deviations"].

        :return: device deviations
        :raises EnvConfigError: on unknown entries or values of the wrong type
        """
        deviations = self._get_scenario_section("deviations")
        known = {item.name: type(item.default) for item in fields(Deviations)}
        if unknown := set(deviations) - set(known):
            msg = (
                f"Unknown deviations {sorted(unknown)}, expected some of {sorted(known)}"
            )
            raise EnvConfigError(msg)
        if invalid := [
            name
            for name, value in deviations.items()
            if not isinstance(value, known[name])
        ]:
            msg = (
                f"Invalid deviations {sorted(invalid)}, expected "
                f"{', '.join(f'{name}: {known[name].__name__}' for name in invalid)}"
            )
            raise EnvConfigError(msg)
        return Deviations(**deviations)

    def get_scenario_config(self) -> ScenarioConfig:
        """Return the scenario configuration.

        Endpoint addressing of the env config ["scenario"]["addressing"] is
        merged over the default addressing plan.

        :return: scenario configuration
        :raises EnvConfigError: on malformed endpoint addressing
        """
        addressing = self._get_scenario_section("addressing")
        defaults = ScenarioConfig()
        endpoints: dict[str, EndpointAttributes] = {}
        for name in _ENDPOINTS:
            default: EndpointAttributes = getattr(defaults, name)
            overrides = addressing.get(name, {})
            try:
                endpoints[name] = EndpointAttributes(
                    **jsonmerge.merge(asdict(default), overrides),
                )
            except (ConfigError, TypeError) as e:
                raise EnvConfigError(f"Invalid addressing for {name}: {e}") from e
        ports = self._get_scenario_section("ports")
        return ScenarioConfig(
            **endpoints,
            port1_id=ports.get("port1", defaults.port1_id),
            port2_id=ports.get("port2", defaults.port2_id),
            timings=self.get_timings(),
            deviations=self.get_deviations(),
        )


def get_json(resource_name: str) -> dict[str, Any]:
    """Load a JSON document from a file path or an http(s) URL.

    :param resource_name: file path or URL
    :return: parsed JSON document
    """
    json_dict: str
    if resource_name.startswith(("http://", "https://")):
        json_dict = requests.get(resource_name, timeout=30).text
    else:
        json_dict = Path(resource_name).read_text(encoding="utf-8")
    return cast(dict[str, Any], json.loads(json_dict))


def parse_harness_config(
    resource_name: str,
    inventory_config: dict[str, Any],
    env_config: dict[str, Any],
) -> HarnessConfig:
    """Merge the inventory of a resource with the environment config.

    :param resource_name: inventory resource name
    :param inventory_config: inventory configuration
    :param env_config: environment configuration
    :returns: harness configuration instance
    :raises EnvConfigError: when the resource is not in the inventory
    """
    if resource_name not in inventory_config:
        msg = f"{resource_name!r} resource not found in inventory config"
        raise EnvConfigError(msg)
    resource_config = inventory_config[resource_name]
    environment_def = env_config.get("environment_def", {})
    merged_devices_config = []
    for device in resource_config.get("devices", []):
        device_name = device.get("name")
        merged_devices_config.append(
            jsonmerge.merge(device, environment_def[device_name])
            if device_name in environment_def
            else device,
        )
    return HarnessConfig(merged_devices_config, env_config, inventory_config)
