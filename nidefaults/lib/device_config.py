"""Device configuration model for the default network instance."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from nidefaults.exceptions import ConfigError
from nidefaults.lib.dataclass.endpoint import EndpointAttributes

if TYPE_CHECKING:
    from collections.abc import Sequence

_LOGGER = logging.getLogger(__name__)

DEFAULT_INSTANCE = "DEFAULT_INSTANCE"


@dataclass(frozen=True)
class Deviations:
    """Vendor specific deviations from the expected device behaviour.

    :param default_network_instance: name of the default network instance
    :param explicit_interface_in_default_vrf: interfaces must be bound to the
        default network instance explicitly
    :param ipv4_enabled: the IPv4 container must be enabled explicitly
    """

    default_network_instance: str = "DEFAULT"
    explicit_interface_in_default_vrf: bool = False
    ipv4_enabled: bool = False


@dataclass(frozen=True)
class RoutingDomainConfig:
    """A network instance and the interfaces bound to it."""

    identifier: str
    type: str = DEFAULT_INSTANCE
    interfaces: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeviceConfig:
    """Configuration tree pushed to the DUT."""

    network_instances: tuple[RoutingDomainConfig, ...]
    interfaces: tuple[tuple[str, EndpointAttributes], ...]
    deviations: Deviations = field(default_factory=Deviations)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the configuration as an OpenConfig JSON tree.

        :return: configuration tree
        :rtype: dict[str, Any]
        """
        instances = []
        for instance in self.network_instances:
            ni_tree: dict[str, Any] = {
                "name": instance.identifier,
                "config": {
                    "name": instance.identifier,
                    "type": f"openconfig-network-instance-types:{instance.type}",
                },
            }
            if self.deviations.explicit_interface_in_default_vrf:
                ni_tree["interfaces"] = {
                    "interface": [
                        {
                            "id": f"{name}.0",
                            "config": {
                                "id": f"{name}.0",
                                "interface": name,
                                "subinterface": 0,
                            },
                        }
                        for name in instance.interfaces
                    ],
                }
            instances.append(ni_tree)
        return {
            "openconfig-network-instance:network-instances": {
                "network-instance": instances,
            },
            "openconfig-interfaces:interfaces": {
                "interface": [
                    attrs.to_interface_config(
                        name,
                        ipv4_enabled=self.deviations.ipv4_enabled,
                    )
                    for name, attrs in self.interfaces
                ],
            },
        }


def build_device_config(
    network_instance: str,
    ports: Sequence[tuple[str, EndpointAttributes]],
    deviations: Deviations | None = None,
) -> DeviceConfig:
    """Build the DUT configuration placing the given ports in one network instance.

    The result only depends on the arguments, calling it again with the same
    input gives an equal configuration.

    :param network_instance: default network instance name
    :type network_instance: str
    :param ports: DUT interface names and their addressing
    :type ports: Sequence[tuple[str, EndpointAttributes]]
    :param deviations: device deviations, defaults to None
    :type deviations: Deviations | None
    :raises ConfigError: on empty names, duplicated interfaces or bad attributes
    :return: device configuration
    :rtype: DeviceConfig
    """
    if not network_instance:
        msg = "Network instance name must not be empty"
        raise ConfigError(msg)
    seen: set[str] = set()
    for name, attrs in ports:
        if not name:
            msg = f"Empty interface name for endpoint {attrs!r}"
            raise ConfigError(msg)
        if not isinstance(attrs, EndpointAttributes):
            msg = f"Interface {name!r} has malformed attributes {attrs!r}"
            raise ConfigError(msg)
        if name in seen:
            msg = f"Interface {name!r} is assigned more than once"
            raise ConfigError(msg)
        seen.add(name)
    return DeviceConfig(
        network_instances=(
            RoutingDomainConfig(
                identifier=network_instance,
                interfaces=tuple(name for name, _ in ports),
            ),
        ),
        interfaces=tuple((name, attrs) for name, attrs in ports),
        deviations=deviations or Deviations(),
    )


def log_query(title: str, tree: dict[str, Any]) -> None:
    """Log a configuration or state tree as indented JSON.

    :param title: what the tree is about
    :type title: str
    :param tree: tree to log
    :type tree: dict[str, Any]
    """
    _LOGGER.info("%s:\n%s", title, json.dumps(tree, indent=2, sort_keys=True))
