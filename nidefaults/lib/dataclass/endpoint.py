"""Data classes describing the addressing of a test endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Interface, IPv6Interface, ip_address
from typing import Any

from netaddr import EUI, mac_unix_expanded
from netaddr.core import AddrFormatError

from nidefaults.exceptions import ConfigError

_IPV4_MAX_PREFIX = 32
_IPV6_MAX_PREFIX = 128


def _validate_address(value: str, version: int, max_prefix: int, prefix: int) -> None:
    try:
        address = ip_address(value)
    except ValueError as exc:
        msg = f"Invalid IPv{version} address {value!r}"
        raise ConfigError(msg) from exc
    if address.version != version:
        msg = f"{value!r} is not an IPv{version} address"
        raise ConfigError(msg)
    if not 0 <= prefix <= max_prefix:
        msg = f"Invalid IPv{version} prefix length {prefix} for {value}"
        raise ConfigError(msg)


@dataclass(frozen=True)
class EndpointAttributes:  # pylint: disable=too-many-instance-attributes
    """Addressing of one side of a link, DUT port or emulated ATE port.

    Instances are validated on construction and never change afterwards.
    MAC addresses are normalised to the unix expanded format.
    """

    name: str
    ipv4: str
    ipv4_len: int
    ipv6: str
    ipv6_len: int
    mac: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        """Validate the endpoint attributes.

        :raises ConfigError: when an address, prefix length or MAC is malformed
        """
        _validate_address(self.ipv4, 4, _IPV4_MAX_PREFIX, self.ipv4_len)
        _validate_address(self.ipv6, 6, _IPV6_MAX_PREFIX, self.ipv6_len)
        if self.mac is not None:
            try:
                normalised = str(EUI(self.mac, dialect=mac_unix_expanded))
            except (AddrFormatError, TypeError, ValueError) as exc:
                msg = f"Invalid MAC address {self.mac!r} for endpoint {self.name!r}"
                raise ConfigError(msg) from exc
            object.__setattr__(self, "mac", normalised)

    @property
    def ipv4_interface(self) -> IPv4Interface:
        """IPv4 address with its prefix length."""
        return IPv4Interface(f"{self.ipv4}/{self.ipv4_len}")

    @property
    def ipv6_interface(self) -> IPv6Interface:
        """IPv6 address with its prefix length."""
        return IPv6Interface(f"{self.ipv6}/{self.ipv6_len}")

    @property
    def eth_name(self) -> str:
        """Name of the emulated ethernet interface."""
        return f"{self.name}.Eth"

    @property
    def ipv4_device_name(self) -> str:
        """Name of the emulated IPv4 stack, used as flow tx/rx name."""
        return f"{self.name}.IPv4"

    @property
    def ipv6_device_name(self) -> str:
        """Name of the emulated IPv6 stack, used as flow tx/rx name."""
        return f"{self.name}.IPv6"

    def require_mac(self) -> str:
        """Return the MAC address of an emulated endpoint.

        :return: MAC address
        :rtype: str
        :raises ConfigError: when the endpoint has no MAC address
        """
        if not self.name:
            msg = "Emulated endpoints must have a name"
            raise ConfigError(msg)
        if self.mac is None:
            msg = f"Emulated endpoint {self.name!r} has no MAC address"
            raise ConfigError(msg)
        return self.mac

    def to_interface_config(
        self,
        interface_name: str,
        ipv4_enabled: bool = False,
    ) -> dict[str, Any]:
        """Return the OpenConfig interface fragment for this endpoint.

        The interface gets a single subinterface (index 0) holding both the
        IPv4 and the IPv6 address. No address family is enabled explicitly
        unless ``ipv4_enabled`` is requested by a device deviation.

        :param interface_name: name of the DUT interface
        :type interface_name: str
        :param ipv4_enabled: set ``enabled`` on the IPv4 container, defaults to False
        :type ipv4_enabled: bool
        :return: interface config fragment
        :rtype: dict[str, Any]
        """
        ipv4: dict[str, Any] = {
            "addresses": {
                "address": [
                    {
                        "ip": self.ipv4,
                        "config": {"ip": self.ipv4, "prefix-length": self.ipv4_len},
                    },
                ],
            },
        }
        if ipv4_enabled:
            ipv4["config"] = {"enabled": True}
        config: dict[str, Any] = {
            "name": interface_name,
            "type": "iana-if-type:ethernetCsmacd",
            "enabled": True,
        }
        if self.description:
            config["description"] = self.description
        return {
            "name": interface_name,
            "config": config,
            "subinterfaces": {
                "subinterface": [
                    {
                        "index": 0,
                        "config": {"index": 0, "enabled": True},
                        "openconfig-if-ip:ipv4": ipv4,
                        "openconfig-if-ip:ipv6": {
                            "addresses": {
                                "address": [
                                    {
                                        "ip": self.ipv6,
                                        "config": {
                                            "ip": self.ipv6,
                                            "prefix-length": self.ipv6_len,
                                        },
                                    },
                                ],
                            },
                        },
                    },
                ],
            },
        }
