"""Unit tests for the OpenConfig DUT device."""

from __future__ import annotations

import json
from argparse import Namespace

import httpx
import pytest

from nidefaults.devices.oc_dut import OpenConfigDUT
from nidefaults.exceptions import ConfigRejected, DeviceConnectionError

_CONFIG = {
    "name": "dut",
    "type": "oc_dut",
    "ipaddr": "10.64.1.2",
    "http_port": 443,
    "http_username": "admin",
    "http_password": "admin",
    "ports": {"port1": "Ethernet1", "port2": "Ethernet2"},
}


def _dut(handler: httpx.MockTransport) -> OpenConfigDUT:
    device = OpenConfigDUT(dict(_CONFIG), Namespace())
    device._client = httpx.Client(transport=handler)  # pylint: disable=protected-access
    return device


def test_port_name() -> None:
    """Verify DUT interface names come from the inventory."""
    dut = OpenConfigDUT(dict(_CONFIG), Namespace())
    assert dut.port_name("port1") == "Ethernet1"
    assert dut.device_name == "dut"
    assert dut.device_type == "oc_dut"


def test_apply_config() -> None:
    """Verify the configuration tree is merged with a RESTCONF PATCH."""
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    _dut(httpx.MockTransport(_handler)).apply_config({"a": 1})
    (request,) = seen
    assert request.method == "PATCH"
    assert request.url.host == "10.64.1.2"
    assert request.url.path == "/restconf/data"
    assert request.headers["Content-Type"] == "application/yang-data+json"
    assert json.loads(request.content) == {"a": 1}


def test_apply_config_rejected() -> None:
    """Ensure a refused configuration raises ConfigRejected."""
    dut = _dut(
        httpx.MockTransport(lambda _: httpx.Response(400, text="invalid value")),
    )
    with pytest.raises(ConfigRejected, match="400 invalid value"):
        dut.apply_config({"a": 1})


def test_get_state() -> None:
    """Verify single leaf state answers are unwrapped."""
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"openconfig-interfaces:oper-status": "UP"},
        )

    dut = _dut(httpx.MockTransport(_handler))
    path = "openconfig-interfaces:interfaces/interface=Ethernet1/state/oper-status"
    assert dut.get_state(path) == "UP"
    assert seen[0].url.path == f"/restconf/data/{path}"


@pytest.mark.parametrize("status_code", [404, 204])
def test_get_state_absent(status_code: int) -> None:
    """Verify absent state is returned as None.

    :param status_code: HTTP status of the answer
    :type status_code: int
    """
    dut = _dut(httpx.MockTransport(lambda _: httpx.Response(status_code)))
    assert dut.get_state("openconfig-interfaces:interfaces") is None


def test_get_state_error() -> None:
    """Ensure device errors while reading state are raised."""
    dut = _dut(httpx.MockTransport(lambda _: httpx.Response(500, text="crash")))
    with pytest.raises(DeviceConnectionError, match="500 crash"):
        dut.get_state("openconfig-interfaces:interfaces")
