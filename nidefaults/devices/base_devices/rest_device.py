"""Base device for equipment driven through a JSON REST API."""

from __future__ import annotations

import logging
from argparse import Namespace
from typing import Any
from urllib.parse import urljoin

import httpx

from nidefaults import hookimpl
from nidefaults.devices.base_devices.nidefaults_device import NIDefaultsDevice
from nidefaults.exceptions import DeviceConnectionError

_DEFAULT_TIMEOUT = 60
_LOGGER = logging.getLogger(__name__)


class RESTDevice(NIDefaultsDevice):
    """Device reached over HTTP(S) with JSON payloads."""

    def __init__(self, config: dict, cmdline_args: Namespace) -> None:
        """Initialize the REST device.

        :param config: device configuration
        :type config: dict
        :param cmdline_args: command line arguments
        :type cmdline_args: Namespace
        """
        self._disable_log_messages_from_libraries()
        super().__init__(config, cmdline_args)
        self._client: httpx.Client | None = None
        self._base_url = (
            f"{self.config.get('protocol', 'https')}://"
            f"{self.config.get('ipaddr')}:{self.config.get('http_port', 443)}"
        )

    def _disable_log_messages_from_libraries(self) -> None:
        """Disable logs from httpx."""
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    def _init_client(self) -> None:
        if self._client is None:
            auth = None
            if username := self.config.get("http_username"):
                auth = (username, self.config.get("http_password", ""))
            self._client = httpx.Client(
                auth=auth,
                verify=self.config.get("verify_ssl", False),
                timeout=self.config.get("http_timeout", _DEFAULT_TIMEOUT),
            )

    def _get_client(self) -> httpx.Client:
        self._init_client()
        return self._client

    def _request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,  # noqa: ANN401
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        request_url = urljoin(self._base_url, endpoint)
        try:
            return self._get_client().request(
                method,
                request_url,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            msg = f"{self.device_name} - {method} {request_url} failed: {exc}"
            raise DeviceConnectionError(msg) from exc

    @hookimpl
    def nidefaults_device_boot(self) -> None:
        """nidefaults hook implementation to connect to the device."""
        _LOGGER.info("Connecting to %s(%s) device", self.device_name, self.device_type)
        self._init_client()

    @hookimpl
    def nidefaults_shutdown_device(self) -> None:
        """nidefaults hook implementation to release the device connection."""
        _LOGGER.info("Shutdown %s(%s) device", self.device_name, self.device_type)
        if self._client is not None:
            self._client.close()
            self._client = None
