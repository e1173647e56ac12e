"""nidefaults core plugin."""

from __future__ import annotations

import logging
from argparse import ArgumentParser, ArgumentTypeError, Namespace
from collections import ChainMap
from typing import TYPE_CHECKING, Any

from pluggy import PluginManager

from nidefaults import hookimpl
from nidefaults.devices.base_devices import NIDefaultsDevice
from nidefaults.devices.oc_dut import OpenConfigDUT
from nidefaults.devices.otg_ate import OTGTrafficGenerator
from nidefaults.exceptions import EnvConfigError
from nidefaults.lib.device_manager import DeviceManager
from nidefaults.lib.harness_config import HarnessConfig, parse_harness_config
from nidefaults.plugins.hookspecs import devices as Devices
from nidefaults.templates.dut import DUT
from nidefaults.templates.traffic_generator import TrafficGenerator
from nidefaults.use_cases.default_address_families import (
    verify_default_address_families,
)

if TYPE_CHECKING:
    from nidefaults.lib.dataclass.flow import Verdict

_LOGGER = logging.getLogger(__name__)


def _non_empty_str(arg: str) -> str:
    """Type to check nidefaults command line arguments empty value.

    :param arg: command line argument
    :type arg: str
    :raises ArgumentTypeError: raises argparse ArgumentTypeError
                    for empty argument values
    :return: arg if the argument is non empty
    :rtype: str
    """
    if arg:
        return arg
    message = "Argument value should not be empty"
    raise ArgumentTypeError(message)


@hookimpl
def nidefaults_add_hookspecs(plugin_manager: PluginManager) -> None:
    """Add nidefaults core plugin hookspecs.

    :param plugin_manager: plugin manager
    :type plugin_manager: PluginManager
    """
    plugin_manager.add_hookspecs(Devices)


@hookimpl
def nidefaults_add_cmdline_args(argparser: ArgumentParser) -> None:
    """Add nidefaults command line arguments.

    :param argparser: argument parser
    :type argparser: ArgumentParser
    """
    argparser.add_argument(
        "--resource-name",
        type=_non_empty_str,
        required=True,
        help="Name of the inventory resource holding the DUT and the ATE",
    )
    argparser.add_argument(
        "--env-config",
        type=_non_empty_str,
        required=True,
        help="Environment JSON config file path or URL",
    )
    argparser.add_argument(
        "--inventory-config",
        type=_non_empty_str,
        required=True,
        help="Inventory JSON config file path or URL",
    )
    argparser.add_argument(
        "--ignore-devices",
        default="",
        help="Ignore the given devices (names are comma separated)",
    )


@hookimpl
def nidefaults_cmdline_parse(
    argparser: ArgumentParser,
    cmdline_args: list[str],
) -> Namespace:
    """Parse command line arguments.

    :param argparser: argument parser instance
    :type argparser: ArgumentParser
    :param cmdline_args: command line arguments list
    :type cmdline_args: list[str]
    :return: command line arguments
    :rtype: Namespace
    """
    return argparser.parse_args(args=cmdline_args)


@hookimpl
def nidefaults_parse_config(
    cmdline_args: Namespace,
    inventory_config: dict[str, Any],
    env_config: dict[str, Any],
) -> HarnessConfig:
    """Parse the configs.

    :param cmdline_args: command line arguments
    :type cmdline_args: Namespace
    :param inventory_config: inventory json
    :type inventory_config: dict[str, Any]
    :param env_config: environment json
    :type env_config: dict[str, Any]
    :return: the harness config
    :rtype: HarnessConfig
    """
    return parse_harness_config(
        cmdline_args.resource_name,
        inventory_config,
        env_config,
    )


@hookimpl
def nidefaults_add_devices() -> dict[str, type[NIDefaultsDevice]]:
    """Add devices to known devices for deployment.

    :returns: devices dictionary
    """
    return {
        "oc_dut": OpenConfigDUT,
        "otg_ate": OTGTrafficGenerator,
    }


@hookimpl
def nidefaults_register_devices(
    config: HarnessConfig,
    cmdline_args: Namespace,
    plugin_manager: PluginManager,
) -> DeviceManager:
    """Register devices as plugin with nidefaults.

    :param config: harness config
    :type config: HarnessConfig
    :param cmdline_args: command line arguments
    :type cmdline_args: Namespace
    :param plugin_manager: plugin manager
    :type plugin_manager: PluginManager
    :raises EnvConfigError: when a device in inventory is unknown to nidefaults
    :return: device manager with all registered devices
    :rtype: DeviceManager
    """
    device_manager = DeviceManager(plugin_manager)
    known_devices_list = ChainMap(*plugin_manager.hook.nidefaults_add_devices())
    to_be_ignored = cmdline_args.ignore_devices.split(",")
    for device_config in config.get_devices_config():
        if device_config.get("name") in to_be_ignored:
            _LOGGER.warning("Ignoring '%s'", device_config.get("name"))
            continue
        device_type = device_config.get("type")
        if device_type in known_devices_list:
            device_obj = known_devices_list.get(device_type)(
                device_config,
                cmdline_args,
            )
            device_manager.register_device(device_obj)
        else:
            msg = (
                f"{device_type} - Unknown nidefaults device, please register "
                f"{device_type} device using nidefaults_add_devices hook"
            )
            raise EnvConfigError(msg)

    return device_manager


@hookimpl
def nidefaults_setup_env(
    plugin_manager: PluginManager,
    device_manager: DeviceManager,
) -> DeviceManager:
    """Connect all the registered devices.

    :param plugin_manager: plugin manager
    :type plugin_manager: PluginManager
    :param device_manager: device manager instance
    :type device_manager: DeviceManager
    :return: device manager with all devices connected
    :rtype: DeviceManager
    """
    plugin_manager.hook.nidefaults_device_boot()
    return device_manager


@hookimpl
def nidefaults_run_scenario(
    config: HarnessConfig,
    device_manager: DeviceManager,
) -> dict[str, Verdict]:
    """Run the default address families scenario on the registered devices.

    :param config: harness config
    :type config: HarnessConfig
    :param device_manager: device manager instance
    :type device_manager: DeviceManager
    :return: verdict per flow
    :rtype: dict[str, Verdict]
    """
    return verify_default_address_families(
        device_manager.get_device_by_type(DUT),  # type: ignore[type-abstract]
        device_manager.get_device_by_type(TrafficGenerator),  # type: ignore[type-abstract]
        config.get_scenario_config(),
    )


@hookimpl
def nidefaults_release_devices(plugin_manager: PluginManager) -> None:
    """Shutdown all the devices before releasing them.

    :param plugin_manager: plugin manager instance
    :type plugin_manager: PluginManager
    """
    plugin_manager.hook.nidefaults_shutdown_device()
