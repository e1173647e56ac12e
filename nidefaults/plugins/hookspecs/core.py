"""nidefaults main hook specifications."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace
from typing import TYPE_CHECKING, Any

from pluggy import PluginManager

from nidefaults import hookspec
from nidefaults.devices.base_devices import NIDefaultsDevice
from nidefaults.lib.device_manager import DeviceManager
from nidefaults.lib.harness_config import HarnessConfig

if TYPE_CHECKING:
    from nidefaults.lib.dataclass.flow import Verdict

# pylint: disable=unused-argument


@hookspec
def nidefaults_add_hookspecs(plugin_manager: PluginManager) -> None:
    """Add new hookspecs to extend and/or update the framework.

    :param plugin_manager: plugin manager
    :type plugin_manager: PluginManager
    """


@hookspec
def nidefaults_add_cmdline_args(argparser: ArgumentParser) -> None:
    """Add new command line argument(s).

    :param argparser: argument parser
    :type argparser: ArgumentParser
    """


@hookspec(firstresult=True)
def nidefaults_cmdline_parse(
    argparser: ArgumentParser,
    cmdline_args: list[str],
) -> Namespace:
    """Parse command line arguments.

    # noqa: DAR202

    :param argparser: argument parser
    :type argparser: ArgumentParser
    :param cmdline_args: command line arguments
    :type cmdline_args: list[str]
    :return: command line arguments
    :rtype: Namespace
    """


@hookspec(firstresult=True)
def nidefaults_parse_config(
    cmdline_args: Namespace,
    inventory_config: dict[str, Any],
    env_config: dict[str, Any],
) -> HarnessConfig:
    """Parse the config.

    This hook allows for the modification (if needed) of the configuration files,
    like inventory and environment, by using cmd line overrides.

    # noqa: DAR202

    :param cmdline_args: command line arguments
    :type cmdline_args: Namespace
    :param inventory_config: inventory json
    :type inventory_config: dict[str, Any]
    :param env_config: environment json
    :type env_config: dict[str, Any]
    :return: a HarnessConfig object
    :rtype: HarnessConfig
    """


@hookspec
def nidefaults_add_devices() -> dict[str, type[NIDefaultsDevice]]:
    """Add devices to known devices for deployment.

    # noqa: DAR202

    :return: devices dictionary
    :rtype: dict[str, type[NIDefaultsDevice]]
    """


@hookspec(firstresult=True)
def nidefaults_register_devices(
    config: HarnessConfig,
    cmdline_args: Namespace,
    plugin_manager: PluginManager,
) -> DeviceManager:
    """Register devices as plugin with nidefaults.

    # noqa: DAR202

    :param config: harness config
    :type config: HarnessConfig
    :param cmdline_args: command line arguments
    :type cmdline_args: Namespace
    :param plugin_manager: plugin manager
    :type plugin_manager: PluginManager
    :return: device manager with all registered devices
    :rtype: DeviceManager
    """


@hookspec(firstresult=True)
def nidefaults_setup_env(
    config: HarnessConfig,
    cmdline_args: Namespace,
    plugin_manager: PluginManager,
    device_manager: DeviceManager,
) -> DeviceManager:
    """Connect all registered devices.

    # noqa: DAR202

    :param config: harness config
    :type config: HarnessConfig
    :param cmdline_args: command line arguments
    :type cmdline_args: Namespace
    :param plugin_manager: plugin manager
    :type plugin_manager: PluginManager
    :param device_manager: device manager instance
    :type device_manager: DeviceManager
    :return: device manager with all devices connected
    :rtype: DeviceManager
    """


@hookspec(firstresult=True)
def nidefaults_run_scenario(
    config: HarnessConfig,
    device_manager: DeviceManager,
) -> dict[str, Verdict]:
    """Run the default address families scenario.

    # noqa: DAR202

    :param config: harness config
    :type config: HarnessConfig
    :param device_manager: device manager instance
    :type device_manager: DeviceManager
    :return: verdict per flow
    :rtype: dict[str, Verdict]
    """


@hookspec
def nidefaults_release_devices(plugin_manager: PluginManager) -> None:
    """Release the devices once the scenario finished, passed or not.

    :param plugin_manager: plugin manager
    :type plugin_manager: PluginManager
    """
