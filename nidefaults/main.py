"""nidefaults main module."""

import logging.config
import sys
from argparse import ArgumentParser

from pluggy import PluginManager

from nidefaults import PROJECT_NAME
from nidefaults.configs import LOGGING_CONFIG
from nidefaults.lib.harness_config import get_json
from nidefaults.plugins import core as core_plugin
from nidefaults.plugins.hookspecs import core

# pylint: disable=no-member  # plugin_manager.hook.* calls are dynamic

_LOGGER = logging.getLogger(__name__)


def get_plugin_manager() -> PluginManager:
    """Get a nidefaults plugin manager with all plugins loaded.

    :return: nidefaults plugin manager
    :rtype: PluginManager
    """
    plugin_manager = PluginManager(PROJECT_NAME)
    plugin_manager.add_hookspecs(core)
    plugin_manager.load_setuptools_entrypoints(PROJECT_NAME)
    if not plugin_manager.is_registered(core_plugin):
        plugin_manager.register(core_plugin, "core")
    plugin_manager.hook.nidefaults_add_hookspecs(plugin_manager=plugin_manager)
    return plugin_manager


def main(argv: list[str] | None = None) -> None:
    """nidefaults main function.

    :param argv: command line arguments, defaults to sys.argv[1:]
    :type argv: list[str] | None
    :raises NIDefaultsException: when the scenario fails
    """
    logging.config.dictConfig(LOGGING_CONFIG)
    argparser = ArgumentParser(PROJECT_NAME)
    plugin_manager = get_plugin_manager()
    plugin_manager.hook.nidefaults_add_cmdline_args(argparser=argparser)
    cmdline_args = plugin_manager.hook.nidefaults_cmdline_parse(
        argparser=argparser,
        cmdline_args=sys.argv[1:] if argv is None else argv,
    )
    config = plugin_manager.hook.nidefaults_parse_config(
        cmdline_args=cmdline_args,
        inventory_config=get_json(cmdline_args.inventory_config),
        env_config=get_json(cmdline_args.env_config),
    )
    device_manager = plugin_manager.hook.nidefaults_register_devices(
        config=config,
        cmdline_args=cmdline_args,
        plugin_manager=plugin_manager,
    )
    try:
        plugin_manager.hook.nidefaults_setup_env(
            config=config,
            cmdline_args=cmdline_args,
            plugin_manager=plugin_manager,
            device_manager=device_manager,
        )
        verdicts = plugin_manager.hook.nidefaults_run_scenario(
            config=config,
            device_manager=device_manager,
        )
        _LOGGER.info(
            "Default address families verified: %s",
            ", ".join(f"{name}=PASS" for name in verdicts),
        )
    finally:
        plugin_manager.hook.nidefaults_release_devices(plugin_manager=plugin_manager)


if __name__ == "__main__":
    main()
