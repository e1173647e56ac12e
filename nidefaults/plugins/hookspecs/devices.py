"""nidefaults device hook specifications.

A device is connected before the scenario starts and released once the
scenario finished, whatever its outcome.
"""

from nidefaults import hookspec


@hookspec
def nidefaults_device_boot() -> None:
    """Connect to the device and make it ready for the scenario."""


@hookspec
def nidefaults_shutdown_device() -> None:
    """Release the device connection."""
