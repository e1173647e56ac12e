"""nidefaults base devices package."""

from nidefaults.devices.base_devices.nidefaults_device import NIDefaultsDevice
from nidefaults.devices.base_devices.rest_device import RESTDevice

__all__ = ["NIDefaultsDevice", "RESTDevice"]
