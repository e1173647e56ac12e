"""Default address family forwarding conformance tests for network devices."""

from pluggy import HookimplMarker, HookspecMarker

from nidefaults.version import __version__

PROJECT_NAME = "nidefaults"

hookspec = HookspecMarker(PROJECT_NAME)
hookimpl = HookimplMarker(PROJECT_NAME)


__all__ = ["__version__", "hookimpl", "hookspec"]
