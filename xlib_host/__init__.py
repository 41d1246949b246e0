__all__ = [
	"__version__",
	"ExternalLoader",
	"ExternalInterface",
	"ControlRef",
	"SearchModifier",
	"OperationTable",
]

# Derive the package version from installed distribution metadata when
# available. From a bare source checkout fall back to a local dev version.
from importlib.metadata import version, PackageNotFoundError
try:
	__version__ = version("xlib-host")
except PackageNotFoundError:
	__version__ = "0.0.0+local"

# Submodules read __version__ at import time, so these come last.
from xlib_host.external import ControlRef, ExternalInterface, OperationTable, SearchModifier  # noqa: E402
from xlib_host.host import ExternalLoader  # noqa: E402
