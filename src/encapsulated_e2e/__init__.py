"""encapsulated-e2e - end-to-end suite and harness for encapsulated nx installs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("encapsulated-e2e")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts without metadata

from .main import main

__all__ = ["main", "__version__"]
