"""slnsync - Keep Visual Studio solutions in step with their project references."""

__version__ = "0.1.0"

from slnsync.pipeline import run  # noqa: E402
from slnsync.updater import update  # noqa: E402

__all__ = ["run", "update", "__version__"]
