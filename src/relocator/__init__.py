"""Relocator core package.

Decides the new filename and destination folder for a media file from the
metadata linked to it. The package is organized into focused modules:

- **orchestrator**: ``relocate`` and ``Relocator``, the single entry point
- **strategies**: Named rule sets selected by the ``strategy`` setting
- **titles** / **episodes**: Title resolution and episode labels
- **languages**: Dub/sub coverage detection
- **destination_builder**: Rule chain and folder lookup
- **filename_builder**: Template based filename composition
- **config** / **validation**: Settings loading and checking

The engine never touches the file system; the host applies the decision.
"""

from .config import RelocationSettings, build_settings, load_settings
from .errors import ErrorKind, RelocationError
from .models import RelocationFailure, RelocationRequest, RelocationSuccess
from .orchestrator import Relocator, relocate
from .version import __version__

__all__ = [
    "__version__",
    "ErrorKind",
    "RelocationError",
    "RelocationFailure",
    "RelocationRequest",
    "RelocationSettings",
    "RelocationSuccess",
    "Relocator",
    "build_settings",
    "load_settings",
    "relocate",
]
