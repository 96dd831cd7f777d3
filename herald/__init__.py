__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'herald'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

# Bound before the star-imports: `registry` and `dispatch` are re-exported as the
# default registry and the dispatch function, shadowing the submodules.
from . import buffers as _buffers
from . import commands as _commands
from . import dispatch as _dispatch
from . import faults as _faults
from . import listeners as _listeners
from . import parser as _parser
from . import registry as _registry

from .buffers import *
from .commands import *
from .dispatch import *
from .faults import *
from .listeners import *
from .logs import install
from .parser import *
from .registry import *
from .specs import ArgFlag

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    "install",
    "ArgFlag",
)

# Load the exposed API of the scratch buffers
__all__ += _buffers.__all__
# Load the exposed API of the default registry
__all__ += _commands.__all__
# Load the exposed API of the dispatcher
__all__ += _dispatch.__all__
# Load the exposed API of the faults
__all__ += _faults.__all__
# Load the exposed API of the listeners
__all__ += _listeners.__all__
# Load the exposed API of the parser
__all__ += _parser.__all__
# Load the exposed API of the registry (MAXARGS included)
__all__ += _registry.__all__
