"""Join resolution for OLAP cube queries"""

__version__ = "0.1.0"

from .errors import *
from .logging import *
from .metadata import *
from .catalog import *
from .config import *
from .query import *
