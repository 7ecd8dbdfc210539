__version__ = '0.1.0'

# Import the configuration and validation submodules first, they have no dependencies
from .config import column_map, UNITS, DEFAULT_UNITS
from .validation import *
from .logger import setup_logging

# Import the analysis submodules, which depend on config and validation
from .residency import *
from .network import *

# Finally, import the summaries and plots, which consume the analysis tables
from .summaries import *
from .plotting import *
