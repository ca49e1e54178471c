from . import _config as cfg
from . import _constants as cnsts
from .errors import ErrorCode, Status, error_string
from .classes import *
from . import logger
from . import maths
from . import telescope
from . import plotting
from . import miscellaneous

# Numerical version:
__version_info__ = (0, 1, 0)
__version__ = '.'.join(map(str, __version_info__))
