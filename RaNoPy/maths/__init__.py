from . import noise
from . import dask
