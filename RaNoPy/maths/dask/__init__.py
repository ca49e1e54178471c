"""
Dask implementation of RaNoPy.maths.noise, for chunked visibility data.
"""
from . import noise
