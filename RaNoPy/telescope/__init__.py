"""
Loading of telescope model data from a telescope model directory tree.
"""
from . import noise_files
from . import noise_load
from .noise_load import telescope_model_noise_load
