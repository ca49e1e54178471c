# -*- coding: utf-8 -*-
"""
Physical constants and fixed file-name tables used throughout RaNoPy.
"""
from enum import Enum

import scipy.constants as con

BOLTZMANN = con.k  # J/K
JY = 1e-26  # W m^-2 Hz^-1


class NoiseFile(Enum):
    """
    Roles of the system noise data files which may be found in a telescope
    model directory, valued by their canonical file name
    """
    FREQUENCY = "noise_frequencies.txt"
    RMS = "rms.txt"
    SENSITIVITY = "sensitivity.txt"
    T_SYS = "t_sys.txt"
    AREA = "area.txt"
    EFFICIENCY = "efficiency.txt"

    @property
    def filename(self) -> str:
        return self.value
