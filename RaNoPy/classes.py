#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Defines the following classes:
- Mem: Typed, host/device tagged numeric buffer
- SystemNoiseModel: Per-station noise frequencies and RMS flux densities
- StationModel: Station node of a telescope's station tree
- TelescopeModel: Telescope owning the top-level stations
- Settings: Simulation settings relevant to system noise
"""
import copy
import os
import sys
from collections import namedtuple
from enum import Enum, IntEnum
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from RaNoPy import _config as cfg
from RaNoPy.errors import ErrorCode, Status
from RaNoPy.miscellaneous import functions as miscf


class DataType(IntEnum):
    SINGLE = 1
    DOUBLE = 2
    INT = 3
    SINGLE_COMPLEX = 4
    DOUBLE_COMPLEX = 5


class Location(IntEnum):
    CPU = 0
    GPU = 1


_NUMPY_DTYPES = {DataType.SINGLE: np.float32,
                 DataType.DOUBLE: np.float64,
                 DataType.INT: np.int32,
                 DataType.SINGLE_COMPLEX: np.complex64,
                 DataType.DOUBLE_COMPLEX: np.complex128}


class FreqSpec(Enum):
    TELESCOPE_MODEL = 'telescope_model'
    OBSERVATION_SETTINGS = 'observation_settings'
    DATA_FILE = 'data_file'
    RANGE = 'range'


class ValueSpec(Enum):
    TELESCOPE_MODEL_PRIORITY = 'telescope_model_priority'
    RMS = 'rms'
    SENSITIVITY = 'sensitivity'
    SYSTEM_TEMPERATURE = 'system_temperature'


class Override(Enum):
    NO_OVERRIDE = 'no_override'
    DATA_FILE = 'data_file'
    RANGE = 'range'


__all__ = ["DataType", "Location", "FreqSpec", "ValueSpec", "Override",
           "QuantitySettings", "Mem", "SystemNoiseModel", "StationModel",
           "TelescopeModel", "Settings"]

QuantitySettings = namedtuple('QuantitySettings',
                              ['override', 'file', 'start', 'end'])


class Mem:
    """
    Numeric buffer tagged with an element type and a memory location. Storage
    is a 1-D numpy array of the dtype matching the element type.
    """
    @classmethod
    def from_array(cls, values, type_: DataType = DataType.DOUBLE,
                   location: Location = Location.CPU) -> 'Mem':
        """
        Create a new buffer holding a copy of values
        """
        values = np.asarray(values).ravel()
        new_mem = cls(type_, location, 0)
        new_mem._data = values.astype(_NUMPY_DTYPES[DataType(type_)])
        return new_mem

    def __init__(self, type_: DataType, location: Location = Location.CPU,
                 num_elements: int = 0):
        """
        Parameters
        ----------
        type_ : DataType
            Element type of the buffer
        location : Location
            Location of the buffer's memory
        num_elements : int
            Initial number of (zeroed) elements
        """
        self._type = DataType(type_)
        self._location = Location(location)
        self._data = np.zeros(num_elements, dtype=_NUMPY_DTYPES[self._type])
        self._owner = True

    def __repr__(self):
        s = "Mem(type_={}, location={}, num_elements={})"
        return s.format(self.type.name, self.location.name,
                        self.num_elements)

    def __len__(self):
        return self.num_elements

    @property
    def type(self) -> DataType:
        return self._type

    @property
    def location(self) -> Location:
        return self._location

    @property
    def num_elements(self) -> int:
        return self._data.size

    @property
    def data(self) -> np.ndarray:
        """Raw element storage (not a copy)"""
        return self._data

    @property
    def owner(self) -> bool:
        """Whether the buffer owns its storage (False for aliases)"""
        return self._owner

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def realloc(self, num_elements: int, status: Status) -> None:
        """
        Resize the buffer, preserving leading values and zero-filling any
        growth
        """
        if status.failed:
            return

        if not self._owner:
            status.set(ErrorCode.INVALID_ARGUMENT,
                       "cannot resize an aliased buffer")
            return

        if num_elements < 0:
            status.set(ErrorCode.INVALID_ARGUMENT,
                       "negative buffer length {}".format(num_elements))
            return

        if num_elements == self.num_elements:
            return

        try:
            new_data = np.zeros(num_elements, dtype=self._data.dtype)
        except MemoryError:
            status.set(ErrorCode.MEMORY_ALLOC_FAILURE,
                       "resizing buffer to {} elements".format(num_elements))
            return

        n_keep = min(num_elements, self.num_elements)
        new_data[:n_keep] = self._data[:n_keep]
        self._data = new_data

    def copy_from(self, src: 'Mem', status: Status) -> None:
        """
        Copy contents of src into this buffer, resizing as required
        """
        if status.failed:
            return

        if src is None:
            status.set(ErrorCode.INVALID_ARGUMENT, "no source buffer")
            return

        if src.type != self.type:
            status.set(ErrorCode.TYPE_MISMATCH,
                       "copying {} into {}".format(src.type.name,
                                                   self.type.name))
            return

        self.realloc(src.num_elements, status)
        if status.failed:
            return

        self._data[:] = src.data

    def create_alias(self, offset: int, num_elements: int,
                     status: Status) -> Union[None, 'Mem']:
        """
        Buffer sharing storage with num_elements elements of this buffer,
        starting at offset
        """
        if status.failed:
            return None

        if offset < 0 or num_elements < 0 or \
                offset + num_elements > self.num_elements:
            status.set(ErrorCode.DIMENSION_MISMATCH,
                       "alias [{}:{}] outside buffer of length "
                       "{}".format(offset, offset + num_elements,
                                   self.num_elements))
            return None

        alias = Mem(self.type, self.location, 0)
        alias._data = self._data[offset:offset + num_elements]
        alias._owner = False

        return alias

    def random_fill(self, lo: float, hi: float, status: Status,
                    seed: Union[None, int] = None) -> None:
        """
        Fill buffer with uniformly distributed random numbers in [lo, hi).
        Complex buffers have both components filled independently.
        """
        if status.failed:
            return

        if self.type == DataType.INT:
            status.set(ErrorCode.BAD_DATA_TYPE,
                       "random fill of integer buffer")
            return

        rng = np.random.default_rng(seed)
        n = self.num_elements
        if self.type in (DataType.SINGLE_COMPLEX, DataType.DOUBLE_COMPLEX):
            vals = rng.uniform(lo, hi, n) + 1j * rng.uniform(lo, hi, n)
        else:
            vals = rng.uniform(lo, hi, n)

        self._data[:] = vals.astype(self._data.dtype)


class SystemNoiseModel:
    """
    Frequencies (Hz) at which a station's system noise is defined, and the
    RMS flux density (Jy) of that noise at each of those frequencies
    """
    def __init__(self, type_: DataType = DataType.DOUBLE,
                 location: Location = Location.CPU):
        self.frequency = Mem(type_, location, 0)
        self.rms = Mem(type_, location, 0)

    def __repr__(self):
        return "SystemNoiseModel(frequency={}, rms={})".format(self.frequency,
                                                              self.rms)

    @property
    def num_values(self) -> int:
        return self.frequency.num_elements


class StationModel:
    """
    Station within a telescope's station tree. A station either has child
    stations or is a leaf whose noise model is populated directly.
    """
    def __init__(self, type_: DataType = DataType.DOUBLE,
                 location: Location = Location.CPU):
        self._type = DataType(type_)
        self._location = Location(location)
        self.noise = SystemNoiseModel(type_, location)
        self.child = None

    def __repr__(self):
        return "StationModel(type_={}, num_children={})".format(
            self.type.name, self.num_children
        )

    @property
    def type(self) -> DataType:
        return self._type

    @property
    def location(self) -> Location:
        return self._location

    @property
    def num_children(self) -> int:
        return 0 if self.child is None else len(self.child)

    @property
    def is_leaf(self) -> bool:
        return self.num_children == 0

    def create_children(self, num_children: int, status: Status) -> None:
        """
        Allocate child stations, if not allocated already
        """
        if status.failed or self.child is not None:
            return

        try:
            self.child = [StationModel(self.type, self.location)
                          for _ in range(num_children)]
        except MemoryError:
            status.set(ErrorCode.MEMORY_ALLOC_FAILURE,
                       "allocating {} child stations".format(num_children))


class TelescopeModel:
    """
    Telescope owning an ordered list of top-level stations
    """
    def __init__(self, type_: DataType = DataType.DOUBLE,
                 location: Location = Location.CPU,
                 num_stations: int = 0):
        """
        Parameters
        ----------
        type_ : DataType
            Precision of the telescope's numeric data
        location : Location
            Memory location of the telescope's numeric data
        num_stations : int
            Number of stations to allocate. If 0, the station list is left
            unallocated until first needed.
        """
        self._type = DataType(type_)
        self._location = Location(location)
        self.station = None

        if num_stations:
            self.resize(num_stations, Status())

    def __repr__(self):
        s = "TelescopeModel(type_={}, location={}, num_stations={})"
        return s.format(self.type.name, self.location.name,
                        self.num_stations)

    @property
    def type(self) -> DataType:
        return self._type

    @property
    def location(self) -> Location:
        return self._location

    @property
    def num_stations(self) -> int:
        return 0 if self.station is None else len(self.station)

    @property
    def num_baselines(self) -> int:
        return self.num_stations * (self.num_stations - 1) // 2

    def resize(self, num_stations: int, status: Status) -> None:
        """
        Set the number of top-level stations. Existing stations are kept.
        """
        if status.failed:
            return

        if num_stations < 0:
            status.set(ErrorCode.INVALID_ARGUMENT,
                       "negative number of stations")
            return

        if self.station is None:
            self.station = []

        try:
            while len(self.station) < num_stations:
                self.station.append(StationModel(self.type, self.location))
        except MemoryError:
            status.set(ErrorCode.MEMORY_ALLOC_FAILURE,
                       "allocating {} stations".format(num_stations))
            return

        del self.station[num_stations:]

    def noise_table(self) -> pd.DataFrame:
        """
        Table of every top-level station's noise model with columns
        'station', 'frequency_hz' and 'rms_jy'
        """
        rows = []
        for idx in range(self.num_stations):
            noise = self.station[idx].noise
            freqs = noise.frequency.data
            rms = noise.rms.data
            for i_freq, freq in enumerate(freqs):
                rows.append({'station': idx,
                             'frequency_hz': float(freq),
                             'rms_jy': float(rms[i_freq])
                             if i_freq < rms.size else np.nan})

        return pd.DataFrame(rows, columns=['station', 'frequency_hz',
                                           'rms_jy'])


class Settings:
    """
    Settings of a simulation relevant to the system noise model. Read-only
    while a telescope model's noise is being loaded.
    """
    @staticmethod
    def default_params() -> Dict:
        """
        Deep copy of RaNoPy's default settings parameters
        """
        return copy.deepcopy(cfg.defaults)

    @staticmethod
    def py_to_dict(py_file: str) -> Dict:
        """
        Convert .py file (full path as str) containing relevant settings
        parameters to dict
        """
        if not os.path.exists(py_file):
            raise FileNotFoundError(py_file + " does not exist")
        dcy = os.path.dirname(py_file)
        added = dcy not in sys.path
        if added:
            sys.path.append(dcy)

        try:
            sp_ = __import__(os.path.basename(py_file)[:-3])
        finally:
            if added:
                sys.path.remove(dcy)
        sys.modules.pop(sp_.__name__, None)
        err = miscf.check_settings_params(sp_.params)

        if err is not None:
            raise err

        return sp_.params

    def __init__(self, params: Union[dict, str]):
        """
        Parameters
        ----------
        params : dict or str
            Either a dictionary containing all settings parameters, or a full
            path to a settings parameter file defining such a dictionary as
            'params'.
        """
        if isinstance(params, dict):
            err = miscf.check_settings_params(params)
            if err is not None:
                raise err
            self._params = params
        elif isinstance(params, str):
            self._params = Settings.py_to_dict(params)
        else:
            raise TypeError("Supplied arg params must be dict or full path ("
                            "str)")

    @property
    def params(self) -> Dict:
        return self._params

    @property
    def double_precision(self) -> bool:
        return self._params['simulation']['double_precision']

    @property
    def precision(self) -> DataType:
        return DataType.DOUBLE if self.double_precision else DataType.SINGLE

    @property
    def input_directory(self) -> str:
        return os.path.expanduser(self._params['telescope']['input_directory'])

    @property
    def num_channels(self) -> int:
        return self._params['observation']['num_channels']

    @property
    def start_frequency_hz(self) -> float:
        return self._params['observation']['start_frequency_hz']

    @property
    def frequency_inc_hz(self) -> float:
        return self._params['observation']['frequency_inc_hz']

    @property
    def length_seconds(self) -> float:
        return self._params['observation']['length_seconds']

    @property
    def num_time_steps(self) -> int:
        return self._params['observation']['num_time_steps']

    @property
    def integration_time(self) -> float:
        """Correlator dump time, s"""
        if self.num_time_steps == 0:
            return 0.
        return self.length_seconds / float(self.num_time_steps)

    @property
    def channel_frequencies_hz(self) -> np.ndarray:
        """Centre frequencies of the observation's channels, Hz"""
        return self.start_frequency_hz + \
            np.arange(self.num_channels) * self.frequency_inc_hz

    @property
    def channel_bandwidth_hz(self) -> float:
        return self._params['interferometer']['channel_bandwidth_hz']

    @property
    def noise(self) -> Dict:
        return self._params['interferometer']['noise']

    @property
    def noise_enabled(self) -> bool:
        return self.noise['enable']

    @property
    def noise_seed(self) -> int:
        return self.noise['seed']

    @property
    def freq_spec(self) -> Union[None, FreqSpec]:
        """Frequency specification, or None if not recognised"""
        return _as_enum(FreqSpec, self.noise['freq']['specification'])

    @property
    def freq_file(self) -> Union[None, str]:
        return self.noise['freq']['file']

    @property
    def freq_number(self) -> int:
        return self.noise['freq']['number']

    @property
    def freq_start(self) -> float:
        return self.noise['freq']['start']

    @property
    def freq_inc(self) -> float:
        return self.noise['freq']['inc']

    @property
    def value_spec(self) -> Union[None, ValueSpec]:
        """Noise value specification, or None if not recognised"""
        return _as_enum(ValueSpec, self.noise['values']['specification'])

    def quantity(self, name: str) -> QuantitySettings:
        """
        Override settings for one of the noise quantities 'rms',
        'sensitivity', 't_sys', 'area' or 'efficiency'. An unrecognised
        override is given as None.
        """
        values = self.noise['values']
        if name in ('rms', 'sensitivity'):
            q = values[name]
        elif name in ('t_sys', 'area', 'efficiency'):
            q = values['components'][name]
        else:
            raise KeyError("{} is not a noise quantity".format(name))

        return QuantitySettings(_as_enum(Override, q['override']), q['file'],
                                q['start'], q['end'])


def _as_enum(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None
