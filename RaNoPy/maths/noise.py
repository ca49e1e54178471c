# -*- coding: utf-8 -*-
"""
Module handling system noise unit conversions, and the addition of system
noise to simulated visibilities
"""
from itertools import combinations
from typing import Union

import numpy as np

from RaNoPy import _constants as cnsts
from RaNoPy.classes import DataType, Location, Mem, TelescopeModel
from RaNoPy.errors import ErrorCode, Status

_FLOAT_TYPES = (DataType.SINGLE, DataType.DOUBLE)


# ############################################################################ #
# ##################### Radiometer-equation methods below #################### #
# ############################################################################ #
def sefd(t_sys: Union[float, np.ndarray], area: Union[float, np.ndarray],
         efficiency: Union[float, np.ndarray] = 1.
         ) -> Union[float, np.ndarray]:
    """
    System equivalent flux density of a station

    Parameters
    ----------
    t_sys
        System temperature, K
    area
        Effective collecting area, m^2
    efficiency
        System efficiency

    Returns
    -------
    SEFD, Jy
    """
    return 2. * cnsts.BOLTZMANN * t_sys / (area * efficiency) / cnsts.JY


def rms_from_sefd(sefd_: Union[float, np.ndarray], bandwidth: float,
                  integration_time: float) -> Union[float, np.ndarray]:
    """
    RMS flux density of the noise on a single visibility, for a baseline
    between two stations of equal SEFD

    Parameters
    ----------
    sefd_
        System equivalent flux density, Jy
    bandwidth
        Channel bandwidth, Hz
    integration_time
        Visibility integration time, s

    Returns
    -------
    RMS flux density, Jy
    """
    return sefd_ / np.sqrt(2. * bandwidth * integration_time)


# ############################################################################ #
# ##################### Typed-buffer (Mem) kernels below ##################### #
# ############################################################################ #
def sensitivity_to_rms(rms: Mem, sensitivity: Mem, num_freqs: int,
                       bandwidth: float, integration_time: float,
                       status: Status) -> None:
    """
    Convert station sensitivity (SEFD, Jy) to RMS flux density (Jy) of the
    noise on a single visibility

    Parameters
    ----------
    rms : Mem
        Output buffer, resized to num_freqs
    sensitivity : Mem
        Sensitivity values, Jy. Must be of length num_freqs and of the same
        type as rms
    num_freqs : int
        Number of frequencies at which noise is defined
    bandwidth : float
        Channel bandwidth, Hz
    integration_time : float
        Visibility integration time, s
    status : Status
        Error status

    Returns
    -------
    None. On any error, rms is left untouched.
    """
    if rms is None or sensitivity is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "sensitivity_to_rms")
        return

    if status.failed:
        return

    # Get type and check consistency
    type_ = rms.type
    if sensitivity.type != type_:
        status.set(ErrorCode.TYPE_MISMATCH,
                   "sensitivity is {}, rms is {}".format(sensitivity.type.name,
                                                         type_.name))
        return

    if sensitivity.num_elements != num_freqs:
        status.set(ErrorCode.DIMENSION_MISMATCH,
                   "{} sensitivity values for {} "
                   "frequencies".format(sensitivity.num_elements, num_freqs))
        return

    if type_ not in _FLOAT_TYPES:
        status.set(ErrorCode.BAD_DATA_TYPE, "sensitivity_to_rms")
        return

    rms.realloc(num_freqs, status)
    if status.failed:
        return

    rms.data[:] = rms_from_sefd(sensitivity.data.astype(np.float64),
                                bandwidth, integration_time)


def t_sys_to_rms(rms: Mem, t_sys: Mem, area: Mem, efficiency: Mem,
                 num_freqs: int, bandwidth: float, integration_time: float,
                 status: Status) -> None:
    """
    Convert system temperature (K), effective area (m^2) and system
    efficiency to RMS flux density (Jy) of the noise on a single visibility
    via the radiometer equation

    Parameters
    ----------
    rms : Mem
        Output buffer, resized to num_freqs
    t_sys : Mem
        System temperatures, K
    area : Mem
        Effective areas, m^2
    efficiency : Mem
        System efficiencies
    num_freqs : int
        Number of frequencies at which noise is defined
    bandwidth : float
        Channel bandwidth, Hz
    integration_time : float
        Visibility integration time, s
    status : Status
        Error status

    Returns
    -------
    None. On any error, rms is left untouched.
    """
    if rms is None or t_sys is None or area is None or efficiency is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "t_sys_to_rms")
        return

    if status.failed:
        return

    type_ = rms.type
    for name, mem in (('t_sys', t_sys), ('area', area),
                      ('efficiency', efficiency)):
        if mem.type != type_:
            status.set(ErrorCode.TYPE_MISMATCH,
                       "{} is {}, rms is {}".format(name, mem.type.name,
                                                    type_.name))
            return

    for name, mem in (('t_sys', t_sys), ('area', area),
                      ('efficiency', efficiency)):
        if mem.num_elements != num_freqs:
            status.set(ErrorCode.DIMENSION_MISMATCH,
                       "{} {} values for {} frequencies".format(
                           mem.num_elements, name, num_freqs
                       ))
            return

    if type_ not in _FLOAT_TYPES:
        status.set(ErrorCode.BAD_DATA_TYPE, "t_sys_to_rms")
        return

    rms.realloc(num_freqs, status)
    if status.failed:
        return

    sefd_ = sefd(t_sys.data.astype(np.float64), area.data.astype(np.float64),
                 efficiency.data.astype(np.float64))
    rms.data[:] = rms_from_sefd(sefd_, bandwidth, integration_time)


def evaluate_linear(values: Mem, num_values: int, start: float, inc: float,
                    status: Status) -> None:
    """
    Fill values with start + i * inc, for i in [0, num_values), resizing as
    required. Values are evaluated in double precision and stored in the
    precision of the buffer.
    """
    if values is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "evaluate_linear")
        return

    if status.failed:
        return

    if num_values < 0:
        status.set(ErrorCode.INVALID_ARGUMENT,
                   "negative number of values {}".format(num_values))
        return

    if values.type not in _FLOAT_TYPES:
        status.set(ErrorCode.BAD_DATA_TYPE, "evaluate_linear")
        return

    values.realloc(num_values, status)
    if status.failed:
        return

    values.data[:] = start + np.arange(num_values, dtype=np.float64) * inc


def evaluate_range(values: Mem, num_values: int, start: float, end: float,
                   status: Status) -> None:
    """
    Fill values with start + i * (end - start) / num_values, for i in
    [0, num_values). Note the divisor is num_values, so end itself is never
    reached.
    """
    if values is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "evaluate_range")
        return

    if status.failed:
        return

    inc = (end - start) / float(num_values) if num_values > 0 else 0.
    evaluate_linear(values, num_values, start, inc, status)


# ############################################################################ #
# ######################## Visibility noise methods below #################### #
# ############################################################################ #
def baseline_indices(num_stations: int) -> np.ndarray:
    """
    Station index pairs, (p, q) with p < q, in baseline order

    Returns
    -------
    numpy.ndarray of shape (num_baselines, 2)
    """
    pairs = list(combinations(range(num_stations), 2))
    if not pairs:
        return np.zeros((0, 2), dtype=int)

    return np.array(pairs, dtype=int)


def station_rms_at_frequencies(telescope: TelescopeModel,
                               freqs: Union[float, np.ndarray],
                               status: Status) -> Union[None, np.ndarray]:
    """
    Linearly interpolate each top-level station's noise RMS to the given
    frequencies. Values beyond the defined frequencies are clamped to the end
    values.

    Parameters
    ----------
    telescope : TelescopeModel
        Telescope with populated station noise models
    freqs : float or numpy.ndarray
        Frequencies, Hz
    status : Status
        Error status

    Returns
    -------
    numpy.ndarray of shape (num_stations, len(freqs)), or None on error
    """
    if telescope is None or freqs is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "station_rms_at_frequencies")
        return None

    if status.failed:
        return None

    if telescope.location != Location.CPU:
        status.set(ErrorCode.BAD_LOCATION, "telescope model is not on CPU")
        return None

    freqs = np.atleast_1d(np.asarray(freqs, dtype=np.float64))
    rms = np.empty((telescope.num_stations, freqs.size), dtype=np.float64)
    for idx in range(telescope.num_stations):
        noise = telescope.station[idx].noise
        if noise.rms.num_elements == 0:
            status.set(ErrorCode.SETUP_FAIL_TELESCOPE,
                       "station {} has no noise values".format(idx))
            return None

        if noise.rms.num_elements != noise.frequency.num_elements:
            status.set(ErrorCode.DIMENSION_MISMATCH,
                       "station {} has {} noise values for {} "
                       "frequencies".format(idx, noise.rms.num_elements,
                                            noise.frequency.num_elements))
            return None

        xp = noise.frequency.data.astype(np.float64)
        fp = noise.rms.data.astype(np.float64)
        order = np.argsort(xp, kind='stable')
        rms[idx] = np.interp(freqs, xp[order], fp[order])

    return rms


def baseline_stddev(station_rms: np.ndarray) -> np.ndarray:
    """
    Standard deviation of the noise on each baseline's visibilities, the
    geometric mean of its two stations' RMS

    Parameters
    ----------
    station_rms : numpy.ndarray
        Shape (num_stations, num_freqs) array of station RMS, Jy

    Returns
    -------
    numpy.ndarray of shape (num_freqs, num_baselines), Jy
    """
    station_rms = np.asarray(station_rms, dtype=np.float64)
    pairs = baseline_indices(station_rms.shape[0])
    std = np.sqrt(station_rms[pairs[:, 0]] * station_rms[pairs[:, 1]])

    return std.T


def expected_image_rms(rms: Union[float, np.ndarray],
                       num_baselines: int) -> Union[float, np.ndarray]:
    """
    RMS noise expected in a naturally-weighted, single time/channel snapshot
    image made from visibilities with per-baseline noise of rms
    """
    return rms / np.sqrt(num_baselines)


def _check_vis(vis_shape, vis_dtype, num_channels, num_baselines,
               status: Status) -> None:
    if not np.issubdtype(vis_dtype, np.complexfloating):
        status.set(ErrorCode.BAD_DATA_TYPE,
                   "visibilities of dtype {}".format(vis_dtype))
        return

    if len(vis_shape) not in (3, 4) or vis_shape[1] != num_channels or \
            vis_shape[2] != num_baselines:
        status.set(ErrorCode.DIMENSION_MISMATCH,
                   "visibilities of shape {} for {} channels and {} "
                   "baselines".format(vis_shape, num_channels, num_baselines))


def add_system_noise(vis: np.ndarray, telescope: TelescopeModel,
                     freqs: Union[float, np.ndarray], seed: Union[None, int],
                     status: Status) -> None:
    """
    Add uncorrelated, Gaussian system noise to visibilities, in place. Real
    and imaginary parts each receive noise with standard deviation given by
    the baseline's RMS at each channel's frequency.

    Parameters
    ----------
    vis : numpy.ndarray
        Complex visibilities of shape (num_times, num_channels,
        num_baselines) or (num_times, num_channels, num_baselines, num_pols)
    telescope : TelescopeModel
        Telescope with populated station noise models
    freqs : float or numpy.ndarray
        Channel frequencies, Hz
    seed : int
        Random number generator seed
    status : Status
        Error status

    Returns
    -------
    None
    """
    if vis is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "add_system_noise")
        return

    station_rms = station_rms_at_frequencies(telescope, freqs, status)
    if status.failed:
        return

    _check_vis(vis.shape, vis.dtype, station_rms.shape[1],
               telescope.num_baselines, status)
    if status.failed:
        return

    std = baseline_stddev(station_rms)[np.newaxis]
    if vis.ndim == 4:
        std = std[..., np.newaxis]

    rng = np.random.default_rng(seed)
    vis.real += rng.standard_normal(vis.shape) * std
    vis.imag += rng.standard_normal(vis.shape) * std
