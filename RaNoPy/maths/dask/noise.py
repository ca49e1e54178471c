# -*- coding: utf-8 -*-
from typing import Union

import numpy as np
import dask.array as da
from tqdm.dask import TqdmCallback

from ..noise import (baseline_stddev, station_rms_at_frequencies, _check_vis)
from RaNoPy.classes import TelescopeModel
from RaNoPy.errors import ErrorCode, Status


def add_system_noise(vis: da.core.Array, telescope: TelescopeModel,
                     freqs: Union[float, np.ndarray], seed: Union[None, int],
                     status: Status) -> Union[None, da.core.Array]:
    """
    Lazily add uncorrelated, Gaussian system noise to a (chunked) dask array
    of visibilities. Dask mirror of RaNoPy.maths.noise.add_system_noise.

    Parameters
    ----------
    vis : dask.array.core.Array
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
    Noisy visibilities as a dask array with the chunks of vis, or None on
    error
    """
    if vis is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "add_system_noise")
        return None

    station_rms = station_rms_at_frequencies(telescope, freqs, status)
    if status.failed:
        return None

    _check_vis(vis.shape, vis.dtype, station_rms.shape[1],
               telescope.num_baselines, status)
    if status.failed:
        return None

    std = baseline_stddev(station_rms)[np.newaxis]
    if vis.ndim == 4:
        std = std[..., np.newaxis]

    rs = da.random.RandomState(seed)
    re = rs.standard_normal(size=vis.shape, chunks=vis.chunks) * std
    im = rs.standard_normal(size=vis.shape, chunks=vis.chunks) * std

    return (vis + (re + 1j * im)).astype(vis.dtype)


def compute_with_progress(arr: da.core.Array,
                          desc: str = "Adding system noise:") -> np.ndarray:
    """
    Compute a dask array, wrapped in a TQDM progress bar
    """
    with TqdmCallback(desc=format(desc, ">28")):
        result = arr.compute()

    return result
