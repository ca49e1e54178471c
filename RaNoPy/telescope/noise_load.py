# -*- coding: utf-8 -*-
"""
Loading of per-station system noise models from a telescope model directory.

The telescope model directory is walked depth-first in step with the
telescope's station tree. Noise data files found in a directory apply to
that directory's station and, unless replaced by a file of the same role
further down, to every station visited after it. Frequencies are resolved
once, at the telescope level, and shared by all stations. RMS values are
resolved for each leaf station.
"""
import os
import sys
from typing import Dict, Union

from RaNoPy import _constants as cnsts
from RaNoPy import logger
from RaNoPy.classes import (FreqSpec, Location, Mem, Override, Settings,
                            StationModel, SystemNoiseModel, TelescopeModel,
                            ValueSpec, QuantitySettings)
from RaNoPy.errors import ErrorCode, Status
from RaNoPy.maths import noise as mnoise
from RaNoPy.miscellaneous import functions as miscf
from RaNoPy.telescope.noise_files import (noise_file_exists,
                                          system_noise_model_load,
                                          update_noise_files)

# Noise files below depth 1 (stations) are not used
MAX_DEPTH = 1


def telescope_model_noise_load(telescope: TelescopeModel,
                               log: Union[None, logger.Log],
                               settings: Settings, status: Status) -> None:
    """
    Populate the system noise model of each of the telescope's stations
    from the telescope model directory given in settings

    Parameters
    ----------
    telescope : TelescopeModel
        Telescope to populate. Its station list is allocated from the
        telescope model directory's station directories if not allocated
        already.
    log : logger.Log
        Log instance to handle all log messages. If None, messages are
        kept in an in-memory log only.
    settings : Settings
        Simulation settings
    status : Status
        Error status

    Returns
    -------
    None.
    """
    if telescope is None or settings is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "telescope_model_noise_load")
        return

    if status.failed:
        return

    if not settings.noise_enabled:
        return

    if log is None:
        log = logger.Log(None, verbose=False)

    telescope_dir = settings.input_directory
    if not os.path.isdir(telescope_dir):
        status.set(ErrorCode.FILE_IO,
                   "telescope directory {} not found".format(telescope_dir))
    elif telescope.location != Location.CPU:
        status.set(ErrorCode.BAD_LOCATION, "telescope model is not on CPU")
    if log.add_status(status, "Loading noise files"):
        return

    log.add_entry("INFO", "Loading system noise model from "
                          "{}".format(os.path.abspath(telescope_dir)))

    # Load noise data by scanning the directory structure
    files = {}
    load_directories(telescope, log, settings, telescope_dir, None, 0, files,
                     status)
    if log.add_status(status, "Loading noise files"):
        return

    log.add_entry("INFO", "Loaded system noise model for {} "
                          "stations".format(telescope.num_stations))


def load_directories(telescope: TelescopeModel, log: logger.Log,
                     settings: Settings, cwd: str,
                     station: Union[None, StationModel], depth: int,
                     files: Dict[cnsts.NoiseFile, str],
                     status: Status) -> None:
    """
    Recursively descend the telescope model directory tree from cwd, at the
    given depth, loading noise models into the corresponding stations.

    Parameters
    ----------
    telescope : TelescopeModel
        Telescope being populated
    log : logger.Log
        Log instance
    settings : Settings
        Simulation settings
    cwd : str
        Current directory
    station : StationModel
        Station corresponding to cwd. None at depth 0 (telescope level)
    depth : int
        Depth of cwd below the telescope model directory
    files : dict
        Mapping of NoiseFile role to absolute path, shared by (and updated
        throughout) the whole descent
    status : Status
        Error status

    Returns
    -------
    None.
    """
    if status.failed:
        return

    if depth > MAX_DEPTH:
        return

    # Update the dictionary of noise files for the current directory
    update_noise_files(files, cwd)

    # Child station directories, in name order
    try:
        children = sorted(e.name for e in os.scandir(cwd) if e.is_dir())
    except OSError as e:
        status.set(ErrorCode.FILE_IO, "listing {}: {}".format(cwd, e))
        return
    num_dirs = len(children)
    log.add_entry("INFO", "Scanning {} (depth {}, {} child "
                          "directories)".format(cwd, depth, num_dirs))

    # Allocate station/child arrays if not already allocated (e.g. by an
    # earlier station layout load)
    if depth == 0 and telescope.station is None:
        telescope.resize(num_dirs, status)
    elif depth > 0 and num_dirs > 0 and station.child is None:
        station.create_children(num_dirs, status)
    if status.failed:
        return

    if depth == 0:
        if telescope.num_stations == 0:
            status.set(ErrorCode.SETUP_FAIL_TELESCOPE,
                       "telescope model has no stations")
            return

        # Load into station 0 and copy to all other stations
        freqs = telescope.station[0].noise.frequency
        load_noise_freqs(settings, freqs, files.get(cnsts.NoiseFile.FREQUENCY),
                         status)
        for i in range(1, telescope.num_stations):
            telescope.station[i].noise.frequency.copy_from(freqs, status)
        if status.failed:
            return

        log.add_entry("INFO", "Noise defined at {} frequencies ({}) for {} "
                              "stations".format(freqs.num_elements,
                                                _freqs_summary(freqs),
                                                telescope.num_stations))

    if num_dirs == 0 and depth <= MAX_DEPTH:
        if depth == 0:
            # No station directories, so the telescope directory's files
            # apply to every station
            noise = telescope.station[0].noise
            load_noise_rms(settings, noise, files, log, status)
            for i in range(1, telescope.num_stations):
                telescope.station[i].noise.rms.copy_from(noise.rms, status)
        else:
            load_noise_rms(settings, station.noise, files, log, status)

    # Descend into the child stations
    for i in range(num_dirs):
        if status.failed:
            return

        if depth == 0:
            if i >= telescope.num_stations:
                status.set(ErrorCode.DIMENSION_MISMATCH,
                           "{} station directories for {} stations".format(
                               num_dirs, telescope.num_stations
                           ))
                return
            child = telescope.station[i]
        else:
            if i >= station.num_children:
                status.set(ErrorCode.DIMENSION_MISMATCH,
                           "{} directories in {} for {} child "
                           "stations".format(num_dirs, cwd,
                                             station.num_children))
                return
            child = station.child[i]

        load_directories(telescope, log, settings,
                         os.path.join(cwd, children[i]), child, depth + 1,
                         files, status)


def load_noise_freqs(settings: Settings, freqs: Mem,
                     filepath: Union[None, str], status: Status) -> None:
    """
    Resolve the frequencies at which noise is defined, according to the
    noise frequency specification in settings

    Parameters
    ----------
    settings : Settings
        Simulation settings
    freqs : Mem
        Buffer to hold frequencies (Hz), resized as required
    filepath : str
        Full path to the telescope model's noise frequency file, if any
    status : Status
        Error status

    Returns
    -------
    None.
    """
    if status.failed:
        return

    spec = settings.freq_spec
    if spec in (FreqSpec.TELESCOPE_MODEL, FreqSpec.DATA_FILE):
        if spec == FreqSpec.TELESCOPE_MODEL:
            filename = filepath
        else:
            filename = settings.freq_file

        if not filename or not os.path.isfile(filename):
            status.set(ErrorCode.FILE_IO,
                       "noise frequency file {} not found".format(filename))
            return

        system_noise_model_load(freqs, filename, status)

    elif spec == FreqSpec.OBSERVATION_SETTINGS:
        mnoise.evaluate_linear(freqs, settings.num_channels,
                               settings.start_frequency_hz,
                               settings.frequency_inc_hz, status)

    elif spec == FreqSpec.RANGE:
        mnoise.evaluate_linear(freqs, settings.freq_number,
                               settings.freq_start, settings.freq_inc, status)

    else:
        status.set(ErrorCode.SETTINGS_INTERFEROMETER_NOISE,
                   "unknown noise frequency specification "
                   "'{}'".format(settings.noise['freq']['specification']))


def load_noise_rms(settings: Settings, noise: SystemNoiseModel,
                   files: Dict[cnsts.NoiseFile, str],
                   log: Union[None, logger.Log], status: Status) -> None:
    """
    Resolve a station's noise RMS values at each of its noise frequencies,
    according to the noise value specification in settings. noise.rms is
    only modified once values of the correct length have been resolved.

    Parameters
    ----------
    settings : Settings
        Simulation settings
    noise : SystemNoiseModel
        Station noise model, with frequencies already resolved
    files : dict
        Mapping of NoiseFile role to absolute path of the noise data files in
        effect for the station
    log : logger.Log
        Log instance, or None
    status : Status
        Error status

    Returns
    -------
    None.
    """
    if status.failed:
        return

    type_ = settings.precision
    num_freqs = noise.frequency.num_elements
    integration_time = settings.integration_time
    bandwidth = settings.channel_bandwidth_hz

    if bandwidth < sys.float_info.min or integration_time < sys.float_info.min:
        status.set(ErrorCode.SETTINGS_INTERFEROMETER_NOISE,
                   "channel bandwidth ({} Hz) and integration time ({} s) "
                   "must be positive".format(bandwidth, integration_time))
        return

    rms = Mem(type_, Location.CPU, num_freqs)
    spec = settings.value_spec
    route = None

    # Default (telescope model) priority
    if spec == ValueSpec.TELESCOPE_MODEL_PRIORITY:
        if noise_file_exists(files, cnsts.NoiseFile.RMS):
            route = "rms"
            system_noise_model_load(rms, files[cnsts.NoiseFile.RMS], status)

        elif noise_file_exists(files, cnsts.NoiseFile.SENSITIVITY):
            route = "sensitivity -> rms"
            sensitivity = Mem(type_, Location.CPU, num_freqs)
            system_noise_model_load(sensitivity,
                                    files[cnsts.NoiseFile.SENSITIVITY],
                                    status)
            mnoise.sensitivity_to_rms(rms, sensitivity, num_freqs, bandwidth,
                                      integration_time, status)

        elif all(noise_file_exists(files, role) for role in
                 (cnsts.NoiseFile.T_SYS, cnsts.NoiseFile.AREA,
                  cnsts.NoiseFile.EFFICIENCY)):
            route = "t_sys, area, efficiency -> rms"
            components = []
            for role in (cnsts.NoiseFile.T_SYS, cnsts.NoiseFile.AREA,
                         cnsts.NoiseFile.EFFICIENCY):
                mem = Mem(type_, Location.CPU, num_freqs)
                system_noise_model_load(mem, files[role], status)
                components.append(mem)
            mnoise.t_sys_to_rms(rms, *components, num_freqs, bandwidth,
                                integration_time, status)

        else:
            status.set(ErrorCode.SETUP_FAIL_TELESCOPE,
                       "no noise data files found")

    # RMS priority
    elif spec == ValueSpec.RMS:
        route = "rms ({})".format(_override_name(settings.quantity('rms')))
        load_noise_quantity(settings.quantity('rms'), rms, files,
                            cnsts.NoiseFile.RMS, num_freqs, status)

    # Sensitivity priority
    elif spec == ValueSpec.SENSITIVITY:
        q = settings.quantity('sensitivity')
        route = "sensitivity ({}) -> rms".format(_override_name(q))
        sensitivity = Mem(type_, Location.CPU, num_freqs)
        load_noise_quantity(q, sensitivity, files,
                            cnsts.NoiseFile.SENSITIVITY, num_freqs, status)
        mnoise.sensitivity_to_rms(rms, sensitivity, num_freqs, bandwidth,
                                  integration_time, status)

    # Temperature, area, and efficiency priority
    elif spec == ValueSpec.SYSTEM_TEMPERATURE:
        components, names = [], []
        for name, role in (('t_sys', cnsts.NoiseFile.T_SYS),
                           ('area', cnsts.NoiseFile.AREA),
                           ('efficiency', cnsts.NoiseFile.EFFICIENCY)):
            q = settings.quantity(name)
            mem = Mem(type_, Location.CPU, num_freqs)
            load_noise_quantity(q, mem, files, role, num_freqs, status)
            if status.failed:
                return
            components.append(mem)
            names.append("{} ({})".format(name, _override_name(q)))
        route = "{} -> rms".format(', '.join(names))
        mnoise.t_sys_to_rms(rms, *components, num_freqs, bandwidth,
                            integration_time, status)

    else:
        status.set(ErrorCode.SETTINGS_INTERFEROMETER_NOISE,
                   "unknown noise value specification "
                   "'{}'".format(settings.noise['values']['specification']))

    if status.failed:
        return

    if rms.num_elements != num_freqs:
        status.set(ErrorCode.SETUP_FAIL_TELESCOPE,
                   "{} noise values for {} frequencies".format(
                       rms.num_elements, num_freqs
                   ))
        return

    noise.rms.copy_from(rms, status)
    if status.failed:
        return

    if log is not None:
        log.add_entry("INFO", "Station noise from {}".format(route))


def load_noise_quantity(quantity: QuantitySettings, mem: Mem,
                        files: Dict[cnsts.NoiseFile, str],
                        role: cnsts.NoiseFile, num_freqs: int,
                        status: Status) -> None:
    """
    Load a noise quantity into mem according to its override setting: from
    the telescope model's file of the given role (no override), from the
    data file named by the override, or as a range of values

    Parameters
    ----------
    quantity : QuantitySettings
        Override settings of the quantity
    mem : Mem
        Buffer to load values into, resized as required
    files : dict
        Mapping of NoiseFile role to absolute path
    role : NoiseFile
        Role of the telescope model file holding the quantity
    num_freqs : int
        Number of frequencies at which noise is defined
    status : Status
        Error status

    Returns
    -------
    None.
    """
    if status.failed:
        return

    if quantity.override == Override.NO_OVERRIDE:
        if not noise_file_exists(files, role):
            status.set(ErrorCode.FILE_IO,
                       "no {} file found in telescope model".format(
                           role.filename
                       ))
            return
        system_noise_model_load(mem, files[role], status)

    elif quantity.override == Override.DATA_FILE:
        system_noise_model_load(mem, quantity.file, status)

    elif quantity.override == Override.RANGE:
        mnoise.evaluate_range(mem, num_freqs, quantity.start, quantity.end,
                              status)

    else:
        status.set(ErrorCode.SETUP_FAIL_TELESCOPE,
                   "unknown override for {} values".format(role.filename))


def _override_name(quantity: QuantitySettings) -> str:
    if quantity.override is None:
        return 'unknown override'
    return quantity.override.value.replace('_', ' ')


def _freqs_summary(freqs: Mem) -> str:
    if freqs.num_elements == 0:
        return 'none'
    lo, hi = freqs.data.min(), freqs.data.max()
    if freqs.num_elements == 1:
        return miscf.freq_str(float(lo), '.3f')

    return ' to '.join(miscf.freq_str([float(lo), float(hi)], '.3f'))
