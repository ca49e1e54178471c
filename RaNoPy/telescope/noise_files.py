# -*- coding: utf-8 -*-
"""
Location and loading of the system noise data files found in a telescope
model directory tree.
"""
import os
from typing import Dict, Union

import numpy as np

from RaNoPy import _constants as cnsts
from RaNoPy.classes import DataType, Mem
from RaNoPy.errors import ErrorCode, Status
from RaNoPy.miscellaneous import functions as miscf


def update_noise_files(files: Dict[cnsts.NoiseFile, str],
                       directory: str) -> None:
    """
    Record the absolute paths of any noise data files present directly within
    directory. Entries of files for roles without a file in directory are
    left as they are, so files found in a parent directory remain in effect
    unless a child directory provides its own.

    Parameters
    ----------
    files : dict
        Mapping of NoiseFile role to absolute file path. Updated in place.
    directory : str
        Full path to directory to scan

    Returns
    -------
    None.
    """
    for role in cnsts.NoiseFile:
        path = os.path.join(directory, role.filename)
        if os.path.isfile(path):
            files[role] = os.path.abspath(path)


def noise_file_exists(files: Dict[cnsts.NoiseFile, str],
                      role: cnsts.NoiseFile) -> bool:
    return role in files and os.path.isfile(files[role])


def system_noise_model_load(mem: Mem, filename: Union[None, str],
                            status: Status) -> None:
    """
    Load a column of noise values (one per line) from a text file into mem,
    which is resized to the number of values read. Only the first numeric
    value of each line is used, lines without one (blank lines, comments
    etc.) are skipped.

    Parameters
    ----------
    mem : Mem
        Buffer to load values into. Must be single or double precision
    filename : str
        Full path to data file
    status : Status
        Error status

    Returns
    -------
    None.
    """
    if mem is None:
        status.set(ErrorCode.INVALID_ARGUMENT, "system_noise_model_load")
        return

    if status.failed:
        return

    if mem.type not in (DataType.SINGLE, DataType.DOUBLE):
        status.set(ErrorCode.BAD_DATA_TYPE,
                   "loading noise values into {} "
                   "buffer".format(mem.type.name))
        return

    if not filename or not os.path.isfile(filename):
        status.set(ErrorCode.FILE_IO, "{} not found".format(filename))
        return

    values = []
    try:
        with open(filename, 'rt') as f:
            for line in f:
                parsed = miscf.string_to_array(line, 1)
                if len(parsed) < 1:
                    continue
                values.append(parsed[0])
    except (OSError, UnicodeDecodeError) as e:
        status.set(ErrorCode.FILE_IO, "reading {}: {}".format(filename, e))
        return

    mem.realloc(len(values), status)
    if status.failed:
        return

    mem.data[:] = np.array(values, dtype=np.float64)
