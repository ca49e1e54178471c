# -*- coding: utf-8 -*-
import re
from collections.abc import Iterable
from typing import List, Union

_SPLIT_REGEX = re.compile(r'[\s,]+')


def is_float(x):
    try:
        float(x)
        return True
    except ValueError:
        return False


def string_to_array(line: str, max_values: Union[None, int] = None
                    ) -> List[float]:
    """
    Parse leading numeric values from a line of text. Values may be separated
    by whitespace and/or commas. Parsing stops at the first token which is not
    a number, so any trailing (non-numeric) metadata, or a comment, is
    ignored.

    Parameters
    ----------
    line : str
        Line of text to parse
    max_values : int
        Maximum number of values to parse. Default is None (no limit).

    Returns
    -------
    List of floats parsed (may be empty)
    """
    values = []
    for token in _SPLIT_REGEX.split(line.strip()):
        if max_values is not None and len(values) >= max_values:
            break
        if not token or not is_float(token):
            break
        values.append(float(token))

    return values


def _param_key_check(params, keys, section=None):
    for key in keys:
        name = key if section is None else '.'.join([section, key])
        if key not in params:
            if section is None:
                return KeyError("{} keyword not found in params "
                                "dict".format(key))
            return KeyError("{} keyword not found in {} section of params "
                            "dict".format(key, section))

        val, typ = params[key], keys[key]
        if isinstance(typ, dict):
            if not isinstance(val, dict):
                return ValueError("value of {} section of params must be of "
                                  "type dict, not {}".format(name, type(val)))
            e = _param_key_check(val, typ, name)
            if e is not None:
                return e
            continue

        # bool is an int subclass, but is never a valid number here
        if isinstance(val, bool) and bool not in _flatten_types(typ):
            return ValueError("{} value of params must be of type {}, not "
                              "{}".format(name, typ, type(val)))

        if not isinstance(val, typ):
            return ValueError("{} value of params must be of type {}, not "
                              "{}".format(name, typ, type(val)))

    return None


def _flatten_types(typ):
    if isinstance(typ, tuple):
        flat = []
        for t in typ:
            flat += _flatten_types(t)
        return flat
    return [typ]


def check_settings_params(params):
    if not isinstance(params, dict):
        return TypeError("settings params must be dict")

    num = (int, float)
    file_ = (str, type(None))

    def quantity():
        return {'override': str, 'file': file_, 'start': num, 'end': num}

    keys = {'simulation': {'double_precision': bool},
            'telescope': {'input_directory': str},
            'observation': {'num_channels': int,
                            'start_frequency_hz': num,
                            'frequency_inc_hz': num,
                            'length_seconds': num,
                            'num_time_steps': int},
            'interferometer': {
                'channel_bandwidth_hz': num,
                'noise': {'enable': bool,
                          'seed': int,
                          'freq': {'specification': str,
                                   'file': file_,
                                   'number': int,
                                   'start': num,
                                   'inc': num},
                          'values': {'specification': str,
                                     'rms': quantity(),
                                     'sensitivity': quantity(),
                                     'components': {
                                         't_sys': quantity(),
                                         'area': quantity(),
                                         'efficiency': quantity()}}}}}

    e = _param_key_check(params, keys)
    if isinstance(e, Exception):
        return e

    # Extra, settings-specific checks here
    obs = params['observation']
    for key in ('num_channels', 'num_time_steps'):
        if obs[key] < 0:
            return ValueError("{} value of observation section of params "
                              "must not be negative".format(key))

    if params['interferometer']['noise']['freq']['number'] < 0:
        return ValueError("number value of interferometer.noise.freq section "
                          "of params must not be negative")

    return None


def freq_str(freq: Union[Iterable, float],
             fmt: str = '.0f') -> Union[Iterable, float]:
    """
    Return string of a frequency in sensible units

    Parameters
    ---------
    freq: Iterable, float
        Frequency(s) of which to format
    fmt: str
        Accuracy/format of returned frequency string(s)

    Returns
    -------
    String or list of strings representing input frequencies with units
    """
    suffixes = {'Hz': {'min_freq': 1., 'max_freq': 1e3},
                'kHz': {'min_freq': 1e3, 'max_freq': 1e6},
                'MHz': {'min_freq': 1e6, 'max_freq': 1e9},
                'GHz': {'min_freq': 1e9, 'max_freq': 1e12},
                'THz': {'min_freq': 1e12, 'max_freq': 1e15},
                'PHz': {'min_freq': 1e15, 'max_freq': 1e18},}

    def find_suffix(f):
        for suffix in suffixes:
            d = suffixes[suffix]
            if d['min_freq'] <= f < d['max_freq']:
                return suffix
        return 'Hz'

    if not isinstance(freq, Iterable):
        suffix = find_suffix(freq)
        fac = suffixes[suffix]['min_freq']
        return f'{{:{fmt}}}{{}}'.format(freq / fac, suffix)

    else:
        freq_strs = []
        for f in freq:
            suffix = find_suffix(f)
            fac = suffixes[suffix]['min_freq']
            freq_strs.append(f'{{:{fmt}}}{{}}'.format(f / fac, suffix))
        return freq_strs
