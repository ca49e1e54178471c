"""
RaNoPy configuration file.

Purpose:
    - Defines the locations of RaNoPy libraries and data files.
    - Defines default simulation settings
    - Defines plot dimensions
"""
import os

dcys = {"scripts": os.path.dirname(os.path.realpath(__file__)),
        "files": os.sep.join([os.path.dirname(os.path.realpath(__file__)),
                              "files"]),
        "home": os.path.expanduser("~")
        }


def _quantity_defaults(start: float = 0., end: float = 0.) -> dict:
    return {'override': 'no_override', 'file': None,
            'start': start, 'end': end}


defaults = {'simulation': {'double_precision': True},
            'telescope': {'input_directory': ''},
            'observation': {'num_channels': 1,
                            'start_frequency_hz': 100e6,  # Hz
                            'frequency_inc_hz': 0.,  # Hz
                            'length_seconds': 43200.,  # s
                            'num_time_steps': 24},
            'interferometer': {
                'channel_bandwidth_hz': 0.,  # Hz
                'noise': {
                    'enable': False,
                    'seed': 1,
                    'freq': {'specification': 'telescope_model',
                             'file': None,
                             'number': 0,
                             'start': 0.,  # Hz
                             'inc': 0.},  # Hz
                    'values': {
                        'specification': 'telescope_model_priority',
                        'rms': _quantity_defaults(),  # Jy
                        'sensitivity': _quantity_defaults(),  # Jy
                        'components': {
                            't_sys': _quantity_defaults(),  # K
                            'area': _quantity_defaults(),  # m^2
                            'efficiency': _quantity_defaults(1., 1.)}
                        }
                    }
                }
            }

plots = {"dims": {"column": 3.32153,  # inches
                  "text": 6.97522  # Inches
                  }
         }
