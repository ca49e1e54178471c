"""
Example settings parameter file for loading the system noise model of the
example telescope model (files/example_telescope).

Use would be with a RaNoPy.classes.Settings class instance e.g.:

settings = RaNoPy.classes.Settings('/full/path/to/example-settings-params.py')
"""
import os

params = {'simulation': {'double_precision': True},
          'telescope': {'input_directory': os.sep.join([os.path.dirname(os.path.realpath(__file__)), 'example_telescope'])},
          'observation': {'num_channels': 4,  # Number of frequency channels
                          'start_frequency_hz': 50e6,  # Hz
                          'frequency_inc_hz': 50e6,  # Hz
                          'length_seconds': 14400.,  # Observation length, s
                          'num_time_steps': 1440},  # Number of correlator dumps
          'interferometer': {
              'channel_bandwidth_hz': 1e6,  # Hz
              'noise': {
                  'enable': True,
                  'seed': 42,
                  # One of 'telescope_model', 'observation_settings',
                  # 'data_file' or 'range'
                  'freq': {'specification': 'telescope_model',
                           'file': None,
                           'number': 0,
                           'start': 0.,  # Hz
                           'inc': 0.},  # Hz
                  'values': {
                      # One of 'telescope_model_priority', 'rms',
                      # 'sensitivity' or 'system_temperature'
                      'specification': 'telescope_model_priority',
                      # Each override one of 'no_override', 'data_file' or
                      # 'range'
                      'rms': {'override': 'no_override', 'file': None,
                              'start': 0., 'end': 0.},  # Jy
                      'sensitivity': {'override': 'no_override', 'file': None,
                                      'start': 0., 'end': 0.},  # Jy
                      'components': {
                          't_sys': {'override': 'no_override', 'file': None,
                                    'start': 0., 'end': 0.},  # K
                          'area': {'override': 'no_override', 'file': None,
                                   'start': 0., 'end': 0.},  # m^2
                          'efficiency': {'override': 'no_override',
                                         'file': None,
                                         'start': 1., 'end': 1.}}
                  }
              }
          }
          }
