"""
Settings parameters of test case 1: system temperature priority, with
frequencies defined by a range
"""
import os

params = {'simulation': {'double_precision': False},
          'telescope': {'input_directory': os.sep.join([os.path.dirname(os.path.realpath(__file__)), 'telescope1'])},
          'observation': {'num_channels': 2,
                          'start_frequency_hz': 1.4e9,
                          'frequency_inc_hz': 1e6,
                          'length_seconds': 3600.,
                          'num_time_steps': 360},
          'interferometer': {
              'channel_bandwidth_hz': 2e5,
              'noise': {
                  'enable': True,
                  'seed': 3,
                  'freq': {'specification': 'range',
                           'file': None,
                           'number': 3,
                           'start': 1.4e9,
                           'inc': 1e6},
                  'values': {
                      'specification': 'system_temperature',
                      'rms': {'override': 'no_override', 'file': None,
                              'start': 0., 'end': 0.},
                      'sensitivity': {'override': 'no_override',
                                      'file': None, 'start': 0., 'end': 0.},
                      'components': {
                          't_sys': {'override': 'range', 'file': None,
                                    'start': 30., 'end': 30.},
                          'area': {'override': 'no_override', 'file': None,
                                   'start': 0., 'end': 0.},
                          'efficiency': {'override': 'range', 'file': None,
                                         'start': 0.7, 'end': 0.7}}
                  }
              }
          }
          }
