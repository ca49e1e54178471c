# -*- coding: utf-8 -*-
"""
RAdio system NOise in PYthon: load a telescope model's system noise.
"""
import os
import sys
import argparse
import time

import numpy as np
import tabulate

from RaNoPy import Settings, TelescopeModel, Status, logger
from RaNoPy.maths import noise as mnoise
from RaNoPy.miscellaneous import functions as miscf
from RaNoPy.plotting import functions as pfunc
from RaNoPy.telescope import telescope_model_noise_load


def summary_table(telescope: TelescopeModel) -> str:
    """
    Tabulated station, frequency and noise RMS of a telescope's stations
    """
    df = telescope.noise_table()
    rows = [[int(r.station), miscf.freq_str(r.frequency_hz, '.3f'),
             format(r.rms_jy, '.4g')] for r in df.itertuples()]

    return tabulate.tabulate(rows, headers=['Station', 'Frequency',
                                            'RMS [Jy]'],
                             tablefmt='simple')


def main(argv=None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("settings_param_file",
                        help="Full path to settings parameter file",
                        type=str)
    parser.add_argument("-v", "--verbose",
                        help="Increase output verbosity",
                        action="store_true")
    parser.add_argument("-l", "--log",
                        help="Full path to log file (default is within the "
                             "telescope model directory's parent)",
                        type=str, default=None)
    parser.add_argument("-o", "--output",
                        help="Full path to .csv file to save noise table to",
                        type=str, default=None)
    parser.add_argument("-p", "--plot",
                        help="Full path to save noise model plot to",
                        type=str, default=None)
    parser.add_argument("--vis", nargs=2, metavar=("IN_NPY", "OUT_NPY"),
                        help="Full paths to a .npy file of complex "
                             "visibilities, shape (times, channels, "
                             "baselines[, pols]), and the .npy file to save "
                             "them to with system noise added",
                        type=str, default=None)

    args = parser.parse_args(argv)
    settings = Settings(os.path.abspath(args.settings_param_file))

    if args.log is None:
        log_name = "NoiseLoad_"
        log_name += time.strftime("%Y-%m-%d-%H:%M:%S", time.localtime())
        log_name += ".log"
        tscp_dcy = os.path.abspath(settings.input_directory)
        logfile = os.sep.join([os.path.dirname(tscp_dcy), log_name])
    else:
        logfile = os.path.abspath(args.log)
    log = logger.Log(fname=logfile, verbose=args.verbose)

    if not settings.noise_enabled:
        log.add_entry("WARNING", "System noise is not enabled in "
                                 "{}".format(args.settings_param_file))
        return 0

    telescope = TelescopeModel(settings.precision)
    status = Status()
    telescope_model_noise_load(telescope, log, settings, status)
    if status.failed:
        print("Loading noise files failed: {}".format(status),
              file=sys.stderr)
        return 1

    print(summary_table(telescope))

    if args.output is not None:
        telescope.noise_table().to_csv(args.output, index=False)
        log.add_entry("INFO", "Noise table saved to {}".format(args.output))

    if args.plot is not None:
        pfunc.noise_model_plot(telescope, savefig=args.plot)
        log.add_entry("INFO", "Noise model plot saved to {}".format(args.plot))

    if args.vis is not None:
        vis = np.load(args.vis[0])
        mnoise.add_system_noise(vis, telescope,
                                settings.channel_frequencies_hz,
                                settings.noise_seed, status)
        if log.add_status(status, "Adding system noise"):
            print("Adding system noise failed: {}".format(status),
                  file=sys.stderr)
            return 1
        np.save(args.vis[1], vis)
        log.add_entry("INFO", "System noise (seed {}) added to visibilities, "
                              "saved to {}".format(settings.noise_seed,
                                                   args.vis[1]))

    return 0


if __name__ == '__main__':
    sys.exit(main())
