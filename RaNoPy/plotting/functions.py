# -*- coding: utf-8 -*-
from typing import Union

import numpy as np
import matplotlib.pylab as plt
from matplotlib.ticker import AutoMinorLocator

from RaNoPy import _config as cfg


def noise_model_plot(telescope: 'TelescopeModel', show_plot: bool = False,
                     savefig: Union[bool, str] = False,
                     stations: Union[None, list] = None):
    """
    Plot of system noise RMS flux density as a function of frequency, for
    each station of a telescope

    Parameters
    ----------
    telescope : TelescopeModel
        Telescope with populated station noise models
    show_plot : bool
        Whether to show the plot. Default is False
    savefig : bool or str
        Full path to save the plot to. Default is False (not saved)
    stations : list
        Indices of stations to plot. Default is None (all stations)

    Returns
    -------
    matplotlib.figure.Figure instance
    """
    if stations is None:
        stations = range(telescope.num_stations)

    fig, ax = plt.subplots(1, 1, figsize=(cfg.plots['dims']['column'],
                                          cfg.plots['dims']['column']))

    for idx in stations:
        noise = telescope.station[idx].noise
        n = min(noise.frequency.num_elements, noise.rms.num_elements)
        if n == 0:
            continue
        freqs = noise.frequency.data[:n].astype(np.float64) / 1e6
        ax.plot(freqs, noise.rms.data[:n], ls='-', marker='.', lw=0.8,
                label='Station {}'.format(idx))

    ax.set_xlabel(r'$\nu \, \left[ {\rm MHz} \right]$')
    ax.set_ylabel(r'$\sigma_{\rm rms} \, \left[ {\rm Jy} \right]$')
    ax.xaxis.set_minor_locator(AutoMinorLocator())
    ax.yaxis.set_minor_locator(AutoMinorLocator())
    ax.tick_params(which='both', direction='in', top=True, right=True)

    if 0 < len(ax.get_lines()) <= 10:
        ax.legend(loc='best', fontsize='x-small', frameon=False)

    plt.tight_layout()

    if savefig:
        plt.savefig(savefig, bbox_inches='tight', dpi=300)

    if show_plot:
        plt.show()

    return fig
