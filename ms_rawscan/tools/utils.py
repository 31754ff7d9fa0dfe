import os
import sys
import warnings
import logging

import click

from ms_rawscan.config import get_extraction_config
from ms_rawscan.peak_filter import FilterConfig


def processes_option(f):
    opt = click.option(
        "-p", "--processes", 'processes', type=int, default=None,
        help=('Number of worker threads to use. Values below 1 use one worker per CPU. '
              'Defaults to the configured extraction.max_parallelism'))
    return opt(f)


def peak_filter_options(f):
    options = [
        click.option("-k", "--peaks-per-window", "peaks_per_window", type=click.IntRange(1, None),
                     default=None, help="Maximum number of peaks to keep in each m/z window"),
        click.option("-r", "--min-ratio", "min_ratio", type=click.FloatRange(0.0, 1.0, min_open=True),
                     default=None, help="Drop peaks weaker than this fraction of their window's base peak"),
        click.option("--ms1/--no-ms1", "apply_to_ms1", default=True, show_default=True,
                     help="Whether to filter MS1 scans"),
        click.option("--msn/--no-msn", "apply_to_msn", default=True, show_default=True,
                     help="Whether to filter MSn scans"),
    ]
    for opt in reversed(options):
        f = opt(f)
    return f


def build_filter_config(peaks_per_window=None, min_ratio=None, apply_to_ms1=True, apply_to_msn=True):
    '''Combine command line filter options with the configured default.

    When neither threshold is given on the command line, the
    ``extraction.peak_filter`` configuration block is used instead.

    Returns
    -------
    :class:`~.FilterConfig` or None
    '''
    if peaks_per_window is None and min_ratio is None:
        try:
            return FilterConfig.from_dict(get_extraction_config().get('peak_filter'))
        except (KeyError, TypeError, ValueError) as err:
            raise click.ClickException("Invalid extraction.peak_filter configuration: %s" % (err, ))
    return FilterConfig(peaks_per_window, min_ratio, apply_to_ms1, apply_to_msn)


def resolve_processes(processes):
    if processes is None:
        processes = get_extraction_config().get('max_parallelism', -1)
    return processes


def register_debug_hook():
    import traceback

    def info(type, value, tb):
        if hasattr(sys, 'ps1') or not sys.stderr.isatty():
            sys.__excepthook__(type, value, tb)
        else:
            try:
                import ipdb as pdb_api
            except ImportError:
                import pdb as pdb_api
            traceback.print_exception(type, value, tb)
            pdb_api.post_mortem(tb)

    sys.excepthook = info
    logging.basicConfig(level="DEBUG")


def is_debug_mode():
    env_val = os.environ.get('MS_RAWSCAN_DEBUG', '').lower()
    if not env_val:
        return False
    if env_val in ('0', 'no', 'false', 'off'):
        return False
    elif env_val in ('1', 'yes', 'true', 'on'):
        return True
    else:
        warnings.warn("MS_RAWSCAN_DEBUG value %r was not recognized. Enabling debug mode" % (env_val, ))
        return True
