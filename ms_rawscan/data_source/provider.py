'''The native scan provider interface consumed by extraction, and the
validation performed whenever a run is opened.

A provider is a handle onto one open run. Its position and instrument
selection state belong to that handle alone, so a handle must never be
shared between threads. Anything that needs a fresh handle receives an
*opener*, a callable taking a path and returning a new :class:`ScanProvider`.
'''
import os
import logging

from collections import namedtuple

from .exceptions import NotFound, SourceUnavailable


logger = logging.getLogger(__name__)


class ScanStats(namedtuple("ScanStats", ['low_mass', 'high_mass'])):
    '''The declared m/z range a scan was acquired over'''
    __slots__ = ()


class ReactionInfo(namedtuple("ReactionInfo", ['precursor_mz', 'isolation_width', 'activation_type'])):
    '''The first fragmentation reaction recorded for an MSn scan.

    Attributes
    ----------
    precursor_mz: float
        The isolation target m/z
    isolation_width: float
        The width of the isolation window
    activation_type: str or None
        A short activation code such as ``"cid"`` or ``"hcd"``
    '''
    __slots__ = ()


class ScanProvider(object):
    '''An abstract handle onto a single open run.

    All scan accessors take a one-based scan number.
    '''

    @property
    def is_open(self):
        raise NotImplementedError()

    @property
    def is_error(self):
        raise NotImplementedError()

    @property
    def in_acquisition(self):
        raise NotImplementedError()

    def select_ms_channel(self):
        '''Select the first mass spectrometer device of the run'''
        raise NotImplementedError()

    @property
    def total_scans(self):
        raise NotImplementedError()

    @property
    def first_scan(self):
        raise NotImplementedError()

    @property
    def last_scan(self):
        return self.total_scans

    def filter_string(self, scan_number):
        raise NotImplementedError()

    def scan_stats(self, scan_number):
        '''
        Returns
        -------
        :class:`ScanStats`
        '''
        raise NotImplementedError()

    def centroid_peaks(self, scan_number):
        '''
        Returns
        -------
        tuple of :class:`np.ndarray` or None
            The centroided (m/z, intensity) arrays, or :const:`None` if
            the scan has no centroid stream
        '''
        raise NotImplementedError()

    def preferred_peaks(self, scan_number):
        '''
        Returns
        -------
        tuple of :class:`np.ndarray` or None
            The vendor's preferred (m/z, intensity) arrays, or :const:`None`
        '''
        raise NotImplementedError()

    def trailer_fields(self, scan_number):
        '''
        Returns
        -------
        list of (str, str) tuples
            The trailer extra labels and their values, in recorded order
        '''
        raise NotImplementedError()

    def reaction(self, scan_number):
        '''
        Returns
        -------
        :class:`ReactionInfo`
        '''
        raise NotImplementedError()

    def retention_time(self, scan_number):
        raise NotImplementedError()

    def close(self):
        raise NotImplementedError()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def default_opener(path):
    '''Open ``path`` with the Thermo RawFileReader backed provider'''
    from .thermo_raw_net import ThermoRawProvider
    return ThermoRawProvider(path)


def open_provider(path, opener=None):
    '''Open ``path`` with ``opener`` and verify the run is readable, then
    select its mass spectrometer channel.

    Parameters
    ----------
    path: str
        The path to the run
    opener: Callable, optional
        Produces a :class:`ScanProvider` for a path. Defaults to
        :func:`default_opener`.

    Returns
    -------
    :class:`ScanProvider`

    Raises
    ------
    :class:`~.NotFound`:
        If ``path`` does not exist
    :class:`~.SourceUnavailable`:
        If the run cannot be opened, is in an error state, or is still being acquired
    '''
    if opener is None:
        opener = default_opener
    if not os.path.exists(path):
        raise NotFound(path)
    try:
        provider = opener(path)
    except (IOError, OSError) as err:
        raise SourceUnavailable(path, "Unable to access run (%s)" % (err, )) from err
    reason = None
    if not provider.is_open:
        reason = "Unable to access run"
    elif provider.is_error:
        reason = "Error opening run"
    elif provider.in_acquisition:
        reason = "Run still being acquired"
    if reason is not None:
        provider.close()
        raise SourceUnavailable(path, reason)
    provider.select_ms_channel()
    logger.debug("Opened %r with %d scans", path, provider.total_scans)
    return provider
