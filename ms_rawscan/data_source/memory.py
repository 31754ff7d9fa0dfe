'''An in-memory :class:`~.ScanProvider`, for building synthetic runs and for
exercising extraction without vendor libraries.
'''
import threading

import numpy as np

from ms_rawscan.utils import Base

from .provider import ScanProvider, ScanStats, ReactionInfo


class MemoryScan(Base):
    '''The raw telemetry of one scan, as a provider would report it.

    Attributes
    ----------
    filter_string: str
        The scan's filter string, which carries its MS order, polarity and analyzer
    scan_time: float
        The retention time in minutes
    low_mass: float
        The lower bound of the declared m/z range
    high_mass: float
        The upper bound of the declared m/z range
    centroids: tuple of :class:`np.ndarray` or None
        The centroid stream
    preferred: tuple of :class:`np.ndarray` or None
        The fallback "preferred" mass list
    trailer: list of (str, str)
        The trailer extra label/value pairs
    reaction: :class:`~.ReactionInfo` or None
        The first fragmentation reaction, for MSn scans
    '''

    __slots__ = ('filter_string', 'scan_time', 'low_mass', 'high_mass', 'centroids',
                 'preferred', 'trailer', 'reaction')

    def __init__(self, filter_string, scan_time=0.0, low_mass=0.0, high_mass=2000.0,
                 centroids=None, preferred=None, trailer=None, reaction=None):
        self.filter_string = filter_string
        self.scan_time = scan_time
        self.low_mass = low_mass
        self.high_mass = high_mass
        self.centroids = _as_arrays(centroids)
        self.preferred = _as_arrays(preferred)
        self.trailer = list(trailer or [])
        self.reaction = reaction


def _as_arrays(pair):
    if pair is None:
        return None
    mzs, intensities = pair
    return np.asarray(mzs, dtype=np.float64), np.asarray(intensities, dtype=np.float64)


def make_scan(ms_level=1, mz=None, intensity=None, scan_time=0.0, low_mass=0.0, high_mass=2000.0,
              polarity=1, analyzer="FTMS", trailer=None, precursor_mz=None, isolation_width=0.0,
              activation_type='hcd', centroided=True):
    '''Build a :class:`MemoryScan` with a plausible filter string.

    Parameters
    ----------
    ms_level: int
        The MS order to write into the filter string
    mz, intensity: Sequence of float
        The peak arrays
    centroided: bool
        Whether the peaks are offered as the centroid stream, or only as
        the preferred mass list
    precursor_mz: float, optional
        The isolation target of an MSn scan. Defaults to 100 above the
        lower mass bound.

    Returns
    -------
    :class:`MemoryScan`
    '''
    if mz is None:
        mz = []
    if intensity is None:
        intensity = []
    sign = '+' if polarity > 0 else '-'
    reaction = None
    if ms_level > 1:
        if precursor_mz is None:
            precursor_mz = low_mass + 100.0
        fline = "%s %s c NSI d Full ms%d %0.4f@%s30.00 [%0.2f-%0.2f]" % (
            analyzer, sign, ms_level, precursor_mz, activation_type, low_mass, high_mass)
        reaction = ReactionInfo(precursor_mz, isolation_width, activation_type)
    else:
        fline = "%s %s c NSI Full ms [%0.2f-%0.2f]" % (analyzer, sign, low_mass, high_mass)
    arrays = (mz, intensity)
    return MemoryScan(
        fline, scan_time=scan_time, low_mass=low_mass, high_mass=high_mass,
        centroids=arrays if centroided else None,
        preferred=None if centroided else arrays,
        trailer=trailer, reaction=reaction)


class MemoryRun(object):
    '''A collection of :class:`MemoryScan` acting as a run on disk.

    Calling the run (or :meth:`open`) produces a new :class:`MemoryScanProvider`
    handle. Every handle produced is kept in :attr:`handles` so tests can
    inspect how handles were opened and closed.

    Attributes
    ----------
    scans: list of :class:`MemoryScan`
        Scan number ``i`` is ``scans[i - 1]``
    is_error: bool
        Whether handles report an error state
    in_acquisition: bool
        Whether handles report the run as still being acquired
    accessible: bool
        Whether handles report themselves as open
    '''

    def __init__(self, scans, is_error=False, in_acquisition=False, accessible=True):
        self.scans = list(scans)
        self.is_error = is_error
        self.in_acquisition = in_acquisition
        self.accessible = accessible
        self.handles = []
        self.events = []
        self._lock = threading.Lock()

    def __len__(self):
        return len(self.scans)

    def open(self, path):
        handle = MemoryScanProvider(self, path)
        with self._lock:
            self.handles.append(handle)
            self.events.append(("open", handle))
        return handle

    __call__ = open

    def _record_close(self, handle):
        with self._lock:
            self.events.append(("close", handle))

    def open_handles(self):
        return [h for h in self.handles if not h.closed]


class MemoryScanProvider(ScanProvider):
    '''A :class:`~.ScanProvider` handle onto a :class:`MemoryRun`.
    '''

    def __init__(self, run, path=None):
        self.run = run
        self.path = path
        self.closed = False
        self.channel_selected = False
        # the threads which have read scans through this handle
        self.threads = set()

    def _scan(self, scan_number):
        if self.closed:
            raise IOError("Handle on %r has been closed" % (self.path, ))
        self.threads.add(threading.get_ident())
        if scan_number < 1 or scan_number > len(self.run.scans):
            raise IndexError(scan_number)
        return self.run.scans[scan_number - 1]

    @property
    def is_open(self):
        return self.run.accessible and not self.closed

    @property
    def is_error(self):
        return self.run.is_error

    @property
    def in_acquisition(self):
        return self.run.in_acquisition

    def select_ms_channel(self):
        self.channel_selected = True

    @property
    def total_scans(self):
        return len(self.run.scans)

    @property
    def first_scan(self):
        return 1

    def filter_string(self, scan_number):
        return self._scan(scan_number).filter_string

    def scan_stats(self, scan_number):
        scan = self._scan(scan_number)
        return ScanStats(scan.low_mass, scan.high_mass)

    def centroid_peaks(self, scan_number):
        return self._scan(scan_number).centroids

    def preferred_peaks(self, scan_number):
        return self._scan(scan_number).preferred

    def trailer_fields(self, scan_number):
        return list(self._scan(scan_number).trailer)

    def reaction(self, scan_number):
        reaction = self._scan(scan_number).reaction
        if reaction is None:
            return ReactionInfo(0.0, 0.0, None)
        return reaction

    def retention_time(self, scan_number):
        return self._scan(scan_number).scan_time

    def close(self):
        if not self.closed:
            self.closed = True
            self.run._record_close(self)

    def __repr__(self):
        return "MemoryScanProvider(%r, %d scans)" % (self.path, len(self.run.scans))
