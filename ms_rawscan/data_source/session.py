'''On-demand access to individual scans through one long-lived provider
handle.

A :class:`StreamingSession` is owned by its caller and is not thread-safe:
the single handle it wraps carries position state, so only one caller may
use a session at a time.
'''
import logging

from ms_rawscan.utils import Constant

from .exceptions import SessionNotOpen
from .precursor import scan_ms_level
from .provider import open_provider
from .resolver import ScanMetadataResolver


logger = logging.getLogger(__name__)


CLOSED = Constant("closed", False)
OPEN = Constant("open", True)


class StreamingSession(object):
    '''Reads scans one at a time from an open run.

    Can be used as a context manager, closing the handle on exit.

    Attributes
    ----------
    opener: Callable
        Produces a :class:`~.ScanProvider` for a path
    filter_config: :class:`~.FilterConfig` or None
        The peak filter used when :meth:`get_scan` is not given one
    path: str or None
        The path of the open run
    state: :class:`~.Constant`
        :data:`OPEN` or :data:`CLOSED`
    '''

    def __init__(self, path=None, opener=None, filter_config=None):
        self.opener = opener
        self.filter_config = filter_config
        self.path = None
        self.state = CLOSED
        self._provider = None
        self._resolver = None
        if path is not None:
            self.open(path)

    def open(self, path):
        '''Open ``path``, closing any run this session already has open.

        Parameters
        ----------
        path: str

        Returns
        -------
        :class:`StreamingSession`

        Raises
        ------
        :class:`~.NotFound`
        :class:`~.SourceUnavailable`
        '''
        if self.state is OPEN:
            logger.debug("Closing %r before opening %r", self.path, path)
            self.close()
        provider = open_provider(path, self.opener)
        self._provider = provider
        self._resolver = ScanMetadataResolver(provider, self.filter_config)
        self.path = path
        self.state = OPEN
        return self

    def _require_open(self):
        if self.state is not OPEN:
            raise SessionNotOpen()
        return self._provider

    @property
    def is_open(self):
        return self.state is OPEN

    @property
    def first_scan(self):
        return self._require_open().first_scan

    @property
    def last_scan(self):
        return self._require_open().last_scan

    def __len__(self):
        provider = self._require_open()
        return max(provider.last_scan - provider.first_scan + 1, 0)

    def get_scan(self, scan_number, filter_config=None):
        '''Resolve a single scan.

        Parameters
        ----------
        scan_number: int
            The one-based scan number
        filter_config: :class:`~.FilterConfig`, optional
            Overrides :attr:`filter_config` for this scan

        Returns
        -------
        :class:`~.ScanRecord` or None
            :const:`None` if ``scan_number`` is outside the run

        Raises
        ------
        :class:`~.SessionNotOpen`
        '''
        provider = self._require_open()
        if scan_number < provider.first_scan or scan_number > provider.last_scan:
            return None
        return self._resolver.resolve(scan_number, filter_config)

    def get_ms_orders(self):
        '''The MS order of every scan in the run, in scan number order.

        Useful for choosing which scans to fetch without resolving them all.

        Returns
        -------
        list of int

        Raises
        ------
        :class:`~.SessionNotOpen`
        '''
        provider = self._require_open()
        return [scan_ms_level(provider, i)
                for i in range(provider.first_scan, provider.last_scan + 1)]

    def close(self):
        '''Release the handle. Safe to call repeatedly.
        '''
        if self._provider is not None:
            self._provider.close()
        self._provider = None
        self._resolver = None
        self.path = None
        self.state = CLOSED

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return "StreamingSession(%r, %s)" % (self.path, self.state)
