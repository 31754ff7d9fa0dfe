'''Locate the scan an MSn scan's precursor ion was selected from.

When the instrument records the master scan number in the trailer it is
used as-is after a sanity check. Otherwise the run is searched backwards for
the nearest scan one MS order lower. That search is a best-effort guess: it
assumes the instrument acquired the dependent scan right after its
precursor's survey, which holds for typical data-dependent acquisition but
is not guaranteed.
'''
import logging

from ._thermo_helper import FilterString
from .exceptions import PrecursorNotFound


logger = logging.getLogger(__name__)


def scan_ms_level(provider, scan_number):
    '''Read the MS order of a scan from its filter string'''
    return FilterString(provider.filter_string(scan_number)).ms_level


class PrecursorResolver(object):
    '''Resolves precursor scan numbers against one provider handle.

    Attributes
    ----------
    provider: :class:`~.ScanProvider`
        The handle to query for neighboring scans' MS orders
    '''

    def __init__(self, provider):
        self.provider = provider

    def _ms_level_of(self, scan_number):
        return scan_ms_level(self.provider, scan_number)

    def _explicit_is_valid(self, scan_number, explicit, ms_level):
        if explicit >= scan_number:
            return False
        return self._ms_level_of(explicit) == ms_level - 1

    def search_backwards(self, scan_number, ms_level):
        '''Find the closest scan before ``scan_number`` whose MS order is
        ``ms_level - 1``.

        Parameters
        ----------
        scan_number: int
            The scan whose precursor is sought
        ms_level: int
            The MS order of that scan

        Returns
        -------
        int

        Raises
        ------
        :class:`~.PrecursorNotFound`:
            If no earlier scan has the required MS order
        '''
        target_level = ms_level - 1
        for i in range(scan_number - 1, 0, -1):
            if self._ms_level_of(i) == target_level:
                return i
        raise PrecursorNotFound(scan_number, ms_level)

    def resolve(self, scan_number, ms_level, explicit=None):
        '''Determine the precursor scan number of an MSn scan.

        Parameters
        ----------
        scan_number: int
            The one-based scan number of the MSn scan
        ms_level: int
            The MS order of the scan, at least 2
        explicit: int, optional
            A precursor scan number reported by the instrument

        Returns
        -------
        int
        '''
        if explicit is not None and explicit > 1:
            if self._explicit_is_valid(scan_number, explicit, ms_level):
                return explicit
            logger.warning(
                "Ignoring master scan number %d for scan %d (MS%d), it is not an earlier MS%d scan",
                explicit, scan_number, ms_level, ms_level - 1)
        return self.search_backwards(scan_number, ms_level)


def resolve_precursor(provider, scan_number, ms_level, explicit=None):
    '''See :meth:`PrecursorResolver.resolve`'''
    return PrecursorResolver(provider).resolve(scan_number, ms_level, explicit)
