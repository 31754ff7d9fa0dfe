'''Assemble a complete :class:`~.ScanRecord` from the separate pieces of
telemetry a provider exposes for one scan: its filter string, scan
statistics, peak arrays, trailer extras and fragmentation reaction.
'''
import logging

import numpy as np

from pyteomics.auxiliary import unitfloat

from ms_rawscan.peak_filter import window_filter

from ._thermo_helper import FilterString, _make_id
from .activation import dissociation_from_activation, UnknownDissociation
from .exceptions import InvalidScanOrder, InvalidScanPolarity, SpectrumUnavailable
from .precursor import PrecursorResolver
from .scan import Spectrum, ScanRecord
from .trailer import TrailerFieldParser


logger = logging.getLogger(__name__)

MIN_MS_LEVEL = 1
MAX_MS_LEVEL = 10


def build_spectrum(provider, scan_number, ms_level, scan_window, filter_config=None):
    '''Read the peaks of a scan and apply the peak window filter if
    ``filter_config`` calls for it.

    Centroid data are preferred. Scans without a centroid stream (usually
    ion trap scans) fall back to the vendor's preferred mass list.

    Parameters
    ----------
    provider: :class:`~.ScanProvider`
    scan_number: int
    ms_level: int
    scan_window: :class:`~.ScanStats`
        The scan's declared m/z range, which the filter windows subdivide
    filter_config: :class:`~.FilterConfig`, optional

    Returns
    -------
    :class:`~.Spectrum`

    Raises
    ------
    :class:`~.SpectrumUnavailable`
        If the scan has neither representation
    '''
    arrays = provider.centroid_peaks(scan_number)
    if arrays is None or arrays[0] is None or arrays[1] is None:
        arrays = provider.preferred_peaks(scan_number)
        if arrays is None or arrays[0] is None or arrays[1] is None:
            raise SpectrumUnavailable(scan_number)
    mzs, intensities = arrays
    mzs = np.asarray(mzs, dtype=np.float64)
    intensities = np.asarray(intensities, dtype=np.float64)
    if filter_config is not None and mzs.size > 0 and filter_config.applies_to(ms_level):
        mzs, intensities = window_filter(
            mzs, intensities, filter_config, scan_window[0], scan_window[1])
    return Spectrum(mzs, intensities)


class ScanMetadataResolver(object):
    '''Resolves scans of one provider handle into :class:`~.ScanRecord` instances.

    Attributes
    ----------
    provider: :class:`~.ScanProvider`
        The handle to read from. It must not be shared with another thread.
    filter_config: :class:`~.FilterConfig` or None
        The peak filter to apply when the caller does not give one
    '''

    def __init__(self, provider, filter_config=None):
        self.provider = provider
        self.filter_config = filter_config
        self.precursor_resolver = PrecursorResolver(provider)

    def _ms_level(self, scan_number, filter_string):
        ms_level = filter_string.ms_level
        if ms_level is None or not (MIN_MS_LEVEL <= ms_level <= MAX_MS_LEVEL):
            raise InvalidScanOrder(scan_number, ms_level)
        return ms_level

    def _polarity(self, scan_number, filter_string):
        polarity = filter_string.polarity
        if polarity is None:
            raise InvalidScanPolarity(scan_number, str(filter_string))
        return polarity

    def resolve(self, scan_number, filter_config=None):
        '''Build the :class:`~.ScanRecord` for ``scan_number``.

        Parameters
        ----------
        scan_number: int
            The one-based scan number
        filter_config: :class:`~.FilterConfig`, optional
            Overrides :attr:`filter_config` for this scan

        Returns
        -------
        :class:`~.ScanRecord`
        '''
        provider = self.provider
        if filter_config is None:
            filter_config = self.filter_config

        filter_string = FilterString(provider.filter_string(scan_number))
        ms_level = self._ms_level(scan_number, filter_string)
        polarity = self._polarity(scan_number, filter_string)
        native_id = _make_id(scan_number)

        stats = provider.scan_stats(scan_number)
        scan_window = (stats.low_mass, stats.high_mass)
        spectrum = build_spectrum(provider, scan_number, ms_level, scan_window, filter_config)

        trailer = TrailerFieldParser(ms_level).parse(provider.trailer_fields(scan_number))
        injection_time = trailer.injection_time
        if injection_time is not None:
            injection_time = unitfloat(injection_time, 'millisecond')

        isolation_mz = None
        isolation_width = None
        dissociation = None
        precursor_index = None
        if ms_level > 1:
            reaction = provider.reaction(scan_number)
            isolation_mz = reaction.precursor_mz
            dissociation = dissociation_from_activation(reaction.activation_type)
            if dissociation is UnknownDissociation:
                dissociation = dissociation_from_activation(filter_string.activation_type())
            isolation_width = trailer.isolation_width
            if isolation_width is None and reaction.isolation_width:
                isolation_width = reaction.isolation_width
            precursor_index = self.precursor_resolver.resolve(
                scan_number, ms_level, trailer.master_scan_number)

        return ScanRecord(
            index=scan_number,
            ms_level=ms_level,
            polarity=polarity,
            scan_time=provider.retention_time(scan_number),
            scan_window=scan_window,
            analyzer=filter_string.analyzer,
            total_ion_current=spectrum.tic(),
            injection_time=injection_time,
            id=native_id,
            isolation_mz=isolation_mz,
            isolation_width=isolation_width,
            dissociation=dissociation,
            precursor_index=precursor_index,
            precursor_monoisotopic_mz=trailer.monoisotopic_mz,
            precursor_charge=trailer.charge_state,
            spectrum=spectrum,
            filter_string=str(filter_string))


def resolve_scan(provider, filter_config, scan_number):
    '''Build the :class:`~.ScanRecord` for ``scan_number`` from ``provider``.

    See :meth:`ScanMetadataResolver.resolve`
    '''
    return ScanMetadataResolver(provider, filter_config).resolve(scan_number)
