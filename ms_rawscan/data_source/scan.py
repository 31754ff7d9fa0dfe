'''Immutable value types produced by extraction: :class:`Spectrum`, the
centroided peak list of one scan, and :class:`ScanRecord`, the complete
description of one scan.
'''
from collections import namedtuple

import numpy as np

from ms_peak_picker import PeakSet, simple_peak


def _frozen_array(values):
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


class Spectrum(namedtuple("Spectrum", ['mz', 'intensity'])):
    """The m/z and intensity arrays of a centroided mass spectrum.

    Thin wrapper around a ``namedtuple``, so this object supports
    the same interfaces as a tuple. Both arrays are copied into read-only
    :class:`numpy.ndarray` instances of equal length.

    Attributes
    ----------
    mz: :class:`np.ndarray`
        The m/z of each peak, in non-decreasing order
    intensity: :class:`np.ndarray`
        The intensity of the peak at the corresponding m/z
    """

    def __new__(cls, mz, intensity):
        mz = _frozen_array(mz)
        intensity = _frozen_array(intensity)
        if mz.shape != intensity.shape:
            raise ValueError("m/z and intensity arrays must have the same length (%d != %d)" % (
                mz.size, intensity.size))
        return super(Spectrum, cls).__new__(cls, mz, intensity)

    @classmethod
    def empty(cls):
        return cls([], [])

    def __eq__(self, other):
        try:
            other_mz, other_intensity = other
        except (TypeError, ValueError):
            return False
        return np.array_equal(self.mz, other_mz) and np.array_equal(self.intensity, other_intensity)

    def __ne__(self, other):
        return not (self == other)

    __hash__ = None

    @property
    def size(self):
        '''The number of peaks'''
        return self.mz.size

    def __repr__(self):
        return "Spectrum(%d peaks)" % (self.size, )

    def peaks(self):
        '''Iterate over the (m/z, intensity) pairs of this spectrum'''
        return zip(self.mz.tolist(), self.intensity.tolist())

    def tic(self):
        '''The sum of all peak intensities

        Returns
        -------
        float
        '''
        return float(self.intensity.sum())

    def base_peak(self):
        '''The most intense peak as an (m/z, intensity) pair, or :const:`None`
        for an empty spectrum.
        '''
        if not self.size:
            return None
        i = int(np.argmax(self.intensity))
        return float(self.mz[i]), float(self.intensity[i])

    def to_peak_set(self):
        '''Convert the centroids into a :class:`ms_peak_picker.PeakSet`

        Returns
        -------
        :class:`ms_peak_picker.PeakSet`
        '''
        peaks = PeakSet([simple_peak(mz, intensity, 0.001) for mz, intensity in self.peaks()])
        peaks.reindex()
        return peaks


_scan_record_fields = [
    'index', 'ms_level', 'polarity', 'scan_time', 'scan_window', 'analyzer',
    'total_ion_current', 'injection_time', 'id', 'isolation_mz', 'isolation_width',
    'dissociation', 'precursor_index', 'precursor_monoisotopic_mz', 'precursor_charge',
    'spectrum', 'filter_string',
]


class ScanRecord(namedtuple("ScanRecord", _scan_record_fields)):
    """A single scan extracted from a run.

    Attributes
    ----------
    index: int
        The one-based scan number within the run
    ms_level: int
        The degree of fragmentation performed. 1 corresponds to a MS1 or "Survey" scan,
        2 corresponds to MS/MS, and so on.
    polarity: int
        ``+1`` for positive mode, ``-1`` for negative mode
    scan_time: float
        The retention time at which the scan was acquired, in minutes
    scan_window: tuple
        The (low, high) m/z bounds of the scan
    analyzer: str
        The mass analyzer which measured the scan
    total_ion_current: float
        The sum of the intensities of :attr:`spectrum`
    injection_time: :class:`pyteomics.auxiliary.unitfloat` or None
        The ion injection time in milliseconds
    id: str
        The native identifier of the scan
    isolation_mz: float or None
        The m/z isolated for fragmentation, MSn only
    isolation_width: float or None
        The width of the isolation window, MSn only
    dissociation: :class:`~.DissociationMethod` or None
        The dissociation method used, MSn only
    precursor_index: int or None
        The scan number of the scan the precursor ion was selected from
    precursor_monoisotopic_mz: float or None
        The monoisotopic m/z of the precursor as reported by the instrument
    precursor_charge: int or None
        The precursor charge state as reported by the instrument
    spectrum: :class:`Spectrum`
        The centroided peaks
    filter_string: str
        The scan's filter string
    """

    __slots__ = ()

    @property
    def is_centroid(self):
        return True

    @property
    def selected_ion_mz(self):
        return self.isolation_mz

    @property
    def scan_window_low(self):
        return self.scan_window[0]

    @property
    def scan_window_high(self):
        return self.scan_window[1]

    def __repr__(self):
        return "ScanRecord(%r, ms_level=%d, scan_time=%0.4f, peaks=%d%s)" % (
            self.id, self.ms_level, self.scan_time, self.spectrum.size,
            '' if self.precursor_index is None else ", precursor_index=%d" % self.precursor_index)
