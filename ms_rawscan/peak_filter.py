'''Peak count reduction for centroided spectra.

A :class:`FilterConfig` describes how aggressively to thin out a spectrum,
and :func:`window_filter` applies it: the declared m/z range of a scan is cut
into uniform windows, and within each window peaks are dropped if they are
too weak relative to the window's base peak, or if there are too many of
them.
'''
import numpy as np

from ms_rawscan.utils import Base


class FilterConfig(Base):
    """Thresholds controlling peak windowing.

    Attributes
    ----------
    peaks_to_keep_per_window: int or None
        The maximum number of peaks to retain in each window
    minimum_intensity_ratio_to_base_peak: float or None
        Peaks weaker than this fraction of their window's base peak are dropped
    apply_to_ms1: bool
        Whether to filter MS1 scans
    apply_to_msn: bool
        Whether to filter MSn scans
    """

    __slots__ = ('peaks_to_keep_per_window', 'minimum_intensity_ratio_to_base_peak',
                 'apply_to_ms1', 'apply_to_msn')

    def __init__(self, peaks_to_keep_per_window=None, minimum_intensity_ratio_to_base_peak=None,
                 apply_to_ms1=True, apply_to_msn=True):
        if peaks_to_keep_per_window is not None:
            if int(peaks_to_keep_per_window) != peaks_to_keep_per_window or peaks_to_keep_per_window < 1:
                raise ValueError("peaks_to_keep_per_window must be a positive integer, got %r" % (
                    peaks_to_keep_per_window, ))
            peaks_to_keep_per_window = int(peaks_to_keep_per_window)
        if minimum_intensity_ratio_to_base_peak is not None:
            minimum_intensity_ratio_to_base_peak = float(minimum_intensity_ratio_to_base_peak)
            if not 0 < minimum_intensity_ratio_to_base_peak <= 1:
                raise ValueError(
                    "minimum_intensity_ratio_to_base_peak must be in (0, 1], got %r" % (
                        minimum_intensity_ratio_to_base_peak, ))
        self.peaks_to_keep_per_window = peaks_to_keep_per_window
        self.minimum_intensity_ratio_to_base_peak = minimum_intensity_ratio_to_base_peak
        self.apply_to_ms1 = bool(apply_to_ms1)
        self.apply_to_msn = bool(apply_to_msn)

    def has_threshold(self):
        return self.peaks_to_keep_per_window is not None or \
            self.minimum_intensity_ratio_to_base_peak is not None

    def applies_to(self, ms_level):
        '''Check whether scans of order ``ms_level`` should be filtered.

        Parameters
        ----------
        ms_level: int

        Returns
        -------
        bool
        '''
        if not self.has_threshold():
            return False
        if ms_level == 1:
            return self.apply_to_ms1
        return self.apply_to_msn

    def __eq__(self, other):
        if not isinstance(other, FilterConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash(tuple(sorted(self.to_dict().items())))

    def __reduce__(self):
        return self.__class__, (
            self.peaks_to_keep_per_window, self.minimum_intensity_ratio_to_base_peak,
            self.apply_to_ms1, self.apply_to_msn)

    def to_dict(self):
        return {
            "peaks_to_keep_per_window": self.peaks_to_keep_per_window,
            "minimum_intensity_ratio_to_base_peak": self.minimum_intensity_ratio_to_base_peak,
            "apply_to_ms1": self.apply_to_ms1,
            "apply_to_msn": self.apply_to_msn,
        }

    @classmethod
    def from_dict(cls, d):
        '''Build a :class:`FilterConfig` from a mapping such as the
        ``extraction.peak_filter`` configuration block. A :const:`None`
        mapping produces :const:`None`.
        '''
        if d is None:
            return None
        unknown = set(d) - set(cls.__slots__)
        if unknown:
            raise KeyError("Unrecognized peak filter options: %s" % (', '.join(sorted(unknown)), ))
        return cls(**d)


def window_filter(mz, intensity, config, low_mz, high_mz, n_windows=1):
    """Reduce the number of peaks in each window of ``[low_mz, high_mz]``.

    The declared range is split into ``n_windows`` windows of equal width.
    Peaks outside the declared range are assigned to the nearest edge window.
    Within a window, peaks below ``config.minimum_intensity_ratio_to_base_peak``
    times the window's most intense peak are dropped, then only the
    ``config.peaks_to_keep_per_window`` most intense peaks are kept, preferring
    the lower m/z among equally intense peaks.

    Parameters
    ----------
    mz: :class:`np.ndarray`
        The m/z of each peak
    intensity: :class:`np.ndarray`
        The intensity of each peak
    config: :class:`FilterConfig`
        The thresholds to apply
    low_mz: float
        The lower bound of the scan's declared m/z range
    high_mz: float
        The upper bound of the scan's declared m/z range
    n_windows: int
        The number of uniform windows to divide the range into

    Returns
    -------
    mz: :class:`np.ndarray`
        The surviving m/z values, sorted ascending
    intensity: :class:`np.ndarray`
        The intensities of the surviving peaks
    """
    mz = np.asarray(mz, dtype=np.float64)
    intensity = np.asarray(intensity, dtype=np.float64)
    if mz.size == 0:
        return mz.copy(), intensity.copy()
    n_windows = max(int(n_windows), 1)
    width = (high_mz - low_mz) / n_windows
    if width > 0:
        window_of = np.floor((mz - low_mz) / width).astype(np.int64)
        np.clip(window_of, 0, n_windows - 1, out=window_of)
    else:
        window_of = np.zeros(mz.size, dtype=np.int64)

    ratio = config.minimum_intensity_ratio_to_base_peak
    keep_count = config.peaks_to_keep_per_window
    kept = []
    for window in np.unique(window_of):
        members = np.flatnonzero(window_of == window)
        if ratio is not None:
            base_peak = intensity[members].max()
            members = members[intensity[members] >= ratio * base_peak]
        if keep_count is not None and members.size > keep_count:
            # most intense first, lower m/z first among ties
            order = np.lexsort((mz[members], -intensity[members]))
            members = members[order[:keep_count]]
        kept.append(members)

    kept = np.sort(np.concatenate(kept))
    order = np.argsort(mz[kept], kind='mergesort')
    kept = kept[order]
    return mz[kept], intensity[kept]
