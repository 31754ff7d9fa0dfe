'''
ms_rawscan
----------
Extract centroided scans and their metadata from vendor mass spectrometry
runs, either all at once in parallel or one scan at a time through a
streaming session.
'''

from .version import version

from .peak_filter import FilterConfig, window_filter
from .data_source import (
    Spectrum, ScanRecord,
    BatchExtractor, extract,
    StreamingSession,
    ScanProvider, MemoryRun, make_scan,
    RawScanError, NotFound, SourceUnavailable, InvalidScanOrder,
    SpectrumUnavailable, PrecursorNotFound, SessionNotOpen, ExtractionAborted)


__all__ = [
    "FilterConfig", "window_filter",
    "Spectrum", "ScanRecord",
    "BatchExtractor", "extract", "StreamingSession",
    "ScanProvider", "MemoryRun", "make_scan",
    "RawScanError", "NotFound", "SourceUnavailable", "InvalidScanOrder",
    "SpectrumUnavailable", "PrecursorNotFound", "SessionNotOpen", "ExtractionAborted",
    'version',
]
