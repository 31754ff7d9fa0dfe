import logging

from .scan import Spectrum, ScanRecord
from .provider import ScanProvider, ScanStats, ReactionInfo, open_provider
from .trailer import TrailerFieldParser, TrailerValues, parse_trailer
from .precursor import PrecursorResolver, resolve_precursor
from .resolver import ScanMetadataResolver, resolve_scan, build_spectrum
from .batch import BatchExtractor, extract, partition_scan_range
from .session import StreamingSession
from .memory import MemoryRun, MemoryScan, MemoryScanProvider, make_scan
from .activation import (
    DissociationMethod, CID, HCD, ETD, ECD, UnknownDissociation)
from .exceptions import (
    RawScanError, NotFound, SourceUnavailable, InvalidScanOrder,
    InvalidScanPolarity, SpectrumUnavailable, TrailerValueError,
    PrecursorNotFound, SessionNotOpen, ExtractionAborted)


logging.getLogger("ms_rawscan").addHandler(logging.NullHandler())


__all__ = [
    "Spectrum", "ScanRecord",

    "ScanProvider", "ScanStats", "ReactionInfo", "open_provider",

    "TrailerFieldParser", "TrailerValues", "parse_trailer",
    "PrecursorResolver", "resolve_precursor",
    "ScanMetadataResolver", "resolve_scan", "build_spectrum",

    "BatchExtractor", "extract", "partition_scan_range",
    "StreamingSession",

    "MemoryRun", "MemoryScan", "MemoryScanProvider", "make_scan",

    "DissociationMethod", "CID", "HCD", "ETD", "ECD", "UnknownDissociation",

    "RawScanError", "NotFound", "SourceUnavailable", "InvalidScanOrder",
    "InvalidScanPolarity", "SpectrumUnavailable", "TrailerValueError",
    "PrecursorNotFound", "SessionNotOpen", "ExtractionAborted",
]
