'''Thermo RAW file access using the pure .NET RawFileReader library
released in 2017.

This module provides :class:`ThermoRawProvider`, a :class:`~.ScanProvider`
implementation.

Depends upon the ``pythonnet`` project which provides the :mod:`clr`
module, enabling nearly seamless interoperation with the Common Language
Runtime.
'''

import sys
import os
import logging

import numpy as np

from .provider import ScanProvider, ScanStats, ReactionInfo


logger = logging.getLogger(__name__)


_DEFAULT_DLL_PATH = os.path.join(
    os.path.dirname(
        os.path.realpath(__file__)),
    "_vendor",
    "ThermoRawFileReader",
    "Libraries")


# late binding imports

Business = None
_RawFileReader = None
clr = None
Marshal = None
IntPtr = None
Int64 = None


activation_type_map = {
    "CollisionInducedDissociation": "cid",
    "HigherEnergyCollisionalDissociation": "hcd",
    "ElectronTransferDissociation": "etd",
    "ElectronCaptureDissociation": "ecd",
}


def determine_if_available():
    '''Checks whether or not the .NET-based Thermo
    RAW file reading feature is available.

    Returns
    -------
    :class:`bool`:
        Whether or not the feature is enabled.
    '''
    try:
        return _register_dll([_DEFAULT_DLL_PATH])
    except (OSError, ImportError, RuntimeError):
        return False


def _load_runtime():
    # pythonnet 3 picks mono on non-Windows platforms unless told otherwise
    if sys.platform == 'win32':
        return
    try:
        from pythonnet import load
    except ImportError:
        return
    try:
        load("coreclr")
    except RuntimeError:
        # a runtime has already been loaded into this process
        logger.debug("CLR runtime already loaded")


def _register_dll(search_paths=None):
    '''Start the Common Language Runtime interop service by importing
    the :mod:`clr` module from Pythonnet, and then populate the global
    names referring to .NET entities, and finally attempt to locate the
    ThermoRawFileReader DLLs by searching along ``search_paths``.

    Parameters
    ----------
    search_paths: list
        The paths to check along for the ThermoRawFileReader DLL bundle.

    Returns
    -------
    :class:`bool`:
        Whether or not the .NET library successfully loaded
    '''
    from ms_rawscan.config import get_config
    if search_paths is None:
        search_paths = []
    search_paths = list(search_paths)
    search_paths.append(_DEFAULT_DLL_PATH)
    # Take user-specified search paths first.
    search_paths = get_config().get('vendor_readers', {}).get('thermo-net', []) + search_paths
    global _RawFileReader, Business, clr   # pylint: disable=global-statement
    global Marshal, IntPtr, Int64   # pylint: disable=global-statement
    if _test_dll_loaded():
        return True
    _load_runtime()
    try:
        import clr  # pylint: disable=redefined-outer-name
        clr.AddReference("System.Runtime")
        clr.AddReference("System.Runtime.InteropServices")
        from System import IntPtr, Int64  # pylint: disable=redefined-outer-name
        from System.Runtime.InteropServices import Marshal  # pylint: disable=redefined-outer-name
    except ImportError:
        return False
    for path in search_paths:
        sys.path.append(path)
        try:
            clr.AddReference('ThermoFisher.CommonCore.RawFileReader')
            clr.AddReference('ThermoFisher.CommonCore.Data')
        except OSError:
            continue
        try:
            import ThermoFisher.CommonCore.Data.Business as Business  # pylint: disable=redefined-outer-name
            import ThermoFisher.CommonCore.RawFileReader as _RawFileReader  # pylint: disable=redefined-outer-name
        except ImportError:
            continue
        logger.debug("Loaded ThermoFisher.CommonCore from %r", path)
        break
    return _test_dll_loaded()


def register_dll(search_paths=None):
    '''Register the location of the Thermo RawFileReader DLL bundle with
    the Common Language Runtime interop system and load the .NET symbols
    used by this feature.

    Parameters
    ----------
    search_paths: list
        The paths to check along for the ThermoRawFileReader DLL bundle.

    '''
    if search_paths is None:
        search_paths = []
    loaded = _register_dll(search_paths)
    if not loaded:
        msg = '''The ThermoFisher.CommonCore libraries could not be located and loaded.'''
        raise ImportError(msg)


def _test_dll_loaded():
    return _RawFileReader is not None


def _copy_double_array(src):
    '''A quick and dirty implementation of the fourth technique shown in
    https://mail.python.org/pipermail/pythondotnet/2014-May/001525.html for
    copying a .NET Array[Double] to a NumPy ndarray[np.float64] via a raw
    memory copy.
    '''
    if src is None:
        return None
    dest = np.empty(len(src), dtype=np.float64)
    Marshal.Copy(
        src, 0,
        IntPtr.__overloads__[Int64](dest.__array_interface__['data'][0]),
        len(src))
    return dest


class ThermoRawProvider(ScanProvider):
    '''Reads scans from a Thermo Fisher RAW file through a single
    ``IRawDataPlus`` handle.

    Each instance owns its own .NET handle; open one per thread.
    '''

    def __init__(self, source_file):
        if not _test_dll_loaded():
            register_dll()
        self.source_file = source_file
        self._source = _RawFileReader.RawFileReaderAdapter.FileFactory(source_file)

    def __repr__(self):
        return "ThermoRawProvider(%r)" % (self.source_file)

    @property
    def is_open(self):
        return self._source is not None and bool(self._source.IsOpen)

    @property
    def is_error(self):
        return bool(self._source.IsError)

    @property
    def in_acquisition(self):
        return bool(self._source.InAcquisition)

    def select_ms_channel(self):
        self._source.SelectInstrument(Business.Device.MS, 1)

    @property
    def total_scans(self):
        return self._source.RunHeaderEx.LastSpectrum

    @property
    def first_scan(self):
        return self._source.RunHeaderEx.FirstSpectrum

    @property
    def last_scan(self):
        return self._source.RunHeaderEx.LastSpectrum

    def filter_string(self, scan_number):
        return str(self._source.GetFilterForScanNumber(scan_number).ToString())

    def scan_stats(self, scan_number):
        stats = self._source.GetScanStatsForScanNumber(scan_number)
        return ScanStats(stats.LowMass, stats.HighMass)

    def centroid_peaks(self, scan_number):
        stream = self._source.GetCentroidStream(scan_number, False)
        if stream is None or stream.Masses is None or stream.Intensities is None:
            return None
        return _copy_double_array(stream.Masses), _copy_double_array(stream.Intensities)

    def preferred_peaks(self, scan_number):
        scan = Business.Scan.FromFile(self._source, scan_number)
        if scan is None or scan.PreferredMasses is None or scan.PreferredIntensities is None:
            return None
        return _copy_double_array(scan.PreferredMasses), _copy_double_array(scan.PreferredIntensities)

    def trailer_fields(self, scan_number):
        trailer = self._source.GetTrailerExtraInformation(scan_number)
        return [(str(label), str(value)) for label, value in zip(trailer.Labels, trailer.Values)]

    def reaction(self, scan_number):
        event = self._source.GetScanEventForScanNumber(scan_number)
        reaction = event.GetReaction(0)
        activation = str(reaction.ActivationType)
        return ReactionInfo(
            float(reaction.PrecursorMass),
            float(reaction.IsolationWidth),
            activation_type_map.get(activation, activation.lower()))

    def retention_time(self, scan_number):
        return self._source.RetentionTimeFromScanNumber(scan_number)

    def close(self):
        '''Release the underlying file reader.
        '''
        if self._source is not None:
            self._source.Dispose()
            self._source = None
