'''Errors raised while opening a run or resolving one of its scans.
'''


class RawScanError(Exception):
    '''Base class for all errors raised by :mod:`ms_rawscan`'''


class NotFound(RawScanError, IOError):
    '''The path does not refer to an existing run'''

    def __init__(self, path):
        self.path = path
        super(NotFound, self).__init__("Could not locate %r" % (path, ))

    def __reduce__(self):
        return self.__class__, (self.path, )


class SourceUnavailable(RawScanError, IOError):
    '''The provider could not open the run, reported an error state,
    or the run is still being acquired.
    '''

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super(SourceUnavailable, self).__init__("%s: %r" % (reason, path))

    def __reduce__(self):
        return self.__class__, (self.path, self.reason)


class InvalidScanOrder(RawScanError, ValueError):
    def __init__(self, index, ms_level):
        self.index = index
        self.ms_level = ms_level
        super(InvalidScanOrder, self).__init__(
            "Unknown MS order (%r) for scan number %d" % (ms_level, index))

    def __reduce__(self):
        return self.__class__, (self.index, self.ms_level)


class InvalidScanPolarity(RawScanError, ValueError):
    def __init__(self, index, filter_string):
        self.index = index
        self.filter_string = filter_string
        super(InvalidScanPolarity, self).__init__(
            "Cannot interpret polarity of scan number %d from %r" % (index, filter_string))

    def __reduce__(self):
        return self.__class__, (self.index, self.filter_string)


class SpectrumUnavailable(RawScanError, ValueError):
    def __init__(self, index):
        self.index = index
        super(SpectrumUnavailable, self).__init__(
            "Could not get centroid data from scan number %d" % (index, ))

    def __reduce__(self):
        return self.__class__, (self.index, )


class TrailerValueError(RawScanError, ValueError):
    def __init__(self, label, value):
        self.label = label
        self.value = value
        super(TrailerValueError, self).__init__(
            "Could not parse trailer value %r for %r" % (value, label))

    def __reduce__(self):
        return self.__class__, (self.label, self.value)


class PrecursorNotFound(RawScanError, LookupError):
    def __init__(self, index, ms_level):
        self.index = index
        self.ms_level = ms_level
        super(PrecursorNotFound, self).__init__(
            "Could not get precursor for scan number %d (MS%d)" % (index, ms_level))

    def __reduce__(self):
        return self.__class__, (self.index, self.ms_level)


class SessionNotOpen(RawScanError, RuntimeError):
    def __init__(self):
        super(SessionNotOpen, self).__init__("The streaming session has not been opened")

    def __reduce__(self):
        return self.__class__, ()


class ExtractionAborted(RawScanError, RuntimeError):
    '''Raised when any scan fails during batch extraction.

    Attributes
    ----------
    index: int
        The one-based scan number which failed
    cause: Exception
        The error raised while resolving that scan
    '''

    def __init__(self, index, cause):
        self.index = index
        self.cause = cause
        super(ExtractionAborted, self).__init__(
            "Error reading scan %d: %s" % (index, cause))

    def __reduce__(self):
        return self.__class__, (self.index, self.cause)
