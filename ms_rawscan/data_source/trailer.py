'''Typed access to the "trailer extra" label/value pairs an instrument
records alongside each scan.

Labels are matched by prefix since vendors append units and colons
inconsistently. A value of zero is how the instrument says "not measured",
so it is reported as :const:`None`.
'''
from collections import namedtuple

from .exceptions import TrailerValueError


INJECTION_TIME = "Ion Injection Time (ms)"
ISOLATION_WIDTH = "MS%d Isolation Width"
MONOISOTOPIC_MZ = "Monoisotopic M/Z"
CHARGE_STATE = "Charge State"
MASTER_SCAN_NUMBER = "Master Scan Number"
MASTER_INDEX = "Master Index"


class TrailerValues(namedtuple("TrailerValues", [
        'injection_time', 'isolation_width', 'monoisotopic_mz',
        'charge_state', 'master_scan_number'])):
    __slots__ = ()

    def __new__(cls, injection_time=None, isolation_width=None, monoisotopic_mz=None,
                charge_state=None, master_scan_number=None):
        return super(TrailerValues, cls).__new__(
            cls, injection_time, isolation_width, monoisotopic_mz, charge_state,
            master_scan_number)


def _parse_number(label, value):
    # float() does not consult the locale
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        raise TrailerValueError(label, value) from None


def _float_or_absent(label, value):
    number = _parse_number(label, value)
    if number is None or number == 0:
        return None
    return number


def _int_or_absent(label, value, minimum=0):
    number = _parse_number(label, value)
    if number is None:
        return None
    if number != int(number):
        raise TrailerValueError(label, value)
    number = int(number)
    if number <= minimum:
        return None
    return number


class TrailerFieldParser(object):
    '''Extracts the recognized trailer fields for scans of a given MS order.

    Attributes
    ----------
    ms_level: int
        The MS order of the scans being parsed. Only the injection time is
        read from MS1 scans.
    '''

    def __init__(self, ms_level):
        self.ms_level = ms_level
        self.isolation_width_label = ISOLATION_WIDTH % ms_level

    def parse(self, fields):
        '''Parse a sequence of (label, value) pairs.

        When several pairs match the same field, the last one wins.

        Parameters
        ----------
        fields: Iterable of (str, str)

        Returns
        -------
        :class:`TrailerValues`
        '''
        injection_time = None
        isolation_width = None
        monoisotopic_mz = None
        charge_state = None
        master_scan_number = None
        for label, value in fields:
            if label.startswith(INJECTION_TIME):
                injection_time = _float_or_absent(label, value)
            if self.ms_level < 2:
                continue
            if label.startswith(self.isolation_width_label):
                isolation_width = _float_or_absent(label, value)
            elif label.startswith(MONOISOTOPIC_MZ):
                monoisotopic_mz = _float_or_absent(label, value)
            elif label.startswith(CHARGE_STATE):
                charge_state = _int_or_absent(label, value)
            elif label.startswith(MASTER_SCAN_NUMBER) or label.startswith(MASTER_INDEX):
                # values of 1 or less mean unset
                master_scan_number = _int_or_absent(label, value, minimum=1)
        return TrailerValues(
            injection_time, isolation_width, monoisotopic_mz, charge_state,
            master_scan_number)

    def __call__(self, fields):
        return self.parse(fields)


def parse_trailer(fields, ms_level):
    '''Parse trailer ``fields`` for a scan of order ``ms_level``.

    See :meth:`TrailerFieldParser.parse`
    '''
    return TrailerFieldParser(ms_level).parse(fields)
