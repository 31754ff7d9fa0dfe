import re


analyzer_pat = re.compile(r"(?P<mass_analyzer_type>ITMS|TQMS|SQMS|TOFMS|FTMS|SECTOR)")
polarity_pat = re.compile(r"(?P<polarity>[\+\-])")
ionization_pat = re.compile(r"(?P<ionization_type>EI|CI|FAB|APCI|ESI|NSI|TSP|FD|MALDI|GD)")
ms_level_pat = re.compile(r" ms(?P<level>\d*) ")

activation_pat = re.compile(
    r"""(?:(?P<isolation_mz>\d+\.\d*)@
        (?P<activation_type>[a-z]+)
        (?P<activation_energy>\d*\.?\d*))""", re.VERBOSE)
activation_mode_pat = re.compile(
    r"""(?P<activation_type>[a-z]+)
        (?P<activation_energy>\d*\.\d*)""", re.VERBOSE)
scan_window_pat = re.compile(
    r"""
    \[(?P<scan_start>[0-9\.]+)-(?P<scan_end>[0-9\.]+)\]
    """, re.VERBOSE)


UNKNOWN_ANALYZER = "unknown"

analyzer_map = {
    'FTMS': "orbitrap",
    "ITMS": "ion trap",
    "SQMS": "quadrupole",
    "TQMS": "quadrupole",
    "TOFMS": "time-of-flight",
    "SECTOR": "magnetic sector"
}


class FilterString(str):
    '''A Thermo scan filter string which parses itself on construction.

    The parsed fields are available through :meth:`get` and :attr:`data`.
    '''
    def __init__(self, value):
        self.data = self._parse()

    def get(self, key):
        return self.data.get(key)

    @property
    def ms_level(self):
        return self.data.get("ms_level")

    @property
    def polarity(self):
        return self.data.get("polarity")

    @property
    def analyzer(self):
        return analyzer_map.get(self.data.get("analyzer"), UNKNOWN_ANALYZER)

    def activation_type(self):
        '''The activation code of the most recent tandem event, if any
        '''
        tandem_sequence = self.data.get("tandem_sequence")
        if not tandem_sequence:
            return None
        return tandem_sequence[-1]['activation_type'][-1]

    def _parse(self):
        return filter_string_parser(self)


def filter_string_parser(line):
    """Parses instrument information from Thermo's filter string

    Parameters
    ----------
    line : str
        The filter string associated with a scan

    Returns
    -------
    dict
        Fields extracted from the filter string
    """
    words = line.upper().split(" ")
    values = dict()
    i = 0
    values['supplemental_activation'] = " sa " in line
    ms_level_info = ms_level_pat.search(line)
    if ms_level_info is not None:
        level = ms_level_info.group("level")
        if level == "":
            values['ms_level'] = 1
        else:
            parts = line[ms_level_info.end():].split(" ")
            tandem_sequence = []
            for part in parts:
                activation_info = activation_pat.search(part)
                if activation_info is not None:
                    activation_info = activation_info.groupdict()
                    activation_event = dict()
                    activation_event["isolation_mz"] = float(activation_info['isolation_mz'])
                    activation_event["activation_type"] = [activation_info['activation_type']]
                    activation_event["activation_energy"] = [float(activation_info['activation_energy'] or 0)]
                    if part.count("@") > 1:
                        act_events = activation_mode_pat.finditer(part)
                        # discard the first match which we already recorded
                        next(act_events)
                        for match in act_events:
                            act_type, act_energy = match.groups()
                            activation_event["activation_type"].append(act_type)
                            activation_event['activation_energy'].append(float(act_energy))
                    tandem_sequence.append(activation_event)
            values['ms_level'] = int(level)
            values['tandem_sequence'] = tandem_sequence

    scan_window_info = scan_window_pat.search(line)
    if scan_window_info is not None:
        values['scan_window'] = (float(scan_window_info.group(1)), float(scan_window_info.group(2)))

    try:
        word = words[i]
        i += 1
        analyzer_info = analyzer_pat.search(word)
        if analyzer_info is not None:
            values['analyzer'] = analyzer_info.group(0)
            word = words[i]
            i += 1

        polarity_info = polarity_pat.search(word)
        if polarity_info is not None:
            polarity_sigil = polarity_info.group(0)
            if polarity_sigil == "+":
                polarity = 1
            else:
                polarity = -1
            values["polarity"] = polarity
            word = words[i]
            i += 1

        if word in ("P", "C"):
            if word == 'P':
                values['peak_mode'] = 'profile'
            else:
                values['peak_mode'] = 'centroid'
            word = words[i]
            i += 1

        ionization_info = ionization_pat.search(word)
        if ionization_info is not None:
            values['ionization'] = ionization_info.group(0)

        return values
    except IndexError:
        return values


_id_template = "controllerType=0 controllerNumber=1 scan="


def _make_id(scan_number):
    try:
        return "%s%d" % (_id_template, (scan_number))
    except TypeError:
        return None


def _parse_id(scan_id):
    return int(scan_id.replace(_id_template, ""))
