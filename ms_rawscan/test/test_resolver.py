import unittest

import numpy as np
import pytest

from pyteomics.auxiliary import unitfloat

from ms_rawscan.data_source.memory import MemoryRun, MemoryScan, make_scan
from ms_rawscan.data_source.provider import ReactionInfo
from ms_rawscan.data_source.resolver import ScanMetadataResolver, resolve_scan
from ms_rawscan.data_source.activation import CID, HCD, ETD, UnknownDissociation
from ms_rawscan.data_source.exceptions import (
    InvalidScanOrder, InvalidScanPolarity, SpectrumUnavailable)
from ms_rawscan.peak_filter import FilterConfig
from ms_rawscan.test.common import survey_scan


class TestScanMetadataResolver(unittest.TestCase):

    def resolver_for(self, scans, filter_config=None):
        provider = MemoryRun(scans).open("run.raw")
        self.addCleanup(provider.close)
        return ScanMetadataResolver(provider, filter_config)

    def test_survey_scan(self):
        resolver = self.resolver_for([
            make_scan(1, mz=[300.0, 200.0], intensity=[4.0, 6.0], scan_time=1.5,
                      low_mass=150.0, high_mass=1500.0,
                      trailer=[("Ion Injection Time (ms):", "50.0"), ("Charge State:", "2")]),
        ])
        record = resolver.resolve(1)
        assert record.index == 1
        assert record.id == "controllerType=0 controllerNumber=1 scan=1"
        assert record.ms_level == 1
        assert record.polarity == 1
        assert record.scan_time == 1.5
        assert record.scan_window == (150.0, 1500.0)
        assert record.analyzer == "orbitrap"
        assert record.total_ion_current == 10.0
        assert isinstance(record.injection_time, unitfloat)
        assert record.injection_time == 50.0
        assert record.injection_time.unit_info == 'millisecond'
        assert record.precursor_index is None
        assert record.precursor_charge is None
        assert record.isolation_mz is None
        assert record.dissociation is None

    def test_tandem_scan(self):
        resolver = self.resolver_for([
            survey_scan(),
            make_scan(2, mz=[110.0, 120.0], intensity=[1.0, 2.0], precursor_mz=512.27,
                      isolation_width=3.0, activation_type='cid', polarity=-1, analyzer="ITMS",
                      trailer=[("MS2 Isolation Width:", "1.6"), ("Monoisotopic M/Z:", "512.2718"),
                               ("Charge State:", "2"), ("Master Scan Number:", "0")]),
        ])
        record = resolver.resolve(2)
        assert record.ms_level == 2
        assert record.polarity == -1
        assert record.analyzer == "ion trap"
        assert record.isolation_mz == 512.27
        assert record.isolation_width == 1.6
        assert record.dissociation == CID
        assert record.precursor_index == 1
        assert record.precursor_monoisotopic_mz == 512.2718
        assert record.precursor_charge == 2
        assert record.injection_time is None

    def test_isolation_width_from_reaction(self):
        resolver = self.resolver_for([survey_scan(), make_scan(2, isolation_width=2.0)])
        assert resolver.resolve(2).isolation_width == 2.0
        resolver = self.resolver_for([survey_scan(), make_scan(2, isolation_width=0.0)])
        assert resolver.resolve(2).isolation_width is None

    def test_dissociation_falls_back_to_filter_string(self):
        scan = make_scan(2, activation_type='etd')
        scan.reaction = ReactionInfo(scan.reaction.precursor_mz, 0.0, None)
        resolver = self.resolver_for([survey_scan(), scan])
        assert resolver.resolve(2).dissociation == ETD
        resolver = self.resolver_for([survey_scan(), make_scan(2, activation_type='hcd')])
        assert resolver.resolve(2).dissociation == HCD

    def test_unknown_dissociation(self):
        resolver = self.resolver_for([survey_scan(), make_scan(2, activation_type='pqd')])
        dissociation = resolver.resolve(2).dissociation
        assert dissociation == UnknownDissociation
        assert not dissociation

    def test_preferred_peaks_fallback(self):
        resolver = self.resolver_for([
            make_scan(1, mz=[100.0, 200.0], intensity=[1.0, 2.0], centroided=False)])
        record = resolver.resolve(1)
        assert record.spectrum.mz.tolist() == [100.0, 200.0]
        assert record.total_ion_current == 3.0

    def test_spectrum_unavailable(self):
        resolver = self.resolver_for([MemoryScan("FTMS + c NSI Full ms [100.00-200.00]")])
        with pytest.raises(SpectrumUnavailable) as info:
            resolver.resolve(1)
        assert info.value.index == 1

    def test_empty_spectrum(self):
        resolver = self.resolver_for([make_scan(1)], FilterConfig(peaks_to_keep_per_window=1))
        record = resolver.resolve(1)
        assert record.spectrum.size == 0
        assert record.total_ion_current == 0.0

    def test_invalid_order(self):
        resolver = self.resolver_for([
            MemoryScan("FTMS + c NSI Full ms11 500.00@cid35.00 [100.00-200.00]", centroids=([], [])),
            MemoryScan("FTMS + c NSI Full [100.00-200.00]", centroids=([], [])),
        ])
        with pytest.raises(InvalidScanOrder) as info:
            resolver.resolve(1)
        assert info.value.ms_level == 11
        with pytest.raises(InvalidScanOrder):
            resolver.resolve(2)

    def test_invalid_polarity(self):
        resolver = self.resolver_for([
            MemoryScan("FTMS c NSI Full ms [100.00-200.00]", centroids=([], []))])
        with pytest.raises(InvalidScanPolarity):
            resolver.resolve(1)

    def test_peak_filter(self):
        scans = [
            make_scan(1, mz=[100.0, 200.0, 300.0], intensity=[3.0, 1.0, 2.0]),
            make_scan(2, mz=[100.0, 200.0, 300.0], intensity=[3.0, 1.0, 2.0]),
        ]
        config = FilterConfig(peaks_to_keep_per_window=2, apply_to_msn=False)
        resolver = self.resolver_for(scans, config)
        ms1 = resolver.resolve(1)
        assert ms1.spectrum.mz.tolist() == [100.0, 300.0]
        assert ms1.total_ion_current == 5.0
        assert resolver.resolve(2).spectrum.size == 3
        override = FilterConfig(peaks_to_keep_per_window=1)
        assert resolver.resolve(2, override).spectrum.mz.tolist() == [100.0]

    def test_resolve_scan(self):
        provider = MemoryRun([survey_scan()]).open("run.raw")
        record = resolve_scan(provider, None, 1)
        assert np.all(np.diff(record.spectrum.mz) >= 0)
        assert record.total_ion_current == record.spectrum.tic()


if __name__ == '__main__':
    unittest.main()
