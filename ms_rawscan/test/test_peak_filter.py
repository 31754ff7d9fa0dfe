import pickle
import unittest

import numpy as np
import pytest

from ms_rawscan.peak_filter import FilterConfig, window_filter


class TestWindowFilter(unittest.TestCase):

    def test_top_k(self):
        mz = [100.0, 200.0, 300.0, 400.0, 500.0]
        intensity = [10.0, 50.0, 30.0, 80.0, 5.0]
        config = FilterConfig(peaks_to_keep_per_window=2)
        out_mz, out_intensity = window_filter(mz, intensity, config, 0.0, 1000.0)
        assert out_mz.tolist() == [200.0, 400.0]
        assert out_intensity.tolist() == [50.0, 80.0]

    def test_single_window_keeps_base_peak(self):
        config = FilterConfig(peaks_to_keep_per_window=1, apply_to_ms1=True)
        out_mz, out_intensity = window_filter(
            [100.0, 200.0, 300.0], [50.0, 80.0, 10.0], config, 100.0, 300.0)
        assert out_mz.tolist() == [200.0]
        assert out_intensity.tolist() == [80.0]

    def test_intensity_ratio(self):
        mz = [100.0, 200.0, 300.0]
        intensity = [100.0, 9.0, 10.0]
        config = FilterConfig(minimum_intensity_ratio_to_base_peak=0.1)
        out_mz, out_intensity = window_filter(mz, intensity, config, 0.0, 1000.0)
        assert out_mz.tolist() == [100.0, 300.0]

    def test_windows_filtered_independently(self):
        mz = [100.0, 150.0, 600.0, 650.0]
        intensity = [10.0, 20.0, 1.0, 2.0]
        config = FilterConfig(peaks_to_keep_per_window=1)
        out_mz, _ = window_filter(mz, intensity, config, 0.0, 1000.0, n_windows=2)
        assert out_mz.tolist() == [150.0, 650.0]

    def test_out_of_range_peaks_join_edge_windows(self):
        mz = [50.0, 150.0, 1100.0]
        intensity = [30.0, 20.0, 10.0]
        config = FilterConfig(peaks_to_keep_per_window=1)
        out_mz, _ = window_filter(mz, intensity, config, 100.0, 1000.0, n_windows=2)
        assert out_mz.tolist() == [50.0, 1100.0]

    def test_ties_prefer_lower_mz(self):
        config = FilterConfig(peaks_to_keep_per_window=1)
        out_mz, _ = window_filter([300.0, 200.0], [5.0, 5.0], config, 0.0, 1000.0)
        assert out_mz.tolist() == [200.0]

    def test_output_sorted_and_idempotent(self):
        rng = np.random.RandomState(7)
        mz = rng.uniform(100, 2000, 200)
        intensity = rng.uniform(1, 1000, 200)
        config = FilterConfig(peaks_to_keep_per_window=20, minimum_intensity_ratio_to_base_peak=0.05)
        out_mz, out_intensity = window_filter(mz, intensity, config, 100.0, 2000.0, n_windows=4)
        assert np.all(np.diff(out_mz) >= 0)
        assert out_mz.size <= 80
        again_mz, again_intensity = window_filter(out_mz, out_intensity, config, 100.0, 2000.0, n_windows=4)
        assert np.array_equal(again_mz, out_mz)
        assert np.array_equal(again_intensity, out_intensity)

    def test_empty(self):
        out_mz, out_intensity = window_filter([], [], FilterConfig(1), 0.0, 100.0)
        assert out_mz.size == 0 and out_intensity.size == 0

    def test_degenerate_range(self):
        config = FilterConfig(peaks_to_keep_per_window=1)
        out_mz, _ = window_filter([10.0, 20.0], [1.0, 2.0], config, 100.0, 100.0, n_windows=3)
        assert out_mz.tolist() == [20.0]


class TestFilterConfig(unittest.TestCase):

    def test_validation(self):
        with pytest.raises(ValueError):
            FilterConfig(peaks_to_keep_per_window=0)
        with pytest.raises(ValueError):
            FilterConfig(peaks_to_keep_per_window=2.5)
        with pytest.raises(ValueError):
            FilterConfig(minimum_intensity_ratio_to_base_peak=0.0)
        with pytest.raises(ValueError):
            FilterConfig(minimum_intensity_ratio_to_base_peak=1.5)

    def test_applies_to(self):
        assert not FilterConfig().applies_to(1)
        config = FilterConfig(peaks_to_keep_per_window=5, apply_to_ms1=False)
        assert not config.applies_to(1)
        assert config.applies_to(2)
        assert config.applies_to(3)
        config = FilterConfig(minimum_intensity_ratio_to_base_peak=0.5, apply_to_msn=False)
        assert config.applies_to(1)
        assert not config.applies_to(2)

    def test_from_dict(self):
        assert FilterConfig.from_dict(None) is None
        config = FilterConfig.from_dict({"peaks_to_keep_per_window": 10, "apply_to_ms1": False})
        assert config == FilterConfig(10, None, False, True)
        assert FilterConfig.from_dict(config.to_dict()) == config
        with pytest.raises(KeyError):
            FilterConfig.from_dict({"peaks": 10})

    def test_pickle(self):
        config = FilterConfig(10, 0.25, True, False)
        dup = pickle.loads(pickle.dumps(config))
        assert dup == config
        assert hash(dup) == hash(config)


if __name__ == '__main__':
    unittest.main()
