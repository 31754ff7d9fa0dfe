import unittest
import tempfile
import shutil

import pytest

from ms_rawscan.data_source.memory import MemoryRun
from ms_rawscan.data_source.session import StreamingSession, OPEN, CLOSED
from ms_rawscan.data_source.exceptions import SessionNotOpen, NotFound
from ms_rawscan.peak_filter import FilterConfig
from ms_rawscan.test.common import touch, survey_scan, tandem_scan, dda_run


class TestStreamingSession(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.directory)
        self.path = touch(self.directory, "a.raw")
        self.other_path = touch(self.directory, "b.raw")
        self.run = dda_run(n_cycles=3, n_tandem=2)

    def test_get_scan(self):
        session = StreamingSession(self.path, opener=self.run)
        assert session.state is OPEN
        assert len(session) == 9
        record = session.get_scan(3)
        assert record.index == 3
        assert record.ms_level == 2
        assert record.precursor_index == 1
        session.close()

    def test_out_of_range(self):
        with StreamingSession(self.path, opener=self.run) as session:
            assert session.get_scan(0) is None
            assert session.get_scan(10) is None
            assert session.get_scan(9) is not None

    def test_get_ms_orders(self):
        with StreamingSession(self.path, opener=self.run) as session:
            assert session.get_ms_orders() == [1, 2, 2, 1, 2, 2, 1, 2, 2]

    def test_reopen_closes_previous_handle(self):
        session = StreamingSession(opener=self.run)
        session.open(self.path)
        first = self.run.handles[0]
        session.open(self.other_path)
        second = self.run.handles[1]
        assert self.run.events == [("open", first), ("close", first), ("open", second)]
        assert session.path == self.other_path
        session.close()
        with pytest.raises(SessionNotOpen):
            session.get_scan(1)
        assert self.run.open_handles() == []

    def test_not_open(self):
        session = StreamingSession(opener=self.run)
        assert session.state is CLOSED
        assert not session.is_open
        with pytest.raises(SessionNotOpen):
            session.get_scan(1)
        with pytest.raises(SessionNotOpen):
            session.get_ms_orders()
        with pytest.raises(SessionNotOpen):
            len(session)

    def test_close_is_idempotent(self):
        session = StreamingSession(self.path, opener=self.run)
        session.close()
        session.close()
        assert session.path is None
        assert [kind for kind, _ in self.run.events] == ["open", "close"]

    def test_context_manager_closes_on_error(self):
        with pytest.raises(KeyError):
            with StreamingSession(self.path, opener=self.run):
                raise KeyError("boom")
        assert self.run.open_handles() == []

    def test_failed_open_leaves_session_closed(self):
        session = StreamingSession(opener=self.run)
        with pytest.raises(NotFound):
            session.open(self.path + ".missing")
        assert not session.is_open

    def test_filter_config(self):
        run = MemoryRun([
            survey_scan(mz=[100.0, 200.0, 300.0], intensity=[1.0, 3.0, 2.0]), tandem_scan()])
        config = FilterConfig(peaks_to_keep_per_window=1)
        with StreamingSession(self.path, opener=run, filter_config=config) as session:
            assert session.get_scan(1).spectrum.mz.tolist() == [200.0]
            wider = FilterConfig(peaks_to_keep_per_window=2)
            assert session.get_scan(1, wider).spectrum.mz.tolist() == [200.0, 300.0]


if __name__ == '__main__':
    unittest.main()
