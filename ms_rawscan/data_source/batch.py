'''Extract every scan of a run using a pool of worker threads.

The run's scan numbers are split into contiguous, disjoint ranges, one per
worker. Each worker opens its own provider handle, resolves its range in
order, and writes each record into the slot of a shared, pre-sized list
reserved for that scan number. Because the ranges never overlap, no two
workers ever touch the same slot or the same handle.
'''
import logging
import multiprocessing
import threading

from concurrent import futures

from ms_rawscan.task.log_utils import LogUtilsMixin

from .exceptions import ExtractionAborted
from .provider import open_provider
from .resolver import ScanMetadataResolver


logger = logging.getLogger(__name__)

DEFAULT_PARALLELISM = -1


def default_worker_count():
    return multiprocessing.cpu_count()


def partition_scan_range(first_scan, last_scan, n_workers):
    '''Split the inclusive range ``[first_scan, last_scan]`` into at most
    ``n_workers`` contiguous, disjoint, near-equal ranges.

    Parameters
    ----------
    first_scan: int
    last_scan: int
    n_workers: int

    Returns
    -------
    list of :class:`range`
    '''
    total = last_scan - first_scan + 1
    if total <= 0:
        return []
    n_workers = max(min(int(n_workers), total), 1)
    base, extra = divmod(total, n_workers)
    ranges = []
    start = first_scan
    for i in range(n_workers):
        size = base + (1 if i < extra else 0)
        ranges.append(range(start, start + size))
        start += size
    return ranges


class BatchExtractor(LogUtilsMixin):
    '''Extracts all scans of a run in parallel.

    Attributes
    ----------
    opener: Callable
        Produces a new :class:`~.ScanProvider` for a path. Called once to
        count the scans and once per worker.
    filter_config: :class:`~.FilterConfig` or None
        The peak filter applied to every scan
    max_parallelism: int or None
        The number of worker threads. :const:`None` or any value below 1
        uses one worker per CPU.
    '''

    def __init__(self, opener=None, filter_config=None, max_parallelism=DEFAULT_PARALLELISM):
        self.opener = opener
        self.filter_config = filter_config
        self.max_parallelism = max_parallelism

    def worker_count(self, total_scans):
        n_workers = self.max_parallelism
        if n_workers is None or n_workers < 1:
            n_workers = default_worker_count()
        return max(min(n_workers, total_scans), 1)

    def _count_scans(self, path):
        provider = open_provider(path, self.opener)
        try:
            return provider.total_scans
        finally:
            provider.close()

    def _extract_range(self, path, scan_range, results, stop_event):
        provider = open_provider(path, self.opener)
        try:
            resolver = ScanMetadataResolver(provider, self.filter_config)
            for scan_number in scan_range:
                if stop_event.is_set():
                    return
                try:
                    results[scan_number - 1] = resolver.resolve(scan_number)
                except Exception as err:
                    stop_event.set()
                    raise ExtractionAborted(scan_number, err) from err
        finally:
            provider.close()

    def extract(self, path):
        '''Extract every scan of the run at ``path``.

        Parameters
        ----------
        path: str

        Returns
        -------
        list of :class:`~.ScanRecord`
            Ordered by scan number, starting from 1

        Raises
        ------
        :class:`~.NotFound`
        :class:`~.SourceUnavailable`
        :class:`~.ExtractionAborted`
            If any scan could not be resolved. No partial results are returned.
        '''
        total_scans = self._count_scans(path)
        if total_scans <= 0:
            return []
        n_workers = self.worker_count(total_scans)
        ranges = partition_scan_range(1, total_scans, n_workers)
        self.log("Extracting %d scans from %s using %d workers" % (total_scans, path, len(ranges)))

        results = [None] * total_scans
        stop_event = threading.Event()
        failure = None
        with futures.ThreadPoolExecutor(len(ranges)) as executor:
            promises = {
                executor.submit(self._extract_range, path, scan_range, results, stop_event): scan_range
                for scan_range in ranges
            }
            for promise in futures.as_completed(promises):
                if promise.cancelled():
                    continue
                error = promise.exception()
                if error is not None:
                    stop_event.set()
                    if failure is None:
                        failure = error
                        for pending in promises:
                            pending.cancel()
                    continue
                scan_range = promises[promise]
                self.debug("Finished scans %d-%d" % (scan_range.start, scan_range.stop - 1))
        if failure is not None:
            self.error("Extraction of %s aborted: %s" % (path, failure))
            raise failure
        return results


BatchExtractor.log_with_logger(logger)


def extract(path, filter_config=None, max_parallelism=DEFAULT_PARALLELISM, opener=None):
    '''Extract every scan of the run at ``path``.

    See :meth:`BatchExtractor.extract`
    '''
    return BatchExtractor(opener, filter_config, max_parallelism).extract(path)
