import os

try:
    import faulthandler
    faulthandler.enable()
except ImportError:
    pass

from ms_rawscan.data_source.memory import MemoryRun, make_scan


def touch(directory, name="run.raw"):
    '''Create an empty file for a :class:`MemoryRun` to stand in for.
    '''
    path = os.path.join(str(directory), name)
    with open(path, 'wb'):
        pass
    return path


def survey_scan(scan_time=0.0, **kwargs):
    kwargs.setdefault("mz", [200.0, 300.0, 400.0])
    kwargs.setdefault("intensity", [10.0, 30.0, 20.0])
    return make_scan(1, scan_time=scan_time, **kwargs)


def tandem_scan(scan_time=0.0, ms_level=2, **kwargs):
    kwargs.setdefault("mz", [150.0, 250.0])
    kwargs.setdefault("intensity", [5.0, 15.0])
    return make_scan(ms_level, scan_time=scan_time, **kwargs)


def dda_run(n_cycles=10, n_tandem=3):
    '''A data-dependent acquisition run: each cycle is one survey scan
    followed by ``n_tandem`` MS2 scans.
    '''
    scans = []
    t = 0.0
    for cycle in range(n_cycles):
        scans.append(survey_scan(t, mz=[200.0 + cycle, 300.0 + cycle], intensity=[100.0, 50.0 + cycle]))
        t += 0.01
        for j in range(n_tandem):
            scans.append(tandem_scan(
                t, precursor_mz=200.0 + cycle + j,
                trailer=[("Ion Injection Time (ms):", "12.5"), ("Charge State:", "2")]))
            t += 0.01
    return MemoryRun(scans)
