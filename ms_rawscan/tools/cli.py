'''Command line utilities for inspecting and extracting scans from
vendor mass spectrometry runs.
'''
from collections import Counter

import click

from ms_rawscan.data_source import StreamingSession, BatchExtractor, RawScanError
from ms_rawscan.tools.utils import (
    processes_option, peak_filter_options, build_filter_config, resolve_processes,
    is_debug_mode, register_debug_hook)


CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


def _get_opener(ctx):
    obj = ctx.find_object(dict) or {}
    return obj.get('opener')


def _fmt_optional(value, fmt="%s"):
    if value is None:
        return "-"
    return fmt % (value, )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.pass_context
def cli(ctx):
    '''Inspect and extract centroided scans from mass spectrometry runs.
    '''
    ctx.ensure_object(dict)


@cli.command("describe", short_help="Summarize the scans of a run")
@click.argument('path', type=click.Path())
@click.pass_context
def describe(ctx, path):
    '''Report the scan range of a run and how many scans of each MS order it holds.
    '''
    click.echo("Describing \"%s\"" % (path,))
    try:
        with StreamingSession(path, opener=_get_opener(ctx)) as session:
            first_scan = session.first_scan
            last_scan = session.last_scan
            orders = Counter(session.get_ms_orders())
    except RawScanError as err:
        raise click.ClickException(str(err))
    click.echo("First Scan: %d" % (first_scan, ))
    click.echo("Last Scan: %d" % (last_scan, ))
    click.echo("Scan Count: %d" % (sum(orders.values()), ))
    for ms_level, count in sorted(orders.items()):
        click.echo("MS%d Scans: %d" % (ms_level, count))


@cli.command("scan", short_help="Show the metadata of a single scan")
@click.argument('path', type=click.Path())
@click.argument('index', type=int)
@peak_filter_options
@click.pass_context
def scan(ctx, path, index, peaks_per_window=None, min_ratio=None, apply_to_ms1=True, apply_to_msn=True):
    '''Resolve scan INDEX of the run at PATH and print its metadata.
    '''
    filter_config = build_filter_config(peaks_per_window, min_ratio, apply_to_ms1, apply_to_msn)
    try:
        with StreamingSession(path, opener=_get_opener(ctx), filter_config=filter_config) as session:
            record = session.get_scan(index)
    except RawScanError as err:
        raise click.ClickException(str(err))
    if record is None:
        raise click.ClickException("Scan %d is not in \"%s\"" % (index, path))
    click.echo("ID: %s" % (record.id, ))
    click.echo("MS Level: %d" % (record.ms_level, ))
    click.echo("Scan Time: %0.4f" % (record.scan_time, ))
    click.echo("Polarity: %d" % (record.polarity, ))
    click.echo("Analyzer: %s" % (record.analyzer, ))
    click.echo("Scan Window: %0.2f-%0.2f" % record.scan_window)
    click.echo("Total Ion Current: %0.4g" % (record.total_ion_current, ))
    click.echo("Injection Time: %s" % _fmt_optional(record.injection_time, "%0.3f"))
    click.echo("Peaks: %d" % (record.spectrum.size, ))
    if record.ms_level > 1:
        click.echo("Isolation m/z: %s" % _fmt_optional(record.isolation_mz, "%0.4f"))
        click.echo("Isolation Width: %s" % _fmt_optional(record.isolation_width, "%0.4f"))
        click.echo("Dissociation: %s" % (record.dissociation, ))
        click.echo("Precursor Scan: %d" % (record.precursor_index, ))
        click.echo("Precursor Monoisotopic m/z: %s" % _fmt_optional(
            record.precursor_monoisotopic_mz, "%0.4f"))
        click.echo("Precursor Charge: %s" % _fmt_optional(record.precursor_charge, "%d"))


@cli.command("extract", short_help="Extract every scan of a run")
@click.argument('path', type=click.Path())
@peak_filter_options
@processes_option
@click.pass_context
def extract(ctx, path, peaks_per_window=None, min_ratio=None, apply_to_ms1=True, apply_to_msn=True,
            processes=None):
    '''Extract every scan of the run at PATH in parallel and write one
    tab-separated summary line per scan.
    '''
    filter_config = build_filter_config(peaks_per_window, min_ratio, apply_to_ms1, apply_to_msn)
    extractor = BatchExtractor(_get_opener(ctx), filter_config, resolve_processes(processes))
    try:
        records = extractor.extract(path)
    except RawScanError as err:
        raise click.ClickException(str(err))
    click.echo("\t".join(["index", "ms_level", "scan_time", "peaks", "total_ion_current",
                          "precursor_index", "isolation_mz"]))
    for record in records:
        click.echo("\t".join([
            str(record.index),
            str(record.ms_level),
            "%0.4f" % record.scan_time,
            str(record.spectrum.size),
            "%0.4g" % record.total_ion_current,
            _fmt_optional(record.precursor_index, "%d"),
            _fmt_optional(record.isolation_mz, "%0.4f"),
        ]))


main = cli.main

if is_debug_mode():
    register_debug_hook()

if __name__ == '__main__':
    click.secho("Running Debug Mode", fg='yellow')
    register_debug_hook()
    main()
