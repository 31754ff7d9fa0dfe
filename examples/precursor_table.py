import csv

import click

from ms_rawscan import StreamingSession


@click.command("precursor-table")
@click.argument("infile", type=click.Path(readable=True))
@click.argument("outfile", type=click.Path(writable=True))
def main(infile, outfile):
    '''Write the precursor scan, isolation and charge information of every
    MSn scan in a Thermo RAW file to a tab-separated table.
    '''
    columns = ['scan_id', 'ms_level', 'precursor_scan', 'isolation_mz', 'isolation_width',
               'monoisotopic_mz', 'charge', 'dissociation']
    with StreamingSession(infile) as session, open(outfile, 'wt', newline='') as stream:
        writer = csv.writer(stream, delimiter='\t')
        writer.writerow(columns)
        orders = session.get_ms_orders()
        for scan_number, ms_level in enumerate(orders, session.first_scan):
            if ms_level == 1:
                continue
            scan = session.get_scan(scan_number)
            writer.writerow([
                scan.id, scan.ms_level, scan.precursor_index,
                scan.isolation_mz, scan.isolation_width,
                scan.precursor_monoisotopic_mz, scan.precursor_charge,
                scan.dissociation.name,
            ])


if __name__ == "__main__":
    main.main()
