"""aggregate classification results into a taxonomy tree"""

usage="""

    taxtally aggregate <result_file> [ <more files> ... ] -o hier.tsv

The 'aggregate' command reads per-sequence classification results (the
classifier's 'allrank' or 'fixrank' output), one file per sample, and
builds a single taxonomy tree with the number of sequences assigned to each
taxon in each sample. Sequences whose assignment at a rank falls below
--conf are counted as 'unclassified_<taxon>' at the rank above.

"""

from taxtally.cli.utils import add_conf_arg, add_quiet_debug_args


def subparser(subparsers):
    subparser = subparsers.add_parser('aggregate', usage=usage)
    subparser.add_argument(
        'result_files', metavar='FILE', nargs='*', default=[],
        help='classification result files, one per sample'
    )
    subparser.add_argument(
        '--from-file', metavar='FILE',
        help='file containing a list of result files, one per line'
    )
    add_conf_arg(subparser)
    subparser.add_argument(
        '--dup-counts', metavar='FILE',
        help='CSV/TSV with seqname,count columns giving duplicate counts'
    )
    subparser.add_argument(
        '-o', '--hier-output', metavar='FILE', default='-',
        help='output the taxonomy tree with per-sample counts to this file; default stdout'
    )
    subparser.add_argument(
        '--assign-output', metavar='FILE',
        help='output per-sequence assignments to this file'
    )
    subparser.add_argument(
        '-f', '--format', default='allrank',
        choices=['allrank', 'fixrank', 'filterbyconf'],
        help='format of the per-sequence assignments; default=allrank'
    )
    subparser.add_argument(
        '--print-rank', metavar='RANK',
        help='only output assignments confident at this rank; default: lowest rank'
    )
    subparser.add_argument(
        '--taxon-filter', metavar='NAME', action='append',
        help='only output assignments that include this taxon (can be repeated)'
    )
    subparser.add_argument(
        '--rank-tally', metavar='FILE',
        help='output the number of taxa created at each rank'
    )
    subparser.add_argument(
        '--bad-sequences', metavar='FILE',
        help='output the names of sequences that could not be classified'
    )
    add_quiet_debug_args(subparser)


def main(args):
    import taxtally.tax.__main__
    return taxtally.tax.__main__.aggregate(args)
