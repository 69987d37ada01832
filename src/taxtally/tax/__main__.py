"""
Command-line entry point for 'python -m taxtally.tax'
"""
import sys

from taxtally.logging import set_quiet, error, notify, print_results
from taxtally.exceptions import TaxTallyError
from taxtally.taxtally_args import (FileOutput, FileOutputCSV,
                                    load_pathlist_from_file, open_text_input)
from taxtally.multicompare import MultiClassifier
from taxtally.samples import ResultSample, load_dup_counts

from . import tax_utils

usage='''
taxtally <command> [<args>] - aggregate taxonomic classification results.

** Commands can be:

aggregate <result_file> [<result_file> ...] -o <hier.tsv>   - build a taxonomy tree with per-sample counts
rankinfo <hier.tsv> [<hier.tsv> ...]                        - number of taxa at each rank

** Use '-h' to get subcommand-specific help, e.g.

taxtally aggregate -h
'''


def collect_result_files(cmdline_input, *, from_file=None):
    """
    collect result files from cmdline; --from-file input
    """
    result_files = []
    for rf in cmdline_input:
        if rf not in result_files:
            result_files.append(rf)
        else:
            notify(f'ignoring duplicated reference to file: {rf}')
    if from_file:
        more_files = load_pathlist_from_file(from_file)
        for rf in more_files:
            if rf not in result_files:
                result_files.append(rf)
            else:
               notify(f'ignoring duplicated reference to file: {rf}')
    return result_files


def aggregate(args):
    """
    aggregate per-sequence classification results into one taxonomy tree
    """
    set_quiet(args.quiet, args.debug)

    try:
        result_files = collect_result_files(args.result_files,
                                            from_file=args.from_file)
        dup_counts = {}
        if args.dup_counts:
            dup_counts = load_dup_counts(args.dup_counts)
    except ValueError as exc:
        error(f"ERROR: {str(exc)}")
        sys.exit(-1)

    if not result_files:
        error('ERROR: must specify at least one classification result file.')
        sys.exit(-1)

    samples = [ ResultSample(rf, dup_counts=dup_counts) for rf in result_files ]

    mc = MultiClassifier()
    try:
        with FileOutput(args.assign_output) as assign_out:
            if not args.assign_output:
                assign_out = None
            result = mc.multi_classification_parser(samples, args.conf,
                                                    assign_out=assign_out,
                                                    format=args.format,
                                                    print_rank=args.print_rank,
                                                    taxon_filter=args.taxon_filter)
    except (OSError, ValueError, TaxTallyError) as exc:
        error(f"ERROR: {str(exc)}")
        sys.exit(-1)

    notify(f"aggregated {len(samples)} samples into {len(result.tree) - 1} taxa.")

    with FileOutputCSV(args.hier_output) as out_fp:
        tax_utils.write_hierarchy(result.tree, result.samples, out_fp)

    if args.rank_tally:
        notify(f"saving rank tally to '{args.rank_tally}'.")
        with FileOutputCSV(args.rank_tally) as out_fp:
            tax_utils.write_rank_tally(result.rank_tally, out_fp)

    if args.bad_sequences:
        notify(f"saving {len(result.bad_sequences)} unclassifiable sequence names to '{args.bad_sequences}'.")
        with FileOutput(args.bad_sequences) as out_fp:
            tax_utils.write_bad_sequences(result.bad_sequences, out_fp)

    return 0


def rankinfo(args):
    """
    count the taxa at each rank of one or more aggregated taxonomy trees
    """
    set_quiet(args.quiet)

    taxa_by_rank = {}
    unclassified_by_rank = {}
    try:
        for filename in args.hier_files:
            with open_text_input(filename) as fp:
                for row, counts in tax_utils.read_hierarchy(fp):
                    rank = row['rank']
                    taxon = (row['taxid'], row['name'])
                    if row['name'].startswith(tax_utils.UNCLASSIFIED_PREFIX):
                        unclassified_by_rank.setdefault(rank, set()).add(taxon)
                    else:
                        taxa_by_rank.setdefault(rank, set()).add(taxon)
    except (OSError, ValueError) as exc:
        error(f"ERROR: {str(exc)}")
        sys.exit(-1)

    ranks = list(dict.fromkeys(list(taxa_by_rank) + list(unclassified_by_rank)))
    total = sum(len(x) for x in taxa_by_rank.values())
    total += sum(len(x) for x in unclassified_by_rank.values())
    if total == 0:
        notify("(no taxa found)")
        return 0

    for rank in ranks:
        count = len(taxa_by_rank.get(rank, ()))
        n_unclass = len(unclassified_by_rank.get(rank, ()))
        print_results('{}: {} ({:.1f}%), {} unclassified', rank, count,
                      (count + n_unclass) / total * 100., n_unclass)

    return 0


def main(arglist=None):
    import taxtally
    args = taxtally.cli.get_parser().parse_args(arglist)
    submod = getattr(taxtally.cli, args.cmd)
    mainmethod = getattr(submod, 'main')
    return mainmethod(args)


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
