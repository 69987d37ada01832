"""summarize the number of taxa at each rank"""

usage="""

    taxtally rankinfo <hier_file> [ <more files> ... ]

Report the number of taxa, and the number of unclassified taxa, at each
rank of one or more taxonomy trees written by 'taxtally aggregate'.

"""


def subparser(subparsers):
    subparser = subparsers.add_parser('rankinfo', usage=usage)
    subparser.add_argument(
        'hier_files', metavar='FILE', nargs='+',
        help='taxonomy tree files written by aggregate'
    )
    subparser.add_argument(
        '-q', '--quiet', action='store_true',
        help='suppress non-error output'
    )


def main(args):
    import taxtally.tax.__main__
    return taxtally.tax.__main__.rankinfo(args)
