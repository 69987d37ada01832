from glob import glob
import os
import argparse


def range_limited_float_type(arg):
    """ Type function for argparse - a float between 0 and 1 """
    min_val = 0
    max_val = 1
    try:
        f = float(arg)
    except ValueError:
        raise argparse.ArgumentTypeError("\n\tERROR: Must be a floating point number.")
    if f < min_val or f > max_val:
        raise argparse.ArgumentTypeError(f"\n\tERROR: Argument must be >={str(min_val)} and <={str(max_val)}.")
    return f


def add_conf_arg(parser, default=0.8):
    parser.add_argument(
        '-c', '--conf', default=default, type=range_limited_float_type,
        help=f'assignment confidence cutoff, between 0 and 1; default={default}'
    )


def add_quiet_debug_args(parser):
    parser.add_argument(
        '-q', '--quiet', action='store_true',
        help='suppress non-error output'
    )
    parser.add_argument(
        '-d', '--debug', action='store_true',
        help='output debugging output'
    )


def opfilter(path):
    return not path.startswith('__') and path not in ['utils']


def command_list(dirpath):
    paths = glob(os.path.join(dirpath, '*.py'))
    filenames = [os.path.basename(path) for path in paths]
    basenames = [os.path.splitext(path)[0] for path in filenames if not path.startswith('__')]
    basenames = filter(opfilter, basenames)
    return sorted(basenames)
