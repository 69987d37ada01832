"""Define the top-level command line interface for taxtally

This module handles user input when taxtally is invoked from the command
line. A top-level parser is defined for the `taxtally` command, and one
subparser for each module in this directory.
"""

from argparse import ArgumentParser, RawDescriptionHelpFormatter, SUPPRESS
import os
import sys

import taxtally

from . import utils

# Commands
from . import aggregate
from . import rankinfo


class TaxTallyParser(ArgumentParser):
    def _subparser_from_name(self, name):
        """Given a name, get the subparser instance registered with this parser."""
        container = self._actions
        if name is None:
            return None
        for action in container:
            if action.choices is None:
                continue
            elif name in action.choices:
                return action.choices[name]

    def parse_args(self, args=None, namespace=None):
        if (args is None and len(sys.argv) == 1) or (args is not None and len(args) == 0):
            self.print_help()
            raise SystemExit(1)
        args = super(TaxTallyParser, self).parse_args(args=args, namespace=namespace)

        if 'cmd' in args and args.cmd is None:
            self.print_help()
            raise SystemExit(1)
        return args


def get_parser():
    clidir = os.path.dirname(__file__)
    ops = utils.command_list(clidir)
    usage = '    Operations\n'
    for op in ops:
        docstring = getattr(sys.modules[__name__], op).__doc__
        helpstring = 'taxtally {op:s} --help'.format(op=op)
        usage += '        {hs:28s} {ds:s}\n'.format(hs=helpstring, ds=docstring)

    desc = 'Aggregate taxonomic classifications of many samples into one taxonomy tree.\n\nUsage instructions:\n' + usage
    parser = TaxTallyParser(prog='taxtally', description=desc, formatter_class=RawDescriptionHelpFormatter, usage=SUPPRESS)
    parser._optionals.title = 'Options'
    parser.add_argument('-v', '--version', action='version', version='taxtally '+ taxtally.VERSION)
    sub = parser.add_subparsers(
        title='Instructions', dest='cmd', metavar='cmd', help=SUPPRESS,
    )
    for op in ops:
        getattr(sys.modules[__name__], op).subparser(sub)
    parser._action_groups.reverse()
    return parser


def parse_args(arglist=None):
    return get_parser().parse_args(arglist)
