import sys

_quiet = False
_debug = False


def set_quiet(val, print_debug=False):
    global _quiet, _debug
    _quiet = bool(val)
    _debug = bool(print_debug)


def print_results(s, *args, **kwargs):
    if _quiet:
        return

    print(s.format(*args, **kwargs), file=sys.stdout)
    sys.stdout.flush()


def notify(s, *args, **kwargs):
    "A simple logging function => stderr."
    if _quiet:
        return

    print("\r\033[K", end="", file=sys.stderr)
    print(s.format(*args, **kwargs), file=sys.stderr, end=kwargs.get("end", "\n"))
    if kwargs.get("flush"):
        sys.stderr.flush()


def debug(s, *args, **kwargs):
    "A debug logging function => stderr."
    if _quiet or not _debug:
        return

    print("\r\033[K", end="", file=sys.stderr)
    print(s.format(*args, **kwargs), file=sys.stderr, end=kwargs.get("end", "\n"))
    if kwargs.get("flush"):
        sys.stderr.flush()


def error(s, *args, **kwargs):
    "A simple error logging function => stderr; ignores quiet."
    print("\r\033[K", end="", file=sys.stderr)
    print(s.format(*args, **kwargs), file=sys.stderr)
    if kwargs.get("flush"):
        sys.stderr.flush()
