"Various utilities used by taxtally tests."
import sys
import os
import tempfile
import shutil
import collections
import traceback
from io import StringIO
from importlib.metadata import entry_points


def _load_console_script(scriptname):
    try:
        eps = entry_points(group='console_scripts')
    except TypeError:                     # python < 3.10
        eps = entry_points().get('console_scripts', [])
    for ep in eps:
        if ep.name == scriptname and ep.value.startswith('taxtally'):
            return ep.load()
    return None


def _runscript(scriptname):
    """Find & run a console script in this process."""
    main = _load_console_script(scriptname)
    if main is None and scriptname == 'taxtally':
        from taxtally.__main__ import main
    if main is None:
        return -1

    main()
    return 0


ScriptResults = collections.namedtuple('ScriptResults',
                                       ['status', 'out', 'err'])

def runscript(scriptname, args, **kwargs):
    """Run a console script in this process.

    Mimic proper shell functionality with argv, and capture stdout and
    stderr.

    When using :attr:`fail_ok`=False in tests, specify the expected error.
    """
    __tracebackhide__ = True
    sysargs = [scriptname]
    sysargs.extend(args)

    cwd = os.getcwd()
    in_directory = kwargs.get('in_directory', cwd)
    fail_ok = kwargs.get('fail_ok', False)

    try:
        status = -1
        oldargs = sys.argv
        sys.argv = sysargs

        oldin = None
        if 'stdin_data' in kwargs:
            oldin, sys.stdin = sys.stdin, StringIO(kwargs['stdin_data'])

        oldout, olderr = sys.stdout, sys.stderr
        sys.stdout = StringIO()
        sys.stdout.name = "StringIO"
        sys.stderr = StringIO()

        os.chdir(in_directory)

        try:
            print('running:', scriptname, 'in:', in_directory, file=oldout)
            print('arguments', sysargs, file=oldout)

            status = _runscript(scriptname)
        except SystemExit as err:
            status = err.code
            if status is None:
                status = 0
        except Exception:
            traceback.print_exc(file=sys.stderr)
            status = -1
    finally:
        sys.argv = oldargs
        out, err = sys.stdout.getvalue(), sys.stderr.getvalue()
        sys.stdout, sys.stderr = oldout, olderr

        if oldin:
            sys.stdin = oldin

        os.chdir(cwd)

    if status != 0 and not fail_ok:
        print(out)
        print(err)
        assert False, (status, out, err)

    return ScriptResults(status, out, err)


def get_test_data(filename):
    return os.path.join(os.path.dirname(__file__), 'test-data', filename)


class TempDirectory(object):
    def __init__(self):
        self.tempdir = tempfile.mkdtemp(prefix='taxtallytest_')

    def __enter__(self):
        return self.tempdir

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            shutil.rmtree(self.tempdir, ignore_errors=True)
        except OSError:
            pass

        if exc_type:
            return False


class TaxTallyCommandFailed(Exception):
    def __init__(self, msg):
        Exception.__init__(self, msg)
        self.message = msg


class RunnerContext(object):
    """
    I am a RunnerContext object from taxtally_tst_utils.

    I have methods 'run_taxtally' and 'run', which run console scripts.

    Take a look at my 'location', 'last_command' and 'last_result' attributes!

    You can use the 'output' method to build filenames in my temp directory.
    """
    def __init__(self, location):
        self.location = location
        self.last_command = None
        self.last_result = None

    def run_taxtally(self, *args, **kwargs):
        "Run the taxtally script with the given arguments."
        kwargs['fail_ok'] = True
        if 'in_directory' not in kwargs:
            kwargs['in_directory'] = self.location

        cmdlist = ['taxtally']
        cmdlist.extend(( str(x) for x in args))
        self.last_command = " ".join(cmdlist)
        self.last_result = runscript('taxtally', [ str(x) for x in args ], **kwargs)

        if self.last_result.status:
            raise TaxTallyCommandFailed(self.last_result.err)

        return self.last_result
    taxtally = run_taxtally

    def output(self, path):
        return os.path.join(self.location, path)

    def __str__(self):
        s = ""
        if self.last_command:
            s += "Last command run:\n{}\n".format(repr(self.last_command))
            if self.last_result:
                s += "\nLAST RESULT:\n"
                s += "- exit code: {}\n\n".format(self.last_result.status)
                if self.last_result.out:
                    s += "- stdout:\n---\n{}---\n".format(self.last_result.out)
                else:
                    s += '(no stdout)\n\n'
                if self.last_result.err:
                    s += "- stderr:\n---\n{}---\n".format(self.last_result.err)
                else:
                    s += '(no stderr)\n'

        return s
