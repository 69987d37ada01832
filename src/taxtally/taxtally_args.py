"""
Utility functions for taxtally CLI commands.

File handling:

* load_pathlist_from_file(filename) -- load a list of paths from a file
* open_text_input(filename) -- open a text file, gzipped or not
* class FileOutput - file output context manager that deals w/stdout well
* class FileOutputCSV - file output context manager for CSV/TSV files
* FileInputCSV - context manager that reads gzipped or plain CSV/TSV
"""
import sys
import os
import csv
import gzip
import contextlib


def load_pathlist_from_file(filename):
    "Load a list-of-files text file, keeping order and dropping duplicates."
    try:
        with open(filename, 'rt') as fp:
            file_list = [ x.rstrip('\r\n') for x in fp ]
        file_list = [ x for x in dict.fromkeys(file_list) if x ]
        if not file_list:
            raise ValueError("pathlist is empty")
        for checkfile in file_list:
            if not os.path.exists(checkfile):
                raise ValueError(f"file '{checkfile}' inside the pathlist does not exist")
    except FileNotFoundError:
        raise ValueError(f"pathlist file '{filename}' does not exist")
    except OSError:
        raise ValueError(f"cannot open file '{filename}'")
    except UnicodeDecodeError:
        raise ValueError(f"cannot parse file '{filename}' as list of filenames")
    return file_list


def open_text_input(filename, *, encoding='utf-8'):
    "Open 'filename' for reading text, transparently handling gzip."
    fp = gzip.open(filename, 'rt', newline='', encoding=encoding)
    try:
        fp.buffer.peek(1)          # force exception if not a gzip file
        return fp
    except gzip.BadGzipFile:
        fp.close()
    return open(filename, 'rt', newline='', encoding=encoding)


class FileOutput:
    """A context manager for file outputs that handles sys.stdout gracefully.

    Usage:

       with FileOutput(filename, mode) as fp:
          ...

    does what you'd expect, but it handles the situation where 'filename'
    is '-' or None, so it can be handed argparse values directly.
    """
    def __init__(self, filename, mode='wt', *, newline=None, encoding='utf-8'):
        self.filename = filename
        self.mode = mode
        self.fp = None
        self.newline = newline
        self.encoding = encoding

    def open(self):
        if self.filename == '-' or self.filename is None:
            return sys.stdout
        self.fp = open(self.filename, self.mode, newline=self.newline,
                       encoding=self.encoding)
        return self.fp

    def close(self):
        if self.fp is not None: # in case of stdout
            self.fp.close()

    def __enter__(self):
        return self.open()

    def __exit__(self, type, value, traceback):
        if self.fp:
            self.fp.close()

        return False


class FileOutputCSV(FileOutput):
    """A context manager for CSV file outputs; '.gz' names are gzipped.

    Usage:

       with FileOutputCSV(filename) as fp:
          w = csv.writer(fp)
          ...
    """
    def __init__(self, filename):
        self.filename = filename
        self.fp = None

    def open(self):
        if self.filename == '-' or self.filename is None:
            return sys.stdout
        if self.filename.endswith('.gz'):
            self.fp = gzip.open(self.filename, 'wt', newline='')
        else:
            self.fp = open(self.filename, 'w', newline='')
        return self.fp


@contextlib.contextmanager
def FileInputCSV(filename, *, encoding='utf-8', delimiter=None):
    """A context manager for reading CSV or TSV files, gzipped or not.

    Yields a csv.DictReader. If 'delimiter' is None, tab is used when the
    header line contains a tab, else comma.

    Note: does not support stdin.
    """
    fp = open_text_input(filename, encoding=encoding)
    try:
        if delimiter is None:
            header = fp.readline()
            delimiter = '\t' if '\t' in header else ','
            fp.seek(0)
        yield csv.DictReader(fp, delimiter=delimiter)
    finally:
        fp.close()
