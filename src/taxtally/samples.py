"""
Samples: named sources of sequences or of pre-computed classification
results, with per-sequence duplicate counts.
"""
import os

import screed

from .logging import notify
from .classification import ClassificationParser
from .tax.tax_utils import ROOT_TAXID
from .taxtally_args import FileInputCSV, open_text_input


__all__ = ['Sample', 'SequenceSample', 'ResultSample', 'load_dup_counts',
           'get_seqname']


def get_seqname(name):
    "Sequence identifier: the record name up to the first whitespace."
    return name.split()[0] if name.strip() else name


def load_dup_counts(filename):
    """
    Load a CSV or TSV table with 'seqname' and 'count' columns into a
    dictionary {seqname: count}.
    """
    dup_counts = {}
    with FileInputCSV(filename) as r:
        header = r.fieldnames
        if not header:
            raise ValueError(f"cannot read duplicate counts from '{filename}'. Is file empty?")
        if 'seqname' not in header or 'count' not in header:
            raise ValueError(f"'{filename}' must contain the following columns: 'seqname', 'count'.")

        for row in r:
            seqname = row['seqname']
            try:
                count = int(row['count'])
            except (TypeError, ValueError):
                raise ValueError(f"bad duplicate count {row['count']!r} for '{seqname}' in '{filename}'")
            if count < 1:
                raise ValueError(f"duplicate count for '{seqname}' in '{filename}' must be positive")
            if seqname in dup_counts and dup_counts[seqname] != count:
                raise ValueError(f"conflicting duplicate counts for '{seqname}' in '{filename}'")
            dup_counts[seqname] = count

    notify(f"loaded {len(dup_counts)} duplicate counts from '{filename}'.")
    return dup_counts


class Sample:
    """
    Base class for samples.

    Subclasses provide 'next_seq()' (sequence records) and/or
    'next_result()' (AssignmentChains); both return None when exhausted.
    """
    def __init__(self, name, dup_counts=None):
        self.name = name
        self.dup_counts = dict(dup_counts or {})
        self.rank_counts = {}

    def __repr__(self):
        return f"{self.__class__.__name__}({self.name!r})"

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()
        return False

    def close(self):
        pass

    def next_seq(self):
        raise NotImplementedError(f"{self!r} does not provide sequences")

    def next_result(self):
        raise NotImplementedError(f"{self!r} does not provide classification results")

    def get_dup_count(self, seqname):
        return self.dup_counts.get(seqname, 1)

    def add_rank_count(self, chain, confidence):
        """
        Add this sequence's duplicate count at every rank it was confidently
        assigned to, stopping at the first rank below 'confidence'.
        """
        count = self.get_dup_count(chain.seqname)
        for assign in chain:
            if assign.confidence < confidence:
                break
            self.rank_counts[assign.rank] = self.rank_counts.get(assign.rank, 0) + count


class SequenceSample(Sample):
    "A FASTA/FASTQ file (optionally gzipped), read with screed."
    def __init__(self, filename, dup_counts=None, name=None):
        if name is None:
            name = os.path.basename(filename)
        Sample.__init__(self, name, dup_counts)
        self.filename = filename
        self._screed = None
        self._records = None
        self.n_seqs = 0

    def next_seq(self):
        if self._records is None:
            self._screed = screed.open(self.filename)
            self._records = iter(self._screed)

        record = next(self._records, None)
        if record is None:
            self.close()
            # stay exhausted
            self._records = iter(())
            return None

        self.n_seqs += 1
        return record

    def close(self):
        if self._screed is not None:
            self._screed.close()
            self._screed = None


class ResultSample(Sample):
    "A file of classification results previously written by a classifier."
    def __init__(self, filename, dup_counts=None, name=None, *,
                 root_taxid=ROOT_TAXID):
        if name is None:
            name = os.path.basename(filename)
        Sample.__init__(self, name, dup_counts)
        self.filename = filename
        self.root_taxid = root_taxid
        self._parser = None
        self._done = False

    def get_classification_parser(self):
        if self._parser is None:
            fp = open_text_input(self.filename)
            self._parser = ClassificationParser(fp, root_taxid=self.root_taxid)
        return self._parser

    def next_result(self):
        if self._done:
            return None
        chain = self.get_classification_parser().next()
        if chain is None:
            self._done = True
            self.close()
        return chain

    def close(self):
        if self._parser is not None:
            self._parser.close()
            self._parser = None
