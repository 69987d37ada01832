"""
Classifier interface, and reading/writing of per-sequence classification
results.

Results are tab-separated lines as written by the classifier's 'allrank'
and 'fixrank' formats:

    seqname <TAB> [-] <TAB> name <TAB> rank <TAB> conf [<TAB> name <TAB> rank <TAB> conf ...]

where the second column is '-' if the reverse complement was classified.
"""
from typing import Protocol

from .exceptions import ResultParseError
from .tax.tax_utils import (AssignmentChain, RankAssignment, ROOT_TAXID,
                            ROOT_RANK, FIXRANKS, UNCLASSIFIED_PREFIX)


__all__ = ['Classifier', 'parse_classification_line', 'ClassificationParser',
           'format_result', 'FORMATS']


class Classifier(Protocol):
    """
    Anything that turns a sequence record into an AssignmentChain.

    'classify' raises taxtally.exceptions.ClassificationError (for example
    ShortSequenceError) if the sequence cannot be classified.
    """
    def classify(self, record) -> AssignmentChain:
        ...


def parse_classification_line(line, *, root_taxid=ROOT_TAXID, lineno=None):
    """
    Parse one result line into an AssignmentChain.

    Result files carry no taxon ids, so each assignment is identified by
    its path of 'name;rank' pairs from the first real rank down; the root
    assignment gets 'root_taxid' so it resolves to the tree root.
    """
    fields = line.rstrip('\r\n').split('\t')
    if len(fields) < 5:
        raise ResultParseError(f"too few columns in classification result: {line.strip()!r}", lineno=lineno)

    seqname = fields[0].strip()
    if not seqname:
        raise ResultParseError("missing sequence name", lineno=lineno)
    is_reversed = fields[1].strip() == '-'

    triples = fields[2:]
    # tolerate a trailing tab
    while triples and not triples[-1].strip():
        triples.pop()
    if len(triples) % 3 != 0:
        raise ResultParseError(f"assignments for '{seqname}' are not name/rank/confidence triples", lineno=lineno)

    assignments = []
    path = []
    for i in range(0, len(triples), 3):
        name, rank, conf = triples[i:i + 3]
        try:
            conf = float(conf)
        except ValueError:
            raise ResultParseError(f"bad confidence {conf!r} for '{name}' in '{seqname}'", lineno=lineno)
        if not 0 <= conf <= 1:
            raise ResultParseError(f"confidence {conf} for '{name}' in '{seqname}' is not between 0 and 1", lineno=lineno)

        if i == 0 and rank == ROOT_RANK:
            taxid = root_taxid
        else:
            path.append(f'{name};{rank}')
            taxid = ';'.join(path)
        assignments.append(RankAssignment(taxid, name, rank, conf))

    return AssignmentChain(seqname, assignments, reversed=is_reversed)


class ClassificationParser:
    """
    Iterate over AssignmentChains from an open result file, skipping blank
    lines.

    Usage:

       parser = ClassificationParser(fp)
       while (chain := parser.next()) is not None:
          ...
    """
    def __init__(self, fp, *, root_taxid=ROOT_TAXID):
        self.fp = fp
        self.root_taxid = root_taxid
        self.lineno = 0

    def __iter__(self):
        chain = self.next()
        while chain is not None:
            yield chain
            chain = self.next()

    def next(self):
        "Return the next chain, or None at end of file."
        for line in self.fp:
            self.lineno += 1
            if not line.strip():
                continue
            return parse_classification_line(line, root_taxid=self.root_taxid,
                                             lineno=self.lineno)
        return None

    def close(self):
        self.fp.close()


def _format_conf(conf):
    return str(round(conf, 2))


def _format_ranks(chain, keep):
    out = [chain.seqname, '-' if chain.reversed else '']
    for assign in chain:
        if keep(assign):
            out.extend([assign.name, assign.rank, _format_conf(assign.confidence)])
    return '\t'.join(out) + '\n'


def format_allrank(chain, confidence):
    return _format_ranks(chain, lambda a: True)


def format_fixrank(chain, confidence):
    return _format_ranks(chain, lambda a: a.rank.lower() in FIXRANKS)


def format_filterbyconf(chain, confidence):
    "One name per fixed rank; below threshold, 'unclassified_' the last confident name."
    out = [chain.seqname]
    last_name = None
    below = False
    for rank in FIXRANKS:
        assign = chain.assignment_at_rank(rank)
        if not below and assign is not None and assign.confidence >= confidence:
            last_name = assign.name
            out.append(assign.name)
            continue
        below = True
        out.append(UNCLASSIFIED_PREFIX + (last_name or 'Root'))
    return '\t'.join(out) + '\n'


FORMATS = {
    'allrank': format_allrank,
    'fixrank': format_fixrank,
    'filterbyconf': format_filterbyconf,
}


def format_result(chain, format='allrank', confidence=0.8):
    try:
        formatter = FORMATS[format]
    except KeyError:
        raise ValueError(f"unknown output format '{format}'; choose one of {', '.join(FORMATS)}")
    return formatter(chain, confidence)
