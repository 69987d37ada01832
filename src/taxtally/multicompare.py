"""
Run aggregation over many samples.

MultiClassifier classifies every sequence of every sample (or reads back
pre-computed results), folds each assignment chain into one shared
TaxonomyTree, and returns the tree, the samples, the sequences that could
not be classified, and the number of taxa created at each rank.
"""
from dataclasses import dataclass

from .exceptions import ClassificationError
from .logging import notify, debug
from .classification import format_result
from .samples import get_seqname
from .tax.aggregate import AggregationEngine, check_confidence
from .tax.tax_utils import (TaxonomyTree, RankTally, ROOT_TAXID, ROOT_NAME,
                            ROOT_RANK)


__all__ = ['MultiClassifier', 'MultiClassifierResult', 'BadSequenceLog',
           'DEFAULT_CONF', 'DEFAULT_FORMAT']

DEFAULT_CONF = 0.8
DEFAULT_FORMAT = 'allrank'


class BadSequenceLog:
    "Names of the sequences the classifier could not process, in order."
    def __init__(self):
        self.seqnames = []

    def add(self, seqname, reason=None):
        self.seqnames.append(seqname)
        if reason is not None:
            debug('cannot classify {}: {}', seqname, reason)

    def __iter__(self):
        return iter(self.seqnames)

    def __len__(self):
        return len(self.seqnames)

    def __contains__(self, seqname):
        return seqname in self.seqnames


@dataclass
class MultiClassifierResult:
    tree: TaxonomyTree
    samples: list
    bad_sequences: list
    rank_tally: RankTally

    @property
    def root(self):
        return self.tree.root


def _check_sample_names(samples):
    seen = set()
    for sample in samples:
        if sample.name in seen:
            raise ValueError(f"sample name '{sample.name}' is used more than once")
        seen.add(sample.name)


class MultiClassifier:
    """
    Aggregates classification results from many samples into one tree.

    'classifier' is only needed for 'multi_compare'; it must provide
    'classify(record) -> AssignmentChain'. The root identity must match the
    root assignment the classifier reports, if it reports one.
    """
    def __init__(self, classifier=None, *, root_taxid=ROOT_TAXID,
                 root_name=ROOT_NAME, root_rank=ROOT_RANK):
        self.classifier = classifier
        self.root_taxid = root_taxid
        self.root_name = root_name
        self.root_rank = root_rank

    def _new_engine(self):
        tree = TaxonomyTree(self.root_taxid, self.root_name, self.root_rank)
        return AggregationEngine(tree, RankTally())

    def multi_compare(self, samples, confidence=DEFAULT_CONF, assign_out=None,
                      format=DEFAULT_FORMAT):
        """
        Classify the sequences of each sample and aggregate them.

        Sequences that raise ClassificationError are recorded in
        'bad_sequences' and skipped. If 'assign_out' is given, one
        formatted line per classified sequence is written to it.
        """
        if self.classifier is None:
            raise ValueError("multi_compare needs a classifier")
        check_confidence(confidence)
        _check_sample_names(samples)

        engine = self._new_engine()
        bad_sequences = BadSequenceLog()

        for sample in samples:
            n = 0
            n_bad = len(bad_sequences)
            record = sample.next_seq()
            while record is not None:
                n += 1
                if n % 10000 == 0:
                    notify('... {} {}', sample.name, n, end='\r')

                seqname = get_seqname(record.name)
                try:
                    chain = self.classifier.classify(record)
                except ClassificationError as exc:
                    bad_sequences.add(seqname, exc)
                else:
                    if assign_out is not None:
                        assign_out.write(format_result(chain, format, confidence))
                    engine.process(chain, sample, sample.get_dup_count(chain.seqname),
                                   confidence)
                    sample.add_rank_count(chain, confidence)

                record = sample.next_seq()

            notify('{}: classified {} of {} sequences.', sample.name,
                   n - (len(bad_sequences) - n_bad), n)

        return MultiClassifierResult(engine.tree, list(samples),
                                     list(bad_sequences), engine.rank_tally)

    def multi_classification_parser(self, samples, confidence=DEFAULT_CONF,
                                    assign_out=None, format=DEFAULT_FORMAT,
                                    print_rank=None, taxon_filter=None):
        """
        Aggregate classification results read back from each sample.

        A detail line is written to 'assign_out' only for chains with an
        assignment named in 'taxon_filter' (all chains, if None) whose
        assignment at 'print_rank' meets the threshold. 'print_rank'
        defaults to the lowest rank of each chain.
        """
        check_confidence(confidence)
        _check_sample_names(samples)
        if taxon_filter is not None:
            taxon_filter = set(taxon_filter)

        engine = self._new_engine()
        bad_sequences = BadSequenceLog()

        for sample in samples:
            n = 0
            try:
                chain = sample.next_result()
                while chain is not None:
                    n += 1
                    engine.process(chain, sample, sample.get_dup_count(chain.seqname),
                                   confidence)
                    sample.add_rank_count(chain, confidence)

                    if assign_out is not None and \
                      _should_print(chain, confidence, print_rank, taxon_filter):
                        assign_out.write(format_result(chain, format, confidence))

                    chain = sample.next_result()
            finally:
                sample.close()

            notify('{}: aggregated {} classification results.', sample.name, n)

        return MultiClassifierResult(engine.tree, list(samples),
                                     list(bad_sequences), engine.rank_tally)


def _should_print(chain, confidence, print_rank, taxon_filter):
    if taxon_filter is not None:
        if not any(assign.name in taxon_filter for assign in chain):
            return False

    rank = print_rank or chain.lowest_rank
    assign = chain.assignment_at_rank(rank)
    return assign is not None and assign.confidence >= confidence
