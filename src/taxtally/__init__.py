"""
Aggregate per-sequence taxonomic classifications from many samples into
one taxonomy tree with per-sample counts.
"""
from importlib.metadata import version, PackageNotFoundError

try:
    VERSION = version(__name__)
except PackageNotFoundError:            # running from a source checkout
    VERSION = '0.0.0'

from .tax import (RankAssignment, AssignmentChain, TaxonNode, TaxonomyTree,
                  RankTally, AggregationEngine)
from .multicompare import MultiClassifier, MultiClassifierResult
from .samples import SequenceSample, ResultSample, load_dup_counts

from . import cli
