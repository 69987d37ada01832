"Taxonomy tree aggregation."

from .tax_utils import (RankAssignment, AssignmentChain, TaxonNode,
                        TaxonomyTree, RankTally)
from .aggregate import AggregationEngine
