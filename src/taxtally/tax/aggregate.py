"""
Fold per-sequence assignment chains into a shared TaxonomyTree.
"""
from taxtally.logging import debug
from .tax_utils import TaxonomyTree, TaxonNode, RankTally, RankAssignment


__all__ = ['AggregationEngine', 'check_confidence']


def check_confidence(confidence):
    if not 0 <= confidence <= 1:
        raise ValueError(f"confidence threshold must be between 0 and 1, not {confidence}")
    return confidence


class AggregationEngine:
    """
    Walks assignment chains against a TaxonomyTree, creating nodes as
    needed and adding each sequence's duplicate count to every node on
    its accepted path.

    The walk descends while assignments meet the confidence threshold.
    At the first assignment below threshold the sequence is instead
    counted at an "unclassified" node for the last confident taxon,
    placed beside it (under the rank above), and the rest of the chain
    is ignored.

    The engine is not safe for concurrent use: find_or_create checks and
    then inserts.
    """
    def __init__(self, tree=None, rank_tally=None):
        if tree is None:
            tree = TaxonomyTree()
        if rank_tally is None:
            rank_tally = RankTally()
        self.tree = tree
        self.rank_tally = rank_tally

    def find_or_create(self, assignment, parent_id, unclassified, lineage_prefix):
        """
        Return the node for (assignment.taxid, unclassified), building it
        under 'parent_id' if it does not exist yet. Existing nodes are
        returned unchanged.
        """
        node = self.tree.get((assignment.taxid, bool(unclassified)))
        if node is not None:
            return node

        lineage = f'{lineage_prefix}{assignment.name};{assignment.rank};'
        node = TaxonNode(assignment.taxid, assignment.name, assignment.rank,
                         unclassified=unclassified, lineage=lineage)
        self.tree.insert(node, parent_id)
        self.rank_tally.add(node.rank)
        return node

    def _root_assignment(self):
        root = self.tree.root
        return RankAssignment(root.taxid, root.name, root.rank)

    def process(self, chain, sample, dup_count=1, confidence=0.8):
        """
        Fold one sequence's chain into the tree, adding 'dup_count' to the
        count of 'sample' at every node on its accepted path.

        'sample' is a Sample object or a sample name. Returns the node
        where the walk ended.
        """
        check_confidence(confidence)
        if dup_count < 1:
            raise ValueError(f"duplicate count must be positive, not {dup_count}")
        sample_name = getattr(sample, 'name', sample)

        last_confident = None
        two_ago_confident = None
        lineage = ''
        parent_lineage = ''              # lineage before last_confident
        visited = set()
        node = None

        for assignment in chain:
            if assignment.confidence < confidence:
                if last_confident is None:
                    # nothing placed at all: count under the root itself
                    demoted = self._root_assignment()
                    parent_id = self.tree.root_id
                    parent_lineage = ''
                else:
                    demoted = last_confident
                    if two_ago_confident is None:
                        parent_id = self.tree.root_id
                    else:
                        parent_id = (two_ago_confident.taxid, False)

                node = self.find_or_create(demoted, parent_id, True,
                                           parent_lineage)
                if node.id not in visited:
                    node.inc_count(sample_name, dup_count)
                    visited.add(node.id)
                debug('{}: unclassified below {} ({} < {})', chain.seqname,
                      demoted.name, assignment.confidence, confidence)
                break

            if last_confident is None:
                parent_id = self.tree.root_id
            else:
                parent_id = (last_confident.taxid, False)

            node = self.find_or_create(assignment, parent_id, False, lineage)
            if node.id not in visited:
                node.inc_count(sample_name, dup_count)
                visited.add(node.id)

            parent_lineage = lineage
            lineage += f'{assignment.name};{assignment.rank};'
            two_ago_confident = last_confident
            last_confident = assignment

        return node
