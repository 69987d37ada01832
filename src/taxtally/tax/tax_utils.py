"""
Data model and output utilities for taxonomy aggregation.
"""
import csv
from collections import Counter
from dataclasses import dataclass
from typing import NamedTuple, Hashable

from taxtally.exceptions import TreeStructureError
from taxtally.logging import debug


__all__ = ['RankAssignment', 'AssignmentChain', 'TaxonNode', 'TaxonomyTree',
           'RankTally', 'write_hierarchy', 'read_hierarchy',
           'write_rank_tally', 'write_bad_sequences',
           'ROOT_TAXID', 'ROOT_NAME', 'ROOT_RANK', 'FIXRANKS']

ROOT_TAXID = 0
ROOT_NAME = 'Root'
ROOT_RANK = 'rootrank'

# the ranks every classifier hierarchy is guaranteed to carry
FIXRANKS = ('domain', 'phylum', 'class', 'order', 'family', 'genus')

UNCLASSIFIED_PREFIX = 'unclassified_'


class RankAssignment(NamedTuple):
    taxid: Hashable
    name: str
    rank: str
    confidence: float = 1.0


@dataclass(frozen=True)
class AssignmentChain:
    """
    The classifier's answer for one sequence: a tuple of RankAssignment
    objects ordered from the highest rank (usually the root) down to the
    lowest rank the classifier reports.

    'reversed' records whether the reverse complement was classified; it
    only matters when the chain is written back out.
    """
    seqname: str
    assignments: tuple
    reversed: bool = False

    def __post_init__(self):
        if isinstance(self.assignments, list):
            object.__setattr__(self, "assignments", tuple(self.assignments))
        if not self.assignments:
            raise ValueError(f"empty assignment chain for sequence '{self.seqname}'")
        for assign in self.assignments:
            if not isinstance(assign, RankAssignment):
                raise ValueError(f"{assign} is not a RankAssignment.")

    def __iter__(self):
        return iter(self.assignments)

    def __len__(self):
        return len(self.assignments)

    @property
    def lowest_rank(self):
        return self.assignments[-1].rank

    def assignment_at_rank(self, rank):
        "Return the assignment at 'rank', or None."
        for assign in self.assignments:
            if assign.rank.lower() == rank.lower():
                return assign
        return None

    def display_lineage(self, sep=';'):
        return sep.join(a.name for a in self.assignments)


class TaxonNode:
    """
    One taxon placement in a TaxonomyTree.

    A node is identified by (taxid, unclassified): the unclassified
    placement of a taxon is a different node from its confident placement.
    'lineage' is fixed when the node is built. Parent/child links are set
    by the owning tree only.
    """
    def __init__(self, taxid, name, rank, *, unclassified=False, lineage=''):
        self.taxid = taxid
        self.name = name
        self.rank = rank
        self.unclassified = bool(unclassified)
        self._lineage = lineage
        self._parent = None
        self._children = []
        self.counts = Counter()

    def __repr__(self):
        return f"TaxonNode({self.taxid!r}, {self.display_name!r}, {self.rank!r})"

    @property
    def id(self):
        return (self.taxid, self.unclassified)

    @property
    def lineage(self):
        return self._lineage

    @property
    def parent(self):
        return self._parent

    @property
    def children(self):
        return tuple(self._children)

    @property
    def display_name(self):
        if self.unclassified:
            return UNCLASSIFIED_PREFIX + self.name
        return self.name

    @property
    def total_count(self):
        return sum(self.counts.values())

    def get_count(self, sample_name):
        return self.counts.get(sample_name, 0)

    def inc_count(self, sample_name, count=1):
        if count < 0:
            raise ValueError(f"cannot decrement count of {self!r} by {count}")
        self.counts[sample_name] += count


class TaxonomyTree:
    """
    Owns every TaxonNode of one aggregation run and guarantees that at
    most one node exists per (taxid, unclassified) identity.
    """
    def __init__(self, root_taxid=ROOT_TAXID, root_name=ROOT_NAME,
                 root_rank=ROOT_RANK):
        self._root = TaxonNode(root_taxid, root_name, root_rank,
                               lineage=f'{root_name};{root_rank};')
        self._nodes = {self._root.id: self._root}

    @property
    def root(self):
        return self._root

    @property
    def root_id(self):
        return self._root.id

    def get(self, node_id):
        return self._nodes.get(node_id)

    def insert(self, node, parent_id):
        "Attach a newly built node under the existing node 'parent_id'."
        parent = self._nodes.get(parent_id)
        if parent is None:
            raise TreeStructureError(f"cannot add {node!r}: parent {parent_id!r} is not in the tree")
        if node.id in self._nodes:
            raise TreeStructureError(f"{node!r} is already in the tree")

        node._parent = parent
        parent._children.append(node)
        self._nodes[node.id] = node
        debug('added {} under {}', node, parent)
        return node

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, node_id):
        return node_id in self._nodes

    def __iter__(self):
        "Pre-order traversal, children in insertion order."
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def nodes_at_rank(self, rank):
        return [ node for node in self if node.rank == rank ]

    def sample_names(self):
        "All sample names with a count anywhere in the tree, first seen first."
        names = {}
        for node in self:
            for name in node.counts:
                names[name] = True
        return list(names)


class RankTally(Counter):
    "Number of distinct nodes created at each rank during a run."
    def add(self, rank):
        self[rank] += 1

    def ranks(self):
        return list(self.keys())


def write_hierarchy(tree, samples, out_fp, *, sep='\t'):
    """
    Write one row per non-root node: taxid, lineage, name, rank, and the
    count for each sample. 'samples' may be Sample objects or names.
    """
    sample_names = [ getattr(s, 'name', s) for s in samples ]

    w = csv.writer(out_fp, delimiter=sep)
    w.writerow(['taxid', 'lineage', 'name', 'rank'] + sample_names)
    for node in tree:
        if node is tree.root:
            continue
        row = [node.taxid, node.lineage, node.display_name, node.rank]
        row += [ node.get_count(name) for name in sample_names ]
        w.writerow(row)


def read_hierarchy(fp, *, sep='\t'):
    """
    Read rows written by 'write_hierarchy'. Yields (row_dict, counts) where
    'counts' maps sample name to integer count.
    """
    r = csv.DictReader(fp, delimiter=sep)
    if not r.fieldnames:
        raise ValueError("cannot read hierarchy: file is empty")
    required = ['taxid', 'lineage', 'name', 'rank']
    missing = [ x for x in required if x not in r.fieldnames ]
    if missing:
        raise ValueError(f"hierarchy file is missing columns: {', '.join(missing)}")
    sample_names = [ x for x in r.fieldnames if x not in required ]

    for row in r:
        counts = {}
        for name in sample_names:
            try:
                counts[name] = int(row[name])
            except (TypeError, ValueError) as exc:
                raise ValueError(f"bad count {row[name]!r} for sample '{name}' at taxon '{row['name']}'") from exc
        yield row, counts


def write_rank_tally(rank_tally, out_fp, *, sep=','):
    w = csv.writer(out_fp, delimiter=sep)
    w.writerow(['rank', 'count'])
    for rank in rank_tally.ranks():
        w.writerow([rank, rank_tally[rank]])


def write_bad_sequences(bad_sequences, out_fp):
    for seqname in bad_sequences:
        out_fp.write(f"{seqname}\n")
