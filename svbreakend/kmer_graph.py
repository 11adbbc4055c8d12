from svbreakend.constants import UNAMBIGUOUS_BASES


class KmerNode:
    __slots__ = ('kmer', 'count', 'anchor_count', 'successors')

    def __init__(self, kmer):
        self.kmer = kmer
        self.count = 0
        self.anchor_count = 0
        self.successors = set()

    @property
    def is_anchored(self):
        return self.anchor_count > 0

    def __repr__(self):
        return '({0} n={1} anchor={2} out={3})'.format(self.kmer, self.count,
                                                       self.anchor_count, len(self.successors))


def kmers_with_offsets(seq, k):
    """Yields (offset, kmer) for each k-mer of seq made only of ACGT bases.

    Bases are upper-cased; k-mers spanning an ambiguous base are skipped.
    """
    seq = seq.upper()
    last_bad = -1
    for i, base in enumerate(seq):
        if base not in UNAMBIGUOUS_BASES:
            last_bad = i
            continue
        start = i - k + 1
        if start > last_bad and start >= 0:
            yield start, seq[start:i+1]


class KmerGraph:
    """De Bruijn graph of one locus, built from anchor-first sequences."""

    def __init__(self, k):
        self.k = k
        self.nodes = {}         # insertion ordered
        self.nevidence = 0

    def __len__(self):
        return len(self.nodes)

    def __contains__(self, kmer):
        return kmer.upper() in self.nodes

    def __getitem__(self, kmer):
        return self.nodes[kmer.upper()]

    def add_sequence(self, seq, anchor_length=0):
        # k-mers lying entirely in the first anchor_length bases are anchored
        prev_offset, prev_node = None, None
        nadded = 0
        for offset, kmer in kmers_with_offsets(seq, self.k):
            node = self.nodes.get(kmer)
            if node is None:
                node = KmerNode(kmer)
                self.nodes[kmer] = node
            node.count += 1
            if offset + self.k <= anchor_length:
                node.anchor_count += 1
            if prev_node is not None and prev_offset == offset - 1:
                prev_node.successors.add(kmer)
            prev_offset, prev_node = offset, node
            nadded += 1
        self.nevidence += 1
        return nadded

    def edges(self):
        for kmer, node in self.nodes.items():
            for succ in node.successors:
                yield kmer, succ

    def filtered(self, min_count):
        """Copy of the graph without k-mers seen fewer than min_count times."""
        g = KmerGraph(self.k)
        g.nevidence = self.nevidence
        for kmer, node in self.nodes.items():
            if node.count < min_count:
                continue
            copy = KmerNode(kmer)
            copy.count = node.count
            copy.anchor_count = node.anchor_count
            g.nodes[kmer] = copy
        for kmer, node in g.nodes.items():
            node.successors = set(s for s in self.nodes[kmer].successors if s in g.nodes)
        return g
