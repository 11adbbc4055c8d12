from collections import namedtuple

import igraph

from svbreakend.constants import BWD, MAX_BASE_QUAL, SOFT_CLIP, SPLIT_READ, DISCORDANT_PAIR


# sequence and qualities are anchor-first (reversed for BWD loci)
ContigPath = namedtuple('ContigPath', ['sequence', 'qualities', 'anchor_length', 'weight'])


class AssembledContig:
    """Consensus sequence assembled across a breakend.

    sequence is in reference-strand order: the anchored bases come first for
    a FWD breakend and last for a BWD breakend.
    """

    def __init__(self, assembly_id, breakend, sequence, qualities, anchor_length, evidence,
                 weight=0):
        self.assembly_id = assembly_id
        self.breakend = breakend
        self.sequence = sequence
        self.qualities = tuple(qualities)
        self.anchor_length = anchor_length
        self.evidence = frozenset(evidence)
        self.weight = weight

    @classmethod
    def from_path(cls, assembly_id, breakend, path, evidence):
        seq, qual = path.sequence, path.qualities
        if breakend.direction == BWD:
            seq, qual = seq[::-1], qual[::-1]
        return cls(assembly_id, breakend, seq, qual, path.anchor_length, evidence,
                   path.weight)

    @property
    def evidence_id(self):
        return self.assembly_id

    @property
    def novel_length(self):
        return len(self.sequence) - self.anchor_length

    def breakend_sequence(self):
        if self.breakend.direction == BWD:
            return self.sequence[:self.novel_length]
        return self.sequence[self.anchor_length:]

    def breakend_qualities(self):
        if self.breakend.direction == BWD:
            return self.qualities[:self.novel_length]
        return self.qualities[self.anchor_length:]

    def support(self, kind):
        return sum(1 for e in self.evidence if e.kind == kind)

    def support_counts(self):
        return {kind: self.support(kind) for kind in (SOFT_CLIP, SPLIT_READ, DISCORDANT_PAIR)}

    def evidence_ids(self):
        return sorted(e.evidence_id for e in self.evidence)

    def __len__(self):
        return len(self.sequence)

    def __repr__(self):
        return '({0} {1} len={2} anchor={3} nevidence={4})'.format(
            self.assembly_id, self.breakend, len(self.sequence), self.anchor_length,
            len(self.evidence))


class ContigExtractor:
    """Finds the best supported anchored path through a locus k-mer graph."""

    def __init__(self, k, min_kmer_count=1, min_evidence=2, min_novel_bases=1):
        self.k = k
        self.min_kmer_count = min_kmer_count
        self.min_evidence = min_evidence
        self.min_novel_bases = min_novel_bases

    @classmethod
    def from_opts(cls, opts):
        return cls(opts['k'], opts['min_kmer_count'], opts['min_assembly_evidence'],
                   opts['min_contig_novel_bases'])

    def extract(self, graph):
        if graph.nevidence < self.min_evidence:
            return None
        filtered = graph.filtered(self.min_kmer_count)
        if len(filtered) == 0:
            return None
        kmers = list(filtered.nodes)
        counts = [filtered.nodes[kmer].count for kmer in kmers]
        anchored = [filtered.nodes[kmer].is_anchored for kmer in kmers]
        if not any(anchored):
            return None
        g = kmer_graph_to_igraph(filtered, kmers)

        path, weight, nlead = best_anchored_path(g, counts, anchored)
        if path is None:
            return None
        seq = kmers[path[0]] + ''.join(kmers[v][-1] for v in path[1:])
        anchor_length = nlead + self.k - 1
        if len(seq) - anchor_length < self.min_novel_bases:
            return None
        qual = [min(counts[path[0]], MAX_BASE_QUAL)] * (self.k - 1) + \
            [min(counts[v], MAX_BASE_QUAL) for v in path]
        return ContigPath(seq, tuple(qual), anchor_length, weight)


def kmer_graph_to_igraph(graph, kmers):
    idx = {kmer: i for i, kmer in enumerate(kmers)}
    edges = [(idx[a], idx[b]) for (a, b) in graph.edges()]
    g = igraph.Graph(n=len(kmers), edges=edges, directed=True)
    g.vs['kmer'] = kmers
    if not g.is_dag():
        counts = [graph.nodes[kmer].count for kmer in kmers]
        # break cycles at the least supported edges
        edge_weights = [min(counts[e.source], counts[e.target]) for e in g.es]
        g.delete_edges(g.feedback_arc_set(weights=edge_weights, method='eades'))
    return g


# best[v]: weight of the heaviest path ending at v that starts at an anchored
# k-mer; the path returned ends at a non-anchored k-mer
def best_anchored_path(g, counts, anchored):
    n = g.vcount()
    best = [None] * n
    parent = [None] * n
    pathlen = [0] * n
    nlead = [0] * n             # leading anchored k-mers on the best path
    for v in g.topological_sorting(mode='out'):
        pred = None
        for u in g.predecessors(v):
            if best[u] is None:
                continue
            if pred is None or best[u] > best[pred] or (best[u] == best[pred] and u < pred):
                pred = u
        if pred is not None:
            best[v] = best[pred] + counts[v]
            parent[v] = pred
            pathlen[v] = pathlen[pred] + 1
            if anchored[v] and nlead[pred] == pathlen[pred]:
                nlead[v] = nlead[pred] + 1
            else:
                nlead[v] = nlead[pred]
        elif anchored[v]:
            best[v] = counts[v]
            pathlen[v] = 1
            nlead[v] = 1

    end = None
    for v in range(n):
        if anchored[v] or best[v] is None:
            continue
        if end is None or best[v] > best[end]:
            end = v
    if end is None:
        return None, 0, 0

    path = [end]
    while parent[path[-1]] is not None:
        path.append(parent[path[-1]])
    path.reverse()
    return path, best[end], nlead[end]
