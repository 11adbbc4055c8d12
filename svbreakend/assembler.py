from collections import Counter

from svbreakend.breakend import BreakendSummary
from svbreakend.constants import ASSEMBLY_ID_PREFIX, DIRECTION_CHARS
from svbreakend.contig import AssembledContig, ContigExtractor
from svbreakend.kmer_graph import KmerGraph


class AssemblerStateError(Exception):
    pass


class Locus:
    """Open assembly window for one breakend position and direction."""

    def __init__(self, reference_index, direction, position, k, merge_distance=0):
        self.reference_index = reference_index
        self.direction = direction
        self.position = position
        # furthest start of exact evidence that may still join this locus
        self.reach = position + merge_distance
        self.graph = KmerGraph(k)
        self.evidence = []
        self.anchor_positions = Counter()

    @property
    def key(self):
        return (self.reference_index, self.position, self.direction)

    def covers(self, breakend):
        return breakend.overlaps(self.reference_index, self.position, self.reach,
                                 self.direction)

    def add(self, evidence):
        self.graph.add_sequence(evidence.assembly_sequence(), evidence.anchor_length)
        self.evidence.append(evidence)
        if evidence.is_anchored:
            self.anchor_positions[evidence.breakend.start] += 1

    # most common anchored breakend position; ties go to the lowest
    def consensus_position(self):
        if len(self.anchor_positions) == 0:
            return self.position
        most = max(self.anchor_positions.values())
        return min(pos for (pos, n) in self.anchor_positions.items() if n == most)

    def __repr__(self):
        return '(locus {0}:{1}{2} nevidence={3} nkmers={4})'.format(
            self.reference_index, self.position, DIRECTION_CHARS[self.direction],
            len(self.evidence), len(self.graph))


class LocalAssembler:
    """Incremental per-locus de Bruijn assembly over position-ordered evidence.

    add_evidence must be called once per evidence item in merged order. A
    locus is assembled once the stream has moved past its reach, so the
    contigs returned while processing position P belong to earlier positions.
    end_of_evidence flushes whatever is still open and must be called once,
    after the last item.
    """

    def __init__(self, context, extractor=None):
        self.context = context
        opts = context.opts
        self.k = opts['k']
        self.merge_distance = opts['max_breakend_merge_distance']
        self.max_open_evidence = opts['max_open_evidence']
        self.extractor = extractor or ContigExtractor.from_opts(opts)
        self.loci = []          # sorted by Locus.key
        self.pending = []       # range evidence not yet claimed by a locus
        self.held = []          # contigs waiting for earlier loci to close
        self.finished = False
        self.nassembled = 0
        self._last_key = None
        self._over_limit = False

    @property
    def nopen(self):
        return len(self.loci) + len(self.pending)

    def add_evidence(self, evidence):
        if self.finished:
            raise AssemblerStateError('add_evidence called after end_of_evidence')
        key = evidence.breakend.sort_key
        if self._last_key is not None and key < self._last_key:
            raise AssemblerStateError('evidence {0} out of order (previous at {1})'
                                      .format(evidence, self._last_key))
        self._last_key = key
        reference_index, start = key

        closed = [locus for locus in self.loci
                  if locus.reference_index < reference_index or locus.reach < start]
        if len(closed) > 0:
            self.loci = [locus for locus in self.loci
                         if not (locus.reference_index < reference_index or
                                 locus.reach < start)]
        self._discard_pending(reference_index, start)
        if evidence.breakend.is_exact:
            self._add_exact(evidence)
        else:
            self._add_range(evidence)
        self._check_open()
        contigs = [self._close(locus) for locus in closed]
        # an open locus reports no position before its own start
        bound = min([locus.key[:2] for locus in self.loci] + [key])
        return self._release(contigs, bound)

    def end_of_evidence(self):
        if self.finished:
            raise AssemblerStateError('end_of_evidence called twice')
        self.finished = True
        self.context.stats.pending_discarded += len(self.pending)
        self.pending = []
        closed, self.loci = self.loci, []
        return self._release([self._close(locus) for locus in closed])

    def _add_exact(self, evidence):
        for locus in self.loci:
            if locus.covers(evidence.breakend):
                locus.add(evidence)
                return locus
        bs = evidence.breakend
        locus = Locus(bs.reference_index, bs.direction, bs.start, self.k, self.merge_distance)
        locus.add(evidence)
        claimed = [e for e in self.pending if locus.covers(e.breakend)]
        if len(claimed) > 0:
            for e in claimed:
                locus.add(e)
            self.pending = [e for e in self.pending if not locus.covers(e.breakend)]
        self.loci.append(locus)
        self.loci.sort(key=lambda l: l.key)
        self.context.log('assembler', 'opened {0}'.format(locus), level=3)
        return locus

    def _add_range(self, evidence):
        for locus in self.loci:
            if locus.covers(evidence.breakend):
                locus.add(evidence)
                return locus
        self.pending.append(evidence)
        return None

    # range evidence that ended before the cursor can no longer meet a locus
    def _discard_pending(self, reference_index, start):
        if len(self.pending) == 0:
            return
        keep = [e for e in self.pending
                if e.breakend.reference_index == reference_index and e.breakend.end >= start]
        self.context.stats.pending_discarded += len(self.pending) - len(keep)
        self.pending = keep

    def _check_open(self):
        nopen = self.nopen
        if nopen > self.max_open_evidence and not self._over_limit:
            self._over_limit = True
            self.context.warn('assembler', '{0} open loci and pending evidence exceeds '
                              'max_open_evidence={1}; check max_fragment_size'
                              .format(nopen, self.max_open_evidence))
        elif nopen <= self.max_open_evidence:
            self._over_limit = False

    # consensus positions can exceed a later locus start, so contigs are held
    # until every locus that could report an earlier position has closed
    def _release(self, contigs, bound=None):
        failed = [c for c in contigs if c is None]
        self.held.extend(c for c in contigs if c is not None)
        if bound is None:
            ready, self.held = self.held, []
        else:
            ready = [c for c in self.held if c.breakend.sort_key <= bound]
            self.held = [c for c in self.held if c.breakend.sort_key > bound]
        ready.sort(key=lambda c: (c.breakend.sort_key, c.breakend.direction))
        return ready + failed

    def _close(self, locus):
        path = self.extractor.extract(locus.graph)
        contig = None
        if path is not None:
            self.nassembled += 1
            pos = locus.consensus_position()
            breakend = BreakendSummary(locus.reference_index, pos, pos, locus.direction)
            assembly_id = '{0}{1}_{2}_{3}{4}'.format(
                ASSEMBLY_ID_PREFIX, self.nassembled,
                self.context.reference_name(locus.reference_index), pos,
                DIRECTION_CHARS[locus.direction])
            contig = AssembledContig.from_path(assembly_id, breakend, path, locus.evidence)
        self.context.stats.record_locus(len(locus.evidence), contig)
        self.context.log('assembler', 'closed {0} -> {1}'.format(locus, contig), level=3)
        return contig
