import numpy as np

from svbreakend.constants import FWD, BWD, SOFT_CLIP, SPLIT_READ, DISCORDANT_PAIR, \
    EVIDENCE_KINDS


class DirectedEvidence:
    """Read-derived signal for a breakend at a specific position and direction.

    seq and qual are given on the reference strand of the breakend locus.
    anchor_length counts the reference-anchored bases of seq, which sit at the
    start of seq for a FWD breakend and at the end of it for a BWD breakend.
    Subclasses set kind to one of EVIDENCE_KINDS.
    """
    kind = None

    def __init__(self, evidence_id, breakend, seq, qual=None, anchor_length=0,
                 mapq=0, percent_identity=100.0, anchor_start=None, anchor_end=None):
        if self.kind not in EVIDENCE_KINDS:
            raise TypeError('{0} is not a concrete evidence type'.format(type(self).__name__))
        if qual is not None and len(qual) != len(seq):
            raise ValueError('[{0}] sequence and quality lengths differ'.format(evidence_id))
        if not 0 <= anchor_length <= len(seq):
            raise ValueError('[{0}] anchor length {1} outside sequence of length {2}'
                             .format(evidence_id, anchor_length, len(seq)))
        self.evidence_id = evidence_id
        self.breakend = breakend
        self.seq = seq
        self.qual = tuple(qual) if qual is not None else None
        self.anchor_length = anchor_length
        self.mapq = mapq
        self.percent_identity = percent_identity
        # 1-based reference interval of the anchoring alignment
        self.anchor_start = anchor_start
        self.anchor_end = anchor_end

    @property
    def clip_length(self):
        return len(self.seq) - self.anchor_length

    @property
    def is_anchored(self):
        return self.anchor_length > 0

    def breakend_sequence(self):
        if self.breakend.direction == FWD:
            return self.seq[self.anchor_length:]
        else:
            return self.seq[:self.clip_length]

    def breakend_qualities(self):
        if self.qual is None:
            return None
        if self.breakend.direction == FWD:
            return self.qual[self.anchor_length:]
        else:
            return self.qual[:self.clip_length]

    @property
    def avg_clip_quality(self):
        clip_qual = self.breakend_qualities()
        if not clip_qual:
            return 0.0
        return float(np.mean(clip_qual))

    def assembly_sequence(self):
        # anchored bases first; BWD loci are assembled on reversed sequences
        if self.breakend.direction == BWD:
            return self.seq[::-1]
        return self.seq

    def __repr__(self):
        return '{0}({1}, {2}, anchor={3}, clip={4}, mapq={5})'.format(
            type(self).__name__, self.evidence_id, self.breakend,
            self.anchor_length, self.clip_length, self.mapq)

    def __hash__(self):
        return hash((self.kind, self.evidence_id))

    def __eq__(self, other):
        return isinstance(other, DirectedEvidence) and \
            (self.kind, self.evidence_id) == (other.kind, other.evidence_id)


class SoftClipEvidence(DirectedEvidence):
    kind = SOFT_CLIP


class SplitReadEvidence(DirectedEvidence):
    kind = SPLIT_READ

    def __init__(self, evidence_id, breakend, seq, qual=None, anchor_length=0,
                 mapq=0, percent_identity=100.0, anchor_start=None, anchor_end=None,
                 remote_chrom=None, remote_pos=None, remote_is_reverse=False,
                 remote_mapq=0):
        super(SplitReadEvidence, self).__init__(evidence_id, breakend, seq, qual,
                                                anchor_length, mapq, percent_identity,
                                                anchor_start, anchor_end)
        self.remote_chrom = remote_chrom
        self.remote_pos = remote_pos
        self.remote_is_reverse = remote_is_reverse
        self.remote_mapq = remote_mapq


class DiscordantPairEvidence(DirectedEvidence):
    """One-end-anchored or discordant read pair.

    seq holds the bases of the read that is not anchored at the breakend, so
    none of them are reference-anchored at the locus. The anchoring mate is
    described by anchor_start and anchor_end.
    """
    kind = DISCORDANT_PAIR

    def __init__(self, evidence_id, breakend, seq, qual=None, mapq=0,
                 percent_identity=100.0, anchor_start=None, anchor_end=None):
        super(DiscordantPairEvidence, self).__init__(evidence_id, breakend, seq, qual,
                                                     0, mapq, percent_identity,
                                                     anchor_start, anchor_end)

    @property
    def clip_length(self):
        return 0

    def breakend_sequence(self):
        return ''

    def breakend_qualities(self):
        return ()
