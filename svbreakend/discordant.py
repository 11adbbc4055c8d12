from svbreakend.breakend import BreakendSummary
from svbreakend.constants import FWD, BWD, DIRECTION_CHARS
from svbreakend.evidence import DiscordantPairEvidence
from svbreakend.helper import is_nucleotide_sequence, not_primary, reverse_complement
from svbreakend.splitreads import parse_cigar


def mate_reference_length(aln):
    if aln.has_tag('MC'):
        return sum(n for (op, n) in parse_cigar(aln.get_tag('MC'))
                   if op in ('M', 'D', 'N', '=', 'X'))
    # no mate cigar: assume the mate aligned over its full read length
    return len(aln.query_sequence)


def is_discordant(aln, max_fragment_size):
    if aln.is_unmapped:
        return True
    if aln.reference_id != aln.next_reference_id or aln.is_reverse == aln.mate_is_reverse:
        return True
    if abs(aln.template_length) > max_fragment_size:
        return True
    # FR: the forward read must not start after the reverse read
    if aln.is_reverse:
        return aln.reference_start < aln.next_reference_start
    return aln.next_reference_start < aln.reference_start


def anchored_mate_breakend(aln, max_fragment_size):
    """Breakend interval implied by the mapped mate of aln.

    A forward mate anchors a FWD breakend somewhere between its end and the
    furthest position the fragment can reach; a reverse mate anchors a BWD one.
    """
    mate_start = aln.next_reference_start + 1
    mate_end = aln.next_reference_start + mate_reference_length(aln)
    if not aln.mate_is_reverse:
        end = max(mate_end, mate_start + max_fragment_size - 1)
        return BreakendSummary(aln.next_reference_id, mate_end, end, FWD), mate_start, mate_end
    start = max(1, min(mate_start, mate_end - max_fragment_size + 1))
    return BreakendSummary(aln.next_reference_id, start, mate_start, BWD), mate_start, mate_end


def discordant_pair_evidence(aln, max_fragment_size, min_mapq=0):
    """Evidence for the breakend anchored by the mapped mate of aln.

    aln is the read whose bases are not anchored at the breakend (unmapped,
    or mapped inconsistently with an FR pair); its bases are returned on the
    reference strand of the anchoring mate's locus.
    """
    if not aln.is_paired or aln.mate_is_unmapped or not_primary(aln) or aln.is_duplicate:
        return None
    if aln.query_sequence is None or not is_discordant(aln, max_fragment_size):
        return None
    if not is_nucleotide_sequence(aln.query_sequence):
        return None
    mapq = aln.get_tag('MQ') if aln.has_tag('MQ') else 0
    if mapq < min_mapq:
        return None
    bs, mate_start, mate_end = anchored_mate_breakend(aln, max_fragment_size)

    # bases as sequenced
    seq = aln.query_sequence
    qual = list(aln.query_qualities) if aln.query_qualities is not None else None
    if aln.is_reverse:
        seq = reverse_complement(seq)
        qual = qual[::-1] if qual is not None else None
    # in an FR pair the mate of a forward anchor was sequenced from the reverse strand
    if bs.direction == FWD:
        seq = reverse_complement(seq)
        qual = qual[::-1] if qual is not None else None

    readnum = '1' if aln.is_read1 else '2'
    evidence_id = 'dp_{0}/{1}{2}'.format(aln.query_name, readnum,
                                         DIRECTION_CHARS[bs.direction])
    return DiscordantPairEvidence(evidence_id, bs, seq, qual, mapq=mapq,
                                  anchor_start=mate_start, anchor_end=mate_end)


# position of the anchoring alignment, the order evidence is read from a coordinate-sorted file
def anchor_position_key(evidence):
    return (evidence.breakend.reference_index, evidence.anchor_start)
