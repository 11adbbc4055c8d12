from svbreakend.breakend import BreakendSummary
from svbreakend.constants import FWD, BWD, DIRECTION_CHARS
from svbreakend.evidence import SoftClipEvidence
from svbreakend.helper import not_primary, aligned_percent_identity


def usable_alignment(aln, min_mapq):
    return not (aln.is_unmapped or not_primary(aln) or aln.is_duplicate or
                aln.mapping_quality < min_mapq or aln.query_sequence is None)


def read_evidence_id(aln, direction, kind):
    readnum = '1' if aln.is_read1 else '2'
    return '{0}_{1}/{2}{3}'.format(kind, aln.query_name, readnum, DIRECTION_CHARS[direction])


# number of soft clipped bases at each end, indexed by breakend direction
def clip_lengths(aln):
    nclip = [0, 0]
    nclip[BWD] = aln.query_alignment_start
    nclip[FWD] = len(aln.query_sequence) - aln.query_alignment_end
    return nclip


# breakend, bases, qualities and anchor length of one clipped end;
# clipped bases at the opposite end are not part of this breakend
def clipped_end(aln, direction):
    seq = aln.query_sequence
    qual = aln.query_qualities
    nmapped = aln.query_alignment_end - aln.query_alignment_start
    if direction == FWD:
        # pysam reference_end is 0-based exclusive, i.e. the 1-based last aligned base
        bs = BreakendSummary(aln.reference_id, aln.reference_end, aln.reference_end, FWD)
        seq = seq[aln.query_alignment_start:]
        qual = qual[aln.query_alignment_start:] if qual is not None else None
    else:
        pos = aln.reference_start + 1
        bs = BreakendSummary(aln.reference_id, pos, pos, BWD)
        seq = seq[:aln.query_alignment_end]
        qual = qual[:aln.query_alignment_end] if qual is not None else None
    return bs, seq, (list(qual) if qual is not None else None), nmapped


def softclip_evidence(aln, min_mapq=0, min_clipped_bases=1, exclude=()):
    """Soft clip evidence for each sufficiently clipped end of aln.

    Directions in exclude are skipped (e.g. ends already explained by a split).
    """
    if not usable_alignment(aln, min_mapq):
        return []
    nclip = clip_lengths(aln)
    if nclip == [0, 0]:
        return []
    pid = aligned_percent_identity(aln)
    result = []
    for direction in (BWD, FWD):
        if direction in exclude or nclip[direction] < max(1, min_clipped_bases):
            continue
        bs, seq, qual, nmapped = clipped_end(aln, direction)
        result.append(SoftClipEvidence(read_evidence_id(aln, direction, 'sc'), bs, seq, qual,
                                       anchor_length=nmapped, mapq=aln.mapping_quality,
                                       percent_identity=pid,
                                       anchor_start=aln.reference_start + 1,
                                       anchor_end=aln.reference_end))
    return result
