import re

from svbreakend.constants import FWD, BWD
from svbreakend.evidence import SplitReadEvidence
from svbreakend.helper import aligned_percent_identity
from svbreakend.softclip import usable_alignment, clip_lengths, clipped_end, \
    read_evidence_id, softclip_evidence


class SupplementaryAlignment:
    def __init__(self, rname, pos, is_reverse, cigarstring, mapq):
        self.rname = rname
        self.pos = pos              # 1-based
        self.is_reverse = is_reverse
        self.cigarstring = cigarstring
        self.mapq = mapq

    def __repr__(self):
        return '({0}:{1}{2} {3} mapq={4})'.format(self.rname, self.pos,
                                                  '-' if self.is_reverse else '+',
                                                  self.cigarstring, self.mapq)


def parse_sa_tag(sa):
    supps = []
    for entry in sa.strip(';').split(';'):
        if entry == '':
            continue
        SA_split = entry.split(',')
        supps.append(SupplementaryAlignment(SA_split[0], int(SA_split[1]),
                                            SA_split[2] == '-', SA_split[3],
                                            int(SA_split[4])))
    return supps


def valid_split(aln, min_mapq, max_splits=1):
    if (not aln.has_tag('SA')) or aln.mapping_quality < min_mapq:
        return False
    supps = parse_sa_tag(aln.get_tag('SA'))
    if len(supps) == 0 or len(supps) > max_splits:
        return False
    if supps[0].mapq < min_mapq:
        return False
    return True


def parse_cigar(cigarstring):
    ops = re.split('[0-9]+', cigarstring)[1:]
    oplens = re.split('[MIDNSHP=X]', cigarstring)[:-1]
    return list(zip(ops, [int(n) for n in oplens]))


# query interval [start, end) covered by an SA entry, in the coordinates of
# the primary alignment's stored orientation
def supplementary_query_interval(supp, aln_is_reverse, read_len):
    start = 0
    qlen = 0
    seen_aligned = False
    for op, n in parse_cigar(supp.cigarstring):
        if op in ('S', 'H'):
            if not seen_aligned:
                start += n
        elif op in ('M', 'I', '=', 'X'):
            qlen += n
            seen_aligned = True
        elif op not in ('D', 'N', 'P'):
            raise ValueError('Unrecognized CIGAR operation {0} in SA tag'.format(op))
    end = start + qlen
    if supp.is_reverse != aln_is_reverse:
        start, end = read_len - end, read_len - start
    return start, end


def split_direction(aln, supp, min_clipped_bases=1):
    """Which clipped end of aln the supplementary alignment accounts for."""
    nclip = clip_lengths(aln)
    start, end = supplementary_query_interval(supp, aln.is_reverse, len(aln.query_sequence))
    if start < aln.query_alignment_start and nclip[BWD] >= min_clipped_bases:
        return BWD
    if end > aln.query_alignment_end and nclip[FWD] >= min_clipped_bases:
        return FWD
    return None


def split_read_evidence(aln, min_mapq=0, min_clipped_bases=1, max_splits=1):
    if not usable_alignment(aln, min_mapq) or not valid_split(aln, min_mapq, max_splits):
        return None
    supp = parse_sa_tag(aln.get_tag('SA'))[0]
    direction = split_direction(aln, supp, max(1, min_clipped_bases))
    if direction is None:
        return None
    bs, seq, qual, nmapped = clipped_end(aln, direction)
    return SplitReadEvidence(read_evidence_id(aln, direction, 'sr'), bs, seq, qual,
                             anchor_length=nmapped, mapq=aln.mapping_quality,
                             percent_identity=aligned_percent_identity(aln),
                             anchor_start=aln.reference_start + 1,
                             anchor_end=aln.reference_end,
                             remote_chrom=supp.rname, remote_pos=supp.pos,
                             remote_is_reverse=supp.is_reverse, remote_mapq=supp.mapq)


def read_evidence(aln, opts):
    """All intra-read evidence of one alignment: a split read plus soft clips."""
    min_mapq = opts['min_mapq_reads']
    min_clipped = opts['min_clipped_bases']
    split = split_read_evidence(aln, min_mapq, min_clipped, opts['max_splits'])
    if split is None:
        return softclip_evidence(aln, min_mapq, min_clipped)
    clips = softclip_evidence(aln, min_mapq, min_clipped, exclude=(split.breakend.direction,))
    return sorted([split] + clips, key=lambda e: e.breakend.sort_key)
