from math import floor

from svbreakend.constants import PHRED_OFFSET


# preliminary checks on reads
def not_primary(aln):
    return aln.is_supplementary or aln.is_secondary


def aligned_percent_identity(aln):
    nmapped = aln.query_alignment_end - aln.query_alignment_start
    if nmapped <= 0:
        return 0.0
    if not aln.has_tag('NM'):
        return 100.0
    return 100.0 * max(0, nmapped - aln.get_tag('NM')) / nmapped


COMP_DICT = {'A': 'T', 'T': 'A', 'C': 'G', 'G': 'C', 'N': 'N',
             'R': 'Y', 'Y': 'R', 'W': 'W', 'S': 'S', 'M': 'K',
             'K': 'M', 'B': 'V', 'V': 'B', 'D': 'H', 'H': 'D',
             'a': 't', 't': 'a', 'c': 'g', 'g': 'c', 'n': 'n',
             'r': 'y', 'y': 'r', 'w': 'w', 's': 's', 'm': 'k',
             'k': 'm', 'b': 'v', 'v': 'b', 'd': 'h', 'h': 'd'}


# IUPAC bases only; '=' and '.' have no complement
def is_nucleotide_sequence(seq):
    return all(base in COMP_DICT for base in seq)


def reverse_complement(seq):
    return ''.join(COMP_DICT[seq[i]] for i in range(len(seq) - 1, -1, -1))


def quality_list_to_str(qual):
    return ''.join([chr(PHRED_OFFSET + q) for q in qual])


def time_to_str(seconds):
    elapsed_hrs = floor(seconds / 3600)
    elapsed_mins = floor((seconds % 3600) / 60)
    elapsed_sec = floor((seconds % 60))
    return '{0} hours {1} minutes {2} seconds'.format(elapsed_hrs,
                                                      elapsed_mins,
                                                      elapsed_sec)
