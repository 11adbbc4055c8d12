import os

import pysam

from svbreakend.discordant import discordant_pair_evidence, anchor_position_key
from svbreakend.merge import EvidenceReadError, WindowedSortingIterator
from svbreakend.reference import ReferenceDictionary
from svbreakend.splitreads import read_evidence


def open_alignment_file(filename):
    try:
        return pysam.AlignmentFile(filename)
    except (ValueError, OSError) as err:
        raise EvidenceReadError('could not open alignment file {0}: {1}'
                                .format(filename, err)) from err


def fetch_alignments(bam, operation):
    """Every record of bam in file order, with read failures naming the file."""
    try:
        yield from bam.fetch(until_eof=True)
    except (ValueError, OSError) as err:
        raise EvidenceReadError('error {0} from {1}: {2}'
                                .format(operation, os.fsdecode(bam.filename), err)) from err


def has_unmapped_records(bam, records_to_check=1000):
    """Whether a mate-sorted file carries unmapped reads of one-end-anchored pairs."""
    for i, aln in enumerate(fetch_alignments(bam, 'checking for unmapped reads')):
        if aln.is_unmapped and not aln.mate_is_unmapped:
            return True
        if i + 1 >= records_to_check:
            break
    return False


def own_position_alignments(bam):
    for aln in fetch_alignments(bam, 'reading soft clipped and split reads'):
        # unmapped records are sorted to the end of the file
        if aln.reference_id < 0:
            break
        yield aln


def own_position_evidence(bam, opts):
    """Soft clip and split read evidence from a coordinate-sorted file.

    A read's breakends never precede its alignment start, so the evidence
    is re-sorted by breakend position without any look-behind window.
    """
    def evidence():
        for aln in own_position_alignments(bam):
            yield from read_evidence(aln, opts)

    return WindowedSortingIterator(evidence(), 0, anchor_position_key,
                                   name='own-position evidence')


def mate_position_evidence(bam, opts, max_fragment_size):
    """Discordant pair evidence from a file sorted by mapped mate coordinate.

    A BWD pair breakend lies up to one fragment before its mate's start.
    """
    min_mapq = opts['min_mapq_reads']

    def evidence():
        for aln in fetch_alignments(bam, 'reading discordant pairs'):
            e = discordant_pair_evidence(aln, max_fragment_size, min_mapq)
            if e is not None:
                yield e

    return WindowedSortingIterator(evidence(), max_fragment_size, anchor_position_key,
                                   name='mate-position evidence')


def get_reference(opts, bam):
    if opts['reference_index'] is not None:
        return ReferenceDictionary.from_fai(opts['reference_index'])
    return ReferenceDictionary.from_alignment_file(bam)


def open_evidence_streams(opts, context, max_fragment_size):
    """Opens both input files, returning the two evidence streams and the files.

    The caller closes the returned files.
    """
    sv_bam = open_alignment_file(opts['sv_input'])
    try:
        mate_bam = open_alignment_file(opts['mate_input'])
    except EvidenceReadError:
        sv_bam.close()
        raise
    if mate_bam.references != sv_bam.references:
        context.warn('parse_bam', 'reference sequences of {0} and {1} differ'
                     .format(opts['sv_input'], opts['mate_input']))
    context.log('parse_bam', 'max fragment size: {0}'.format(max_fragment_size))
    if context.verbosity > 1:
        try:
            with open_alignment_file(opts['mate_input']) as check_bam:
                has_unmapped = has_unmapped_records(check_bam)
        except EvidenceReadError:
            sv_bam.close()
            mate_bam.close()
            raise
        if has_unmapped:
            context.log('parse_bam', 'mate file DOES contain unmapped records', 2)
        else:
            context.log('parse_bam', 'mate file DOES NOT contain unmapped records', 2)
    own = own_position_evidence(sv_bam, opts)
    mate = mate_position_evidence(mate_bam, opts, max_fragment_size)
    return own, mate, (sv_bam, mate_bam)
