from svbreakend.constants import SOFT_CLIP, SPLIT_READ, DISCORDANT_PAIR, PLACEHOLDER_CONTIG
from svbreakend.helper import quality_list_to_str
from svbreakend.vcf import get_vcf_header, breakpoint_record_to_vcf


class OutputError(Exception):
    pass


# which raw evidence kinds are written out for realignment
# split reads already carry their realignment (SA tag); pairs have no breakend sequence
REALIGN_RAW_EVIDENCE = {SOFT_CLIP: True,
                        SPLIT_READ: False,
                        DISCORDANT_PAIR: False}


class BreakpointRecord:
    """Single breakend record, paired with a placeholder contig until realignment."""

    def __init__(self, record_id, reference_index, position, direction, evidence_ids,
                 breakend_sequence, anchor_length, assembly_length, support,
                 mate_contig=PLACEHOLDER_CONTIG, ref_base='N'):
        self.record_id = record_id
        self.reference_index = reference_index
        self.position = position
        self.direction = direction
        self.evidence_ids = evidence_ids
        self.breakend_sequence = breakend_sequence
        self.anchor_length = anchor_length
        self.assembly_length = assembly_length
        self.support = support
        self.mate_contig = mate_contig
        self.ref_base = ref_base

    @classmethod
    def from_contig(cls, contig):
        bs = contig.breakend
        return cls(contig.assembly_id, bs.reference_index, bs.start, bs.direction,
                   contig.evidence_ids(), contig.breakend_sequence(),
                   contig.anchor_length, len(contig), contig.support_counts())

    def __repr__(self):
        return '({0} {1}:{2} dir={3} mate={4} evidence={5})'.format(
            self.record_id, self.reference_index, self.position, self.direction,
            self.mate_contig, self.evidence_ids)


class OutputAdapter:
    def __init__(self, context, sequence_writer, breakpoint_writer):
        self.context = context
        opts = context.opts
        self.min_mapq = opts['min_mapq']
        self.min_breakend_length = opts['min_breakend_realign_length']
        self.min_percent_identity = opts['min_percent_identity']
        self.min_clip_quality = opts['min_long_sc_base_quality']
        self.sequence_writer = sequence_writer
        self.breakpoint_writer = breakpoint_writer

    def is_realignment_candidate(self, evidence):
        try:
            return REALIGN_RAW_EVIDENCE[evidence.kind]
        except KeyError:
            raise ValueError('unknown evidence kind {0} for {1}'
                             .format(evidence.kind, evidence.evidence_id))

    def passes_evidence_filters(self, evidence):
        return self.is_realignment_candidate(evidence) and \
            evidence.mapq >= self.min_mapq and \
            evidence.clip_length >= self.min_breakend_length and \
            evidence.percent_identity >= self.min_percent_identity and \
            evidence.avg_clip_quality >= self.min_clip_quality

    def passes_contig_filters(self, contig):
        return contig is not None and \
            len(contig.breakend_sequence()) >= self.min_breakend_length

    def filter_evidence(self, evidence_list):
        return [e for e in evidence_list if self.passes_evidence_filters(e)]

    def filter_contigs(self, contigs):
        return [c for c in contigs if self.passes_contig_filters(c)]

    def process_contigs(self, contigs):
        stats = self.context.stats
        nwritten = 0
        for contig in contigs:
            if contig is None:
                continue
            if not self.passes_contig_filters(contig):
                stats.contigs_rejected += 1
                continue
            self.sequence_writer.write(contig.assembly_id, contig.breakend_sequence(),
                                       contig.breakend_qualities())
            self.breakpoint_writer.write(BreakpointRecord.from_contig(contig))
            stats.contigs_written += 1
            nwritten += 1
        return nwritten

    def process_evidence(self, evidence):
        if not self.is_realignment_candidate(evidence):
            return False
        if not self.passes_evidence_filters(evidence):
            self.context.stats.evidence_rejected += 1
            return False
        qual = evidence.breakend_qualities()
        if qual is None:
            qual = [0] * evidence.clip_length
        self.sequence_writer.write(evidence.evidence_id, evidence.breakend_sequence(), qual)
        self.context.stats.evidence_written += 1
        return True


class _TextWriter:
    def __init__(self, output):
        if hasattr(output, 'write'):
            self.file = output
            self.filename = getattr(output, 'name', repr(output))
            self._owns_file = False
        else:
            self.filename = output
            try:
                self.file = open(output, 'w')
            except OSError as err:
                raise OutputError('[{0}] cannot open {1} for writing: {2}'
                                  .format(type(self).__name__, output, err)) from err
            self._owns_file = True

    def _write(self, text, operation):
        try:
            self.file.write(text)
        except OSError as err:
            raise OutputError('[{0}] {1} failed on {2}: {3}'
                              .format(type(self).__name__, operation, self.filename, err)) \
                from err

    def close(self):
        if self._owns_file:
            try:
                self.file.close()
            except OSError as err:
                raise OutputError('[{0}] close failed on {1}: {2}'
                                  .format(type(self).__name__, self.filename, err)) from err

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FastqBreakpointWriter(_TextWriter):
    """Breakend sequences (anchored bases excluded) for realignment."""

    def __init__(self, output):
        super(FastqBreakpointWriter, self).__init__(output)
        self.nwritten = 0

    def write(self, identifier, seq, qual):
        if len(qual) != len(seq):
            raise ValueError('[fastq] {0}: sequence and quality lengths differ'
                             .format(identifier))
        self._write('@{0}\n{1}\n+\n{2}\n'.format(identifier, seq, quality_list_to_str(qual)),
                    'write of record ' + identifier)
        self.nwritten += 1


class VcfBreakpointWriter(_TextWriter):
    def __init__(self, output, reference=None, reference_name=None):
        super(VcfBreakpointWriter, self).__init__(output)
        self.reference = reference
        self.nwritten = 0
        self._write(get_vcf_header(reference, reference_name), 'header write')

    def write(self, record):
        if self.reference is not None:
            chrom = self.reference.name(record.reference_index)
        else:
            chrom = str(record.reference_index)
        self._write(breakpoint_record_to_vcf(record, chrom),
                    'write of record ' + record.record_id)
        self.nwritten += 1
