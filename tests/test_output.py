"""
Tests for output filtering and the FASTQ / VCF writers.
"""

import io

import pytest

from svbreakend.breakend import BreakendSummary
from svbreakend.constants import FWD, BWD
from svbreakend.contig import AssembledContig, ContigPath
from svbreakend.output import BreakpointRecord, FastqBreakpointWriter, OutputAdapter, \
    OutputError, VcfBreakpointWriter
from svbreakend.reference import ReferenceDictionary


@pytest.fixture
def adapter(context, sequence_writer, breakpoint_writer):
    return OutputAdapter(context, sequence_writer, breakpoint_writer)


def make_contig(novel_length, direction=FWD, evidence=()):
    seq = 'A' * 10 + 'C' * novel_length
    path = ContigPath(seq, (30,) * len(seq), 10, len(seq))
    return AssembledContig.from_path('asm1', BreakendSummary(0, 100, 100, direction),
                                     path, evidence)


class UnknownEvidence:
    kind = 'XX'
    evidence_id = 'xx_1'


class TestEvidenceFilters:
    def test_mapq_boundary(self, adapter, make_softclip):
        assert adapter.passes_evidence_filters(make_softclip(100, mapq=5))
        assert not adapter.passes_evidence_filters(make_softclip(100, mapq=4))

    def test_clip_length_boundary(self, adapter, make_softclip):
        assert adapter.passes_evidence_filters(make_softclip(100, novel='A' * 25))
        assert not adapter.passes_evidence_filters(make_softclip(100, novel='A' * 24))

    def test_percent_identity_boundary(self, adapter, make_softclip):
        assert adapter.passes_evidence_filters(make_softclip(100, percent_identity=95))
        assert not adapter.passes_evidence_filters(make_softclip(100, percent_identity=94.9))

    def test_clip_quality_boundary(self, adapter, make_softclip):
        assert adapter.passes_evidence_filters(make_softclip(100, qual=5))
        assert not adapter.passes_evidence_filters(make_softclip(100, qual=4))

    def test_only_soft_clips_are_realigned(self, adapter, make_split_read, make_pair):
        assert not adapter.passes_evidence_filters(make_split_read(100))
        assert not adapter.passes_evidence_filters(make_pair(100, 200))

    def test_unknown_kind(self, adapter):
        with pytest.raises(ValueError):
            adapter.passes_evidence_filters(UnknownEvidence())

    def test_filter_is_idempotent(self, adapter, make_softclip, make_pair):
        evidence = [make_softclip(100, name='a', mapq=60), make_softclip(100, name='b', mapq=0),
                    make_pair(100, 200), make_softclip(101, name='c', qual=2)]
        once = adapter.filter_evidence(evidence)
        assert [e.evidence_id for e in once] == ['sc_a/1f']
        assert adapter.filter_evidence(once) == once


class TestContigFilters:
    def test_breakend_length_boundary(self, adapter):
        assert adapter.passes_contig_filters(make_contig(25))
        assert not adapter.passes_contig_filters(make_contig(24))

    def test_filter_is_idempotent(self, adapter):
        contigs = [make_contig(30), None, make_contig(3)]
        once = adapter.filter_contigs(contigs)
        assert len(once) == 1
        assert adapter.filter_contigs(once) == once


class TestOutputAdapter:
    def test_contig_writes_sequence_and_breakpoint(self, adapter, context, make_softclip,
                                                   sequence_writer, breakpoint_writer):
        ev = [make_softclip(100, name='a'), make_softclip(100, name='b')]
        assert adapter.process_contigs([None, make_contig(30, evidence=ev)]) == 1
        assert sequence_writer.records == [('asm1', 'C' * 30, (30,) * 30)]
        [record] = breakpoint_writer.records
        assert record.position == 100
        assert record.direction == FWD
        assert record.mate_contig == 'breakend_placeholder'
        assert record.evidence_ids == ['sc_a/1f', 'sc_b/1f']
        assert record.support['SC'] == 2
        assert context.stats.contigs_written == 1

    def test_rejected_contig_writes_nothing(self, adapter, context, sequence_writer,
                                            breakpoint_writer):
        assert adapter.process_contigs([make_contig(5)]) == 0
        assert sequence_writer.records == []
        assert breakpoint_writer.records == []
        assert context.stats.contigs_rejected == 1

    def test_raw_evidence_writes_sequence_only(self, adapter, make_softclip,
                                               sequence_writer, breakpoint_writer):
        e = make_softclip(100)
        assert adapter.process_evidence(e)
        assert sequence_writer.records == [('sc_r1/1f', e.breakend_sequence(),
                                            e.breakend_qualities())]
        assert breakpoint_writer.records == []

    def test_raw_evidence_without_qualities(self, adapter, make_softclip, sequence_writer,
                                            opts):
        opts['min_long_sc_base_quality'] = 0
        adapter = OutputAdapter(adapter.context, sequence_writer, adapter.breakpoint_writer)
        e = make_softclip(100)
        e.qual = None
        assert adapter.process_evidence(e)
        assert sequence_writer.records[0][2] == (0,) * e.clip_length

    def test_pair_is_not_written(self, adapter, make_pair, sequence_writer, context):
        assert not adapter.process_evidence(make_pair(100, 200))
        assert sequence_writer.records == []
        assert context.stats.evidence_rejected == 0


class TestFastqBreakpointWriter:
    def test_record(self):
        out = io.StringIO()
        writer = FastqBreakpointWriter(out)
        writer.write('sc_r1/1f', 'ACGT', [0, 10, 30, 40])
        assert out.getvalue() == '@sc_r1/1f\nACGT\n+\n!+?I\n'
        assert writer.nwritten == 1

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            FastqBreakpointWriter(io.StringIO()).write('x', 'ACGT', [30])

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(OutputError):
            FastqBreakpointWriter(str(tmp_path / 'missing' / 'out.fq'))

    def test_write_to_file(self, tmp_path):
        fn = str(tmp_path / 'out.fq')
        with FastqBreakpointWriter(fn) as writer:
            writer.write('a', 'AC', [40, 40])
        with open(fn) as f:
            assert f.read() == '@a\nAC\n+\nII\n'


class TestVcfBreakpointWriter:
    def test_header_and_record(self):
        out = io.StringIO()
        reference = ReferenceDictionary(['chr1', 'chr2'], [5000, 6000])
        writer = VcfBreakpointWriter(out, reference, 'test.fa')
        record = BreakpointRecord('asm1_chr2_100f', 1, 100, FWD, ['sc_a/1f', 'sc_b/1f'],
                                  'GGAT', 30, 34, {'SC': 2, 'SR': 0, 'DP': 0})
        writer.write(record)
        lines = out.getvalue().rstrip('\n').split('\n')
        assert lines[0] == '##fileformat=VCFv4.2'
        assert '##contig=<ID=chr2,length=6000>' in lines
        assert '##contig=<ID=breakend_placeholder,length=1>' in lines
        assert lines[-2].startswith('#CHROM')
        fields = lines[-1].split('\t')
        assert fields[:5] == ['chr2', '100', 'asm1_chr2_100f', 'N',
                              'NGGAT[breakend_placeholder:1[']
        assert 'EVENT=sc_a/1f,sc_b/1f' in fields[7]
        assert 'SC=2' in fields[7]

    def test_bwd_record_without_reference(self):
        out = io.StringIO()
        writer = VcfBreakpointWriter(out)
        writer.write(BreakpointRecord('asm2', 0, 50, BWD, ['sc_a/1b'], 'TT', 30, 32,
                                      {'SC': 1}))
        assert '\n\n' not in out.getvalue()
        fields = out.getvalue().rstrip('\n').split('\n')[-1].split('\t')
        assert fields[0] == '0'
        assert fields[4] == ']breakend_placeholder:1]TTN'
