"""
Pytest configuration and shared fixtures.
"""

import io

import pytest

from svbreakend.breakend import BreakendSummary
from svbreakend.constants import FWD, BWD, DIRECTION_CHARS
from svbreakend.context import ProcessingContext
from svbreakend.evidence import SoftClipEvidence, SplitReadEvidence, DiscordantPairEvidence
from svbreakend.svbreakend_options import get_opts


# 30 reference-anchored bases followed by 30 novel bases, no repeated 5-mers
ANCHOR = 'ACGTTGCATCCGATGACTGGTAACGTCAGT'
NOVEL = 'GGATCCTTAGCAATCGGCTAAGCTAGTACG'


class ListSequenceWriter:
    def __init__(self):
        self.records = []

    def write(self, identifier, seq, qual):
        self.records.append((identifier, seq, tuple(qual)))


class ListBreakpointWriter:
    def __init__(self):
        self.records = []

    def write(self, record):
        self.records.append(record)


class FakeAlignment:
    """Just enough of pysam.AlignedSegment for the evidence extractors."""

    def __init__(self, **kwargs):
        self.query_name = 'read1'
        self.query_sequence = None
        self.query_qualities = None
        self.query_alignment_start = 0
        self.query_alignment_end = 0
        self.reference_id = 0
        self.reference_start = 0
        self.reference_end = 0
        self.mapping_quality = 60
        self.is_unmapped = False
        self.is_secondary = False
        self.is_supplementary = False
        self.is_duplicate = False
        self.is_paired = True
        self.is_read1 = True
        self.is_reverse = False
        self.mate_is_unmapped = False
        self.mate_is_reverse = True
        self.next_reference_id = 0
        self.next_reference_start = 0
        self.template_length = 0
        self.tags = {}
        for key, val in kwargs.items():
            setattr(self, key, val)
        if self.query_qualities is None and self.query_sequence is not None:
            self.query_qualities = [30] * len(self.query_sequence)

    def has_tag(self, tag):
        return tag in self.tags

    def get_tag(self, tag):
        return self.tags[tag]


@pytest.fixture
def opts():
    """Defaults with a short k-mer and quiet logging."""
    return get_opts({'k': 5, 'verbosity': 0})


@pytest.fixture
def make_context():
    def make(opts):
        return ProcessingContext(opts, out=io.StringIO(), err=io.StringIO())
    return make


@pytest.fixture
def context(opts, make_context):
    return make_context(opts)


@pytest.fixture
def sequence_writer():
    return ListSequenceWriter()


@pytest.fixture
def breakpoint_writer():
    return ListBreakpointWriter()


@pytest.fixture
def make_alignment():
    return FakeAlignment


@pytest.fixture
def make_softclip():
    """Soft clip evidence built from anchored and novel bases."""
    def make(pos, anchor=ANCHOR, novel=NOVEL, direction=FWD, ref=0, name='r1',
             mapq=60, qual=30, kind=SoftClipEvidence, percent_identity=100.0):
        seq = anchor + novel if direction == FWD else novel + anchor
        evidence_id = '{0}_{1}/1{2}'.format('sc' if kind is SoftClipEvidence else 'sr',
                                            name, DIRECTION_CHARS[direction])
        return kind(evidence_id, BreakendSummary(ref, pos, pos, direction), seq,
                    [qual] * len(seq), anchor_length=len(anchor), mapq=mapq,
                    percent_identity=percent_identity)
    return make


@pytest.fixture
def make_split_read(make_softclip):
    def make(pos, **kwargs):
        return make_softclip(pos, kind=SplitReadEvidence, **kwargs)
    return make


@pytest.fixture
def make_pair():
    """Discordant pair evidence over a breakend interval."""
    def make(start, end, seq=NOVEL, direction=FWD, ref=0, name='p1', mapq=60):
        evidence_id = 'dp_{0}/2{1}'.format(name, DIRECTION_CHARS[direction])
        return DiscordantPairEvidence(evidence_id, BreakendSummary(ref, start, end, direction),
                                      seq, [30] * len(seq), mapq=mapq)
    return make

