import sys
import time
from collections import Counter

import numpy as np

from svbreakend.constants import EVIDENCE_KINDS
from svbreakend.helper import time_to_str


class AssemblyStats:
    def __init__(self):
        self.evidence = Counter()
        self.loci_closed = 0
        self.contigs_assembled = 0
        self.contigs_written = 0
        self.contigs_rejected = 0
        self.evidence_written = 0
        self.evidence_rejected = 0
        self.pending_discarded = 0
        self.contig_lengths = []
        self.locus_support = []

    def record_evidence(self, evidence):
        self.evidence[evidence.kind] += 1

    def record_locus(self, nevidence, contig):
        self.loci_closed += 1
        self.locus_support.append(nevidence)
        if contig is not None:
            self.contigs_assembled += 1
            self.contig_lengths.append(len(contig))

    def summary_lines(self):
        lines = ['evidence processed: ' +
                 ', '.join('{0} {1}'.format(k, self.evidence[k]) for k in EVIDENCE_KINDS),
                 'loci closed: {0}; contigs assembled: {1}'
                 .format(self.loci_closed, self.contigs_assembled),
                 'contigs written: {0} (rejected {1})'
                 .format(self.contigs_written, self.contigs_rejected),
                 'raw evidence written: {0} (rejected {1})'
                 .format(self.evidence_written, self.evidence_rejected)]
        if len(self.contig_lengths) > 0:
            pct = np.percentile(self.contig_lengths, (25, 50, 75))
            lines.append('contig length 25-50-75 percentiles: {0}'.format(tuple(pct)))
        return lines


class ProgressLogger:
    def __init__(self, context, interval, noun='evidence'):
        self.context = context
        self.interval = interval
        self.noun = noun
        self.count = 0
        self.start_time = time.time()

    def record(self, chrom, pos):
        self.count += 1
        if self.count % self.interval == 0:
            elapsed = time_to_str(time.time() - self.start_time)
            self.context.log('progress', 'processed {0} {1}, last at {2}:{3} ({4})'
                             .format(self.count, self.noun, chrom, pos, elapsed))


class ProcessingContext:
    """Options, reference dictionary, logging and statistics for one run."""

    def __init__(self, opts, reference=None, out=sys.stdout, err=sys.stderr):
        self.opts = opts
        self.reference = reference
        self.out = out
        self.err = err
        self.stats = AssemblyStats()
        self.progress = ProgressLogger(self, opts['progress_interval'])

    @property
    def verbosity(self):
        return self.opts['verbosity']

    def log(self, tag, message, level=1):
        if self.verbosity >= level:
            print('[{0}] {1}'.format(tag, message), file=self.out)

    def warn(self, tag, message):
        print('[{0}] WARNING: {1}'.format(tag, message), file=self.err)

    def reference_name(self, reference_index):
        if self.reference is None:
            return str(reference_index)
        return self.reference.name(reference_index)
