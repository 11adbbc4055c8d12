from svbreakend.assembler import LocalAssembler
from svbreakend.merge import EvidenceMerger
from svbreakend.output import OutputAdapter


class BreakendPipeline:
    """Merges both evidence streams, assembles each locus and writes the results.

    Assembler output is handled before the raw evidence that triggered it:
    processing position P emits the contigs of loci before P, so both
    outputs stay in non-decreasing position order.
    """

    def __init__(self, context, own_evidence, mate_evidence,
                 sequence_writer, breakpoint_writer, assembler=None):
        self.context = context
        self.merger = EvidenceMerger(own_evidence, mate_evidence)
        self.assembler = assembler or LocalAssembler(context)
        self.adapter = OutputAdapter(context, sequence_writer, breakpoint_writer)

    def run(self):
        ctx = self.context
        ctx.log('pipeline', 'starting evidence processing. . .')
        for evidence in self.merger:
            bs = evidence.breakend
            ctx.progress.record(ctx.reference_name(bs.reference_index), bs.start)
            ctx.stats.record_evidence(evidence)
            self.adapter.process_contigs(self.assembler.add_evidence(evidence))
            self.adapter.process_evidence(evidence)
        self.adapter.process_contigs(self.assembler.end_of_evidence())
        ctx.log('pipeline', 'processed a total of {0} evidence items'
                .format(self.merger.nmerged))
        for line in ctx.stats.summary_lines():
            ctx.log('pipeline', line)
        return ctx.stats
