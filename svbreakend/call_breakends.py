import argparse
import os
import sys
import time

from svbreakend.constants import PAIR_ORIENTATION_FR
from svbreakend.context import ProcessingContext
from svbreakend.helper import time_to_str
from svbreakend.merge import EvidenceOrderError, EvidenceReadError
from svbreakend.metrics import default_metrics_file, read_insert_size_metrics
from svbreakend.output import FastqBreakpointWriter, VcfBreakpointWriter, OutputError
from svbreakend.pipeline import BreakendPipeline
from svbreakend.svbreakend_options import ConfigurationError, get_opts, check_opts, \
    check_files
from svbreakend._version import __version__


def get_args(argv=None):
    parser = argparse.ArgumentParser(description='Assemble SV breakends from soft clipped, '
                                     'split and discordantly paired reads',
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument('-i', '--sv_input', type=str, required=True,
                        help='coordinate sorted alignments of reads supporting putative SVs')
    parser.add_argument('-m', '--mate_input', type=str, required=True,
                        help='discordant and one-end-anchored pairs sorted by mate coordinate')
    parser.add_argument('-o', '--vcf_output', type=str, required=True,
                        help='breakpoint VCF to write')
    parser.add_argument('-f', '--fastq_output', type=str, required=True,
                        help='breakend sequences to write for realignment')
    parser.add_argument('-r', '--reference_index', type=str,
                        help='.fai index of the reference (default: alignment file header)')
    parser.add_argument('--metrics', type=str,
                        help='Picard insert size metrics (default: <sv_input>.insert_size_metrics)')
    parser.add_argument('--outdir', type=str, help='directory for diagnostic plots')
    parser.add_argument('-k', '--k', type=int, help='k-mer length used for assembly')
    parser.add_argument('--max_fragment_size', type=int,
                        help='overrides the bound derived from the metrics file')
    parser.add_argument('--min_mapq', type=int)
    parser.add_argument('--min_mapq_reads', type=int)
    parser.add_argument('--min_breakend_realign_length', type=int)
    parser.add_argument('--min_percent_identity', type=float)
    parser.add_argument('--min_long_sc_base_quality', type=float)
    parser.add_argument('--min_kmer_count', type=int)
    parser.add_argument('--min_assembly_evidence', type=int)
    parser.add_argument('--max_breakend_merge_distance', type=int)
    parser.add_argument('-v', '--verbosity', type=int, help='how much output? (0-2, default 1)')
    parser.add_argument('--do_viz', action='store_true')
    parser.add_argument('--version', action='version', version=__version__)
    return parser.parse_args(argv)


def resolve_max_fragment_size(opts, context):
    if opts['max_fragment_size'] is not None:
        return opts['max_fragment_size']
    metrics_file = opts['metrics'] or default_metrics_file(opts['sv_input'])
    if not os.path.isfile(metrics_file):
        context.warn('run', 'no insert size metrics at {0}; using max fragment size {1}'
                     .format(metrics_file, opts['default_max_fragment_size']))
        return opts['default_max_fragment_size']
    metrics = read_insert_size_metrics(metrics_file)
    if metrics.pair_orientation is not None and \
       metrics.pair_orientation != PAIR_ORIENTATION_FR:
        raise ConfigurationError('Read pair {0} orientation not yet implemented.'
                                 .format(metrics.pair_orientation))
    context.log('run', 'library metrics {0}'.format(metrics))
    return metrics.max_fragment_size(opts['fragment_mad_multiple'])


def call_breakends(opts, context):
    try:
        from svbreakend.bamparser_streaming import open_evidence_streams, get_reference
    except ImportError as err:
        raise ConfigurationError('reading alignment files requires pysam ({0})'
                                 .format(err)) from err
    opts['max_fragment_size'] = resolve_max_fragment_size(opts, context)
    check_opts(opts)
    own, mate, bams = open_evidence_streams(opts, context, opts['max_fragment_size'])
    try:
        context.reference = get_reference(opts, bams[0])
        with FastqBreakpointWriter(opts['fastq_output']) as fastq, \
                VcfBreakpointWriter(opts['vcf_output'], context.reference,
                                    opts['reference_index']) as vcf:
            stats = BreakendPipeline(context, own, mate, fastq, vcf).run()
    finally:
        for bam in bams:
            bam.close()
    if opts['do_viz']:
        from svbreakend.assembly_viz import plot_assembly_stats
        outfile = plot_assembly_stats(stats, opts['outdir'])
        context.log('run', 'wrote assembly plots to {0}'.format(outfile))
    return stats


def run(args):
    start_time = time.time()
    opts = get_opts(vars(args))
    context = ProcessingContext(opts)
    try:
        check_opts(opts)
        check_files(opts)
        context.log('run', 'all options:\n\n{0}\n'.format(opts), level=2)
        call_breakends(opts, context)
    except (ConfigurationError, EvidenceOrderError, EvidenceReadError, OutputError) as err:
        sys.stderr.write('\nError: {0}\n'.format(err))
        sys.exit(1)
    context.log('run', 'finished in {0}'.format(time_to_str(time.time() - start_time)))


def main(argv=None):
    run(get_args(argv))
