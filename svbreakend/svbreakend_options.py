import os

from svbreakend.constants import PAIR_ORIENTATION_FR


class ConfigurationError(Exception):
    pass


# Modify at your own risk! Options meant to be changed on a per-run basis
# are included as command-line arguments.
DEFAULT_OPTS = {
    # MISC
    'verbosity': 1,
    'progress_interval': 100000,  # evidence items between progress messages

    # INPUT / OUTPUT
    'sv_input': None,           # coordinate sorted reads supporting putative SVs
    'mate_input': None,         # DP and OEA pairs sorted by mapped mate coordinate
    'vcf_output': None,
    'fastq_output': None,
    'metrics': None,            # defaults to <sv_input>.insert_size_metrics
    'reference_index': None,    # .fai of the reference used for alignment
    'outdir': 'svbreakend_out',

    # LIBRARY PARAMETERS
    'pair_orientation': PAIR_ORIENTATION_FR,
    'max_fragment_size': None,  # from metrics if not given
    'default_max_fragment_size': 1000,
    'fragment_mad_multiple': 10,  # median + multiple * MAD bounds the fragment size

    # EVIDENCE EXTRACTION
    'min_mapq_reads': 0,        # alignments below this are not turned into evidence
    'min_clipped_bases': 1,
    'max_splits': 1,

    # ASSEMBLY
    'k': 25,
    'min_kmer_count': 1,        # k-mers seen fewer times are sequencing errors
    'min_assembly_evidence': 2,
    'min_contig_novel_bases': 1,
    'max_breakend_merge_distance': 0,  # exact evidence within this many bp shares a locus
    'max_open_evidence': 100000,       # open loci + pending evidence before warning

    # OUTPUT FILTERS
    'min_mapq': 5,
    'min_breakend_realign_length': 25,
    'min_percent_identity': 95,   # 0-100
    'min_long_sc_base_quality': 5,

    # (visualization)
    'do_viz': False,
}


def get_opts(overrides=None):
    opts = dict(DEFAULT_OPTS)
    if overrides is not None:
        opts.update((key, val) for key, val in overrides.items() if val is not None)
    return opts


def check_opts(opts):
    k = opts['k']
    if not isinstance(k, int) or k < 2:
        raise ConfigurationError('k-mer length must be an integer >= 2 (got {0})'.format(k))
    if not 0 <= opts['min_percent_identity'] <= 100:
        raise ConfigurationError('min_percent_identity must be in the range 0-100 (got {0})'
                                 .format(opts['min_percent_identity']))
    if opts['pair_orientation'] is not None and \
       opts['pair_orientation'] != PAIR_ORIENTATION_FR:
        raise ConfigurationError('Read pair {0} orientation not yet implemented.'
                                 .format(opts['pair_orientation']))
    for name in ('min_kmer_count', 'min_assembly_evidence',
                 'progress_interval', 'max_open_evidence'):
        if opts[name] < 1:
            raise ConfigurationError('{0} must be positive (got {1})'.format(name, opts[name]))
    if opts['max_breakend_merge_distance'] < 0:
        raise ConfigurationError('max_breakend_merge_distance must be >= 0')
    if opts['max_fragment_size'] is not None and opts['max_fragment_size'] < 1:
        raise ConfigurationError('max_fragment_size must be positive (got {0})'
                                 .format(opts['max_fragment_size']))


def check_files(opts):
    for name in ('sv_input', 'mate_input', 'metrics', 'reference_index'):
        fn = opts.get(name)
        if fn is None:
            continue
        if not os.path.isfile(fn) or not os.access(fn, os.R_OK):
            raise ConfigurationError('{0} file {1} is not readable'.format(name, fn))
    for name in ('vcf_output', 'fastq_output'):
        fn = opts.get(name)
        if fn is None:
            raise ConfigurationError('missing required output file {0}'.format(name))
        outdir = os.path.dirname(os.path.abspath(fn))
        if not os.access(outdir, os.W_OK) or \
           (os.path.exists(fn) and not os.access(fn, os.W_OK)):
            raise ConfigurationError('{0} file {1} is not writable'.format(name, fn))
