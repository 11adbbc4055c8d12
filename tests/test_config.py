"""
Tests for options, insert size metrics and the command line.
"""

import pytest

from svbreakend.call_breakends import get_args, resolve_max_fragment_size, run
from svbreakend.metrics import LibraryMetrics, default_metrics_file, read_insert_size_metrics
from svbreakend.reference import ReferenceDictionary
from svbreakend.svbreakend_options import ConfigurationError, DEFAULT_OPTS, check_files, \
    check_opts, get_opts


METRICS_HEADER = '\t'.join(['MEDIAN_INSERT_SIZE', 'MODE_INSERT_SIZE',
                            'MEDIAN_ABSOLUTE_DEVIATION', 'MIN_INSERT_SIZE', 'MAX_INSERT_SIZE',
                            'MEAN_INSERT_SIZE', 'STANDARD_DEVIATION', 'READ_PAIRS',
                            'PAIR_ORIENTATION'])


def metrics_text(*rows):
    lines = ['## htsjdk.samtools.metrics.StringHeader',
             '# CollectInsertSizeMetrics INPUT=sample.bam',
             '',
             '## METRICS CLASS\tpicard.analysis.InsertSizeMetrics',
             METRICS_HEADER]
    lines.extend('\t'.join(row) for row in rows)
    lines.extend(['', '## HISTOGRAM\tjava.lang.Integer', 'insert_size\tAll_Reads.fr_count',
                  '2\t1', ''])
    return '\n'.join(lines)


FR_ROW = ('300', '298', '30', '2', '5000', '305.2', '45.1', '100000', 'FR')
RF_ROW = ('2500', '2400', '300', '2', '9000', '2550.0', '400.0', '5000', 'RF')


@pytest.fixture
def metrics_file(tmp_path):
    def write(*rows):
        fn = tmp_path / 'sample.bam.insert_size_metrics'
        fn.write_text(metrics_text(*rows))
        return str(fn)
    return write


class TestOptions:
    def test_defaults_are_valid(self):
        check_opts(get_opts())

    def test_overrides_skip_none(self):
        opts = get_opts({'k': 31, 'min_mapq': None})
        assert opts['k'] == 31
        assert opts['min_mapq'] == DEFAULT_OPTS['min_mapq']
        assert DEFAULT_OPTS['k'] == 25

    @pytest.mark.parametrize('key,value', [('k', 1), ('k', 2.5), ('min_percent_identity', 101),
                                           ('pair_orientation', 'RF'), ('min_kmer_count', 0),
                                           ('max_breakend_merge_distance', -1),
                                           ('max_fragment_size', 0)])
    def test_invalid(self, key, value):
        with pytest.raises(ConfigurationError):
            check_opts(get_opts({key: value}))

    def test_missing_output(self, tmp_path):
        with pytest.raises(ConfigurationError):
            check_files(get_opts({'fastq_output': str(tmp_path / 'out.fq')}))

    def test_unreadable_input(self, tmp_path):
        opts = get_opts({'sv_input': str(tmp_path / 'missing.bam'),
                         'vcf_output': str(tmp_path / 'out.vcf'),
                         'fastq_output': str(tmp_path / 'out.fq')})
        with pytest.raises(ConfigurationError):
            check_files(opts)

    def test_files_ok(self, tmp_path):
        sv = tmp_path / 'sv.bam'
        sv.write_text('')
        check_files(get_opts({'sv_input': str(sv), 'vcf_output': str(tmp_path / 'out.vcf'),
                              'fastq_output': str(tmp_path / 'out.fq')}))


class TestMetrics:
    def test_read_fr_metrics(self, metrics_file):
        metrics = read_insert_size_metrics(metrics_file(FR_ROW))
        assert metrics.pair_orientation == 'FR'
        assert metrics.median_insert_size == 300
        assert metrics.median_absolute_deviation == 30
        assert metrics.max_insert_size == 5000
        assert metrics.max_fragment_size(10) == 600

    def test_max_insert_size_caps_bound(self):
        assert LibraryMetrics('FR', 300, 30, 450).max_fragment_size(10) == 450

    def test_multiple_orientations(self, metrics_file):
        with pytest.raises(ConfigurationError):
            read_insert_size_metrics(metrics_file(FR_ROW, RF_ROW))

    def test_no_metrics(self, metrics_file):
        with pytest.raises(ConfigurationError):
            read_insert_size_metrics(metrics_file())

    def test_default_metrics_file(self):
        assert default_metrics_file('in/sample.bam') == 'in/sample.bam.insert_size_metrics'


class TestReferenceDictionary:
    def test_from_fai(self, tmp_path):
        fai = tmp_path / 'ref.fa.fai'
        fai.write_text('chr1\t5000\t6\t60\t61\nchr2\t300\t5097\t60\t61\n')
        ref = ReferenceDictionary.from_fai(str(fai))
        assert len(ref) == 2
        assert ref.name(1) == 'chr2'
        assert ref.length(0) == 5000
        assert ref.index('chr2') == 1


class TestCommandLine:
    def test_get_args(self):
        args = get_args(['-i', 'sv.bam', '-m', 'mate.bam', '-o', 'out.vcf', '-f', 'out.fq',
                         '-k', '31'])
        opts = get_opts(vars(args))
        assert opts['k'] == 31
        assert opts['sv_input'] == 'sv.bam'
        assert opts['min_mapq'] == DEFAULT_OPTS['min_mapq']

    def test_explicit_fragment_size(self, context):
        context.opts['max_fragment_size'] = 700
        assert resolve_max_fragment_size(context.opts, context) == 700

    def test_fragment_size_from_metrics(self, context, metrics_file):
        context.opts['metrics'] = metrics_file(FR_ROW)
        assert resolve_max_fragment_size(context.opts, context) == 600

    def test_default_metrics_location(self, context, metrics_file, tmp_path):
        metrics_file(FR_ROW)
        context.opts['sv_input'] = str(tmp_path / 'sample.bam')
        assert resolve_max_fragment_size(context.opts, context) == 600

    def test_missing_metrics_falls_back(self, context, tmp_path):
        context.opts['sv_input'] = str(tmp_path / 'other.bam')
        assert resolve_max_fragment_size(context.opts, context) == \
            DEFAULT_OPTS['default_max_fragment_size']
        assert 'no insert size metrics' in context.err.getvalue()

    def test_unsupported_orientation(self, context, tmp_path):
        fn = tmp_path / 'rf.metrics'
        fn.write_text(metrics_text(RF_ROW))
        context.opts['metrics'] = str(fn)
        with pytest.raises(ConfigurationError):
            resolve_max_fragment_size(context.opts, context)

    def test_run_exits_on_configuration_error(self, tmp_path, capsys):
        args = get_args(['-i', str(tmp_path / 'missing.bam'), '-m', str(tmp_path / 'm.bam'),
                         '-o', str(tmp_path / 'out.vcf'), '-f', str(tmp_path / 'out.fq'),
                         '-v', '0'])
        with pytest.raises(SystemExit) as exc:
            run(args)
        assert exc.value.code == 1
        assert 'not readable' in capsys.readouterr().err
