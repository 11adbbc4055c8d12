import os

from svbreakend.svbreakend_options import ConfigurationError


METRICS_SUFFIX = '.insert_size_metrics'


class LibraryMetrics:
    def __init__(self, pair_orientation, median_insert_size, median_absolute_deviation,
                 max_insert_size):
        self.pair_orientation = pair_orientation
        self.median_insert_size = median_insert_size
        self.median_absolute_deviation = median_absolute_deviation
        self.max_insert_size = max_insert_size

    def max_fragment_size(self, mad_multiple):
        bound = self.median_insert_size + mad_multiple * self.median_absolute_deviation
        if self.max_insert_size is not None:
            bound = min(bound, self.max_insert_size)
        return int(round(bound))

    def __repr__(self):
        return '(orientation {0} median {1} MAD {2} max {3})'.format(
            self.pair_orientation, self.median_insert_size,
            self.median_absolute_deviation, self.max_insert_size)


def default_metrics_file(sv_input):
    return sv_input + METRICS_SUFFIX


# Picard CollectInsertSizeMetrics output: '#' comment lines, then a header
# line starting with MEDIAN_INSERT_SIZE followed by one row per orientation
def read_insert_size_metrics(filename):
    rows = []
    header = None
    with open(filename, 'r') as f:
        for line in f:
            # the metrics block ends at the first comment or blank line after its header
            if line.startswith('#') or line.strip() == '':
                if header is not None:
                    break
                continue
            toks = line.rstrip('\n').split('\t')
            if header is None:
                if toks[0] == 'MEDIAN_INSERT_SIZE':
                    header = toks
                continue
            rows.append(dict(zip(header, toks)))
    if header is None or len(rows) == 0:
        raise ConfigurationError('no insert size metrics found in {0}'.format(filename))
    if len(rows) > 1:
        orientations = sorted(str(row.get('PAIR_ORIENTATION')) for row in rows)
        raise ConfigurationError('Read pair {0} orientation not yet implemented ({1}).'
                                 .format('/'.join(orientations), os.path.basename(filename)))
    row = rows[0]
    try:
        max_insert = row.get('MAX_INSERT_SIZE')
        return LibraryMetrics(row.get('PAIR_ORIENTATION'),
                              float(row['MEDIAN_INSERT_SIZE']),
                              float(row.get('MEDIAN_ABSOLUTE_DEVIATION', 0) or 0),
                              int(max_insert) if max_insert else None)
    except (KeyError, ValueError) as err:
        raise ConfigurationError('malformed insert size metrics in {0}: {1}'
                                 .format(filename, err)) from err
