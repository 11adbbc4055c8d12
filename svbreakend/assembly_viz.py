import os

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

matplotlib.use('Agg')           # required if X11 display is not present


def plot_assembly_stats(stats, outdir, filename='assembly_stats.pdf'):
    """Histograms of contig lengths and evidence per closed locus."""
    os.makedirs(outdir, exist_ok=True)
    outfile = os.path.join(outdir, filename)
    pp = PdfPages(outfile)
    for values, title, xlabel in ((stats.contig_lengths, 'assembled contig length', 'bases'),
                                  (stats.locus_support, 'evidence per locus', 'evidence items')):
        plt.figure()
        if len(values) > 0:
            plt.hist(values, bins=min(50, max(1, len(set(values)))))
        plt.title(title)
        plt.xlabel(xlabel)
        pp.savefig()
        plt.close()
    pp.close()
    return outfile
