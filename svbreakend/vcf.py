from time import strftime

from svbreakend.constants import FWD, PLACEHOLDER_CONTIG, SOFT_CLIP, SPLIT_READ, \
    DISCORDANT_PAIR
from svbreakend._version import __version__


def get_vcf_header(reference, reference_name=None):
    header = """##fileformat=VCFv4.2
##fileDate={0}
##source=svbreakend-{1}
##reference={2}
{3}##contig=<ID={4},length=1>
##ALT=<ID=BND,Description="Breakend whose partner is not yet known">
##INFO=<ID=SVTYPE,Number=1,Type=String,Description="Type of structural variant">
##INFO=<ID=EVENT,Number=.,Type=String,Description="Identifiers of the evidence supporting this breakend">
##INFO=<ID=ANCHOR_LEN,Number=1,Type=Integer,Description="Length of the reference-anchored portion of the assembly">
##INFO=<ID=ASSEMBLY_LEN,Number=1,Type=Integer,Description="Length of the assembled breakend contig">
##INFO=<ID=BREAKEND_LEN,Number=1,Type=Integer,Description="Length of the novel breakend sequence">
##INFO=<ID=SC,Number=1,Type=Integer,Description="Number of soft clipped reads supporting this breakend">
##INFO=<ID=SR,Number=1,Type=Integer,Description="Number of split reads supporting this breakend">
##INFO=<ID=DP_SUPPORT,Number=1,Type=Integer,Description="Number of discordant or one-end-anchored read pairs supporting this breakend">
#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n"""
    header = header.format(strftime('%Y%m%d'),
                           __version__,
                           reference_name if reference_name is not None else '.',
                           get_vcf_contigs(reference),
                           PLACEHOLDER_CONTIG)
    return header


def vcf_line_template():
    return ('{chr}\t{pos}\t{id}\t{ref}\t{alt}\t{qual}\t'
            '{filter}\t{info}\n')


def get_vcf_contigs(reference):
    if reference is None:
        return ''
    return ''.join(['##contig=<ID={0},length={1}>\n'.format(r, l) for
                    (r, l) in zip(reference.names, reference.lengths)])


# breakend partner is the placeholder contig until the breakend is realigned
def breakend_alt(ref_base, breakend_seq, direction):
    if direction == FWD:
        return '{0}{1}[{2}:1['.format(ref_base, breakend_seq, PLACEHOLDER_CONTIG)
    else:
        return ']{0}:1]{1}{2}'.format(PLACEHOLDER_CONTIG, breakend_seq, ref_base)


def breakpoint_record_to_vcf(record, chrom):
    info_list = [('SVTYPE', 'BND'),
                 ('EVENT', ','.join(record.evidence_ids)),
                 ('ANCHOR_LEN', record.anchor_length),
                 ('ASSEMBLY_LEN', record.assembly_length),
                 ('BREAKEND_LEN', len(record.breakend_sequence)),
                 ('SC', record.support.get(SOFT_CLIP, 0)),
                 ('SR', record.support.get(SPLIT_READ, 0)),
                 ('DP_SUPPORT', record.support.get(DISCORDANT_PAIR, 0))]
    info = ';'.join(['{0}={1}'.format(el[0], el[1]) for el in info_list])
    return vcf_line_template().format(chr=chrom, pos=record.position, id=record.record_id,
                                      ref=record.ref_base,
                                      alt=breakend_alt(record.ref_base,
                                                       record.breakend_sequence,
                                                       record.direction),
                                      qual='.', filter='.', info=info)
