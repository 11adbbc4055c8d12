# breakend direction constants
# FWD: novel sequence continues after the anchored bases (right soft clip)
# BWD: novel sequence precedes the anchored bases (left soft clip)
FWD = 0
BWD = 1
DIRECTION_CHARS = ('f', 'b')

# evidence kinds
SOFT_CLIP = 'SC'
SPLIT_READ = 'SR'
DISCORDANT_PAIR = 'DP'
EVIDENCE_KINDS = (SOFT_CLIP, SPLIT_READ, DISCORDANT_PAIR)

# pair orientation of the only supported library layout (->  <-)
PAIR_ORIENTATION_FR = 'FR'


# k-mer graph
UNAMBIGUOUS_BASES = frozenset('ACGT')
MAX_BASE_QUAL = 40
PHRED_OFFSET = 33

# breakpoint output
PLACEHOLDER_CONTIG = 'breakend_placeholder'
ASSEMBLY_ID_PREFIX = 'asm'
