class ReferenceDictionary:
    """Names and lengths of the reference sequences, indexed like the alignments."""

    def __init__(self, names, lengths):
        if len(names) != len(lengths):
            raise ValueError('reference names and lengths differ in number')
        self.names = list(names)
        self.lengths = list(lengths)
        self._index = {name: i for (i, name) in enumerate(self.names)}

    def __len__(self):
        return len(self.names)

    def name(self, reference_index):
        return self.names[reference_index]

    def length(self, reference_index):
        return self.lengths[reference_index]

    def index(self, name):
        return self._index[name]

    @classmethod
    def from_fai(cls, filename):
        names, lengths = [], []
        with open(filename, 'r') as f:
            for line in f:
                if line.strip() == '':
                    continue
                toks = line.rstrip('\n').split('\t')
                names.append(toks[0])
                lengths.append(int(toks[1]))
        return cls(names, lengths)

    @classmethod
    def from_alignment_file(cls, bam):
        return cls(bam.references, bam.lengths)
