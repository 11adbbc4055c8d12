from collections import namedtuple

from svbreakend.constants import FWD, BWD, DIRECTION_CHARS


class BreakendSummary(namedtuple('BreakendSummary',
                                 ['reference_index', 'start', 'end', 'direction'])):
    """Location of one side of a structural variant junction.

    Positions are 1-based and inclusive; start == end for an exact breakend.
    For a FWD breakend the anchored bases end at the breakend and the novel
    sequence continues to the right; for BWD the novel sequence is on the left.
    """
    __slots__ = ()

    def __new__(cls, reference_index, start, end=None, direction=FWD):
        if end is None:
            end = start
        if start > end:
            raise ValueError('breakend start {0} > end {1}'.format(start, end))
        if direction not in (FWD, BWD):
            raise ValueError('invalid breakend direction {0}'.format(direction))
        return super(BreakendSummary, cls).__new__(cls, reference_index, start, end, direction)

    @property
    def is_exact(self):
        return self.start == self.end

    @property
    def sort_key(self):
        return (self.reference_index, self.start)

    def overlaps(self, reference_index, start, end, direction):
        return self.reference_index == reference_index and \
            self.direction == direction and \
            not (self.end < start or end < self.start)

    def contains(self, reference_index, pos, direction):
        return self.overlaps(reference_index, pos, pos, direction)

    def __str__(self):
        if self.is_exact:
            return '{0}:{1}{2}'.format(self.reference_index, self.start,
                                       DIRECTION_CHARS[self.direction])
        return '{0}:{1}-{2}{3}'.format(self.reference_index, self.start, self.end,
                                       DIRECTION_CHARS[self.direction])
