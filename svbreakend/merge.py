import heapq
import itertools


class EvidenceOrderError(Exception):
    pass


# a source stream could not read its input file
class EvidenceReadError(Exception):
    pass


def evidence_sort_key(evidence):
    return evidence.breakend.sort_key


class PeekingIterator:
    _exhausted = object()

    def __init__(self, iterable):
        self._it = iter(iterable)
        self._next = None
        self._has_next = False

    def peek(self):
        if not self._has_next:
            self._next = next(self._it, self._exhausted)
            self._has_next = True
        return None if self._next is self._exhausted else self._next

    def has_next(self):
        self.peek()
        return self._next is not self._exhausted

    def __iter__(self):
        return self

    def __next__(self):
        if not self.has_next():
            raise StopIteration
        item = self._next
        self._has_next = False
        self._next = None
        return item


class _OrderCheck:
    def __init__(self, name, key):
        self.name = name
        self.key = key
        self.last = None

    def check(self, item):
        k = self.key(item)
        if self.last is not None and k < self.last:
            raise EvidenceOrderError('[{0}] input not sorted: {1} follows {2} ({3})'
                                     .format(self.name, k, self.last, item))
        self.last = k
        return item


class EvidenceMerger:
    """Merges two evidence streams, each sorted by breakend position.

    Output is non-decreasing in (reference_index, start); items with equal
    keys come from the own-position stream first. An out-of-order input item
    raises EvidenceOrderError.
    """

    def __init__(self, own_evidence, mate_evidence, key=evidence_sort_key):
        self.key = key
        self.own = PeekingIterator(own_evidence)
        self.mate = PeekingIterator(mate_evidence)
        self._own_check = _OrderCheck('own-position evidence', key)
        self._mate_check = _OrderCheck('mate-position evidence', key)
        self._out_check = _OrderCheck('merged evidence', key)
        self.nmerged = 0

    def __iter__(self):
        return self

    def __next__(self):
        own_next, mate_next = self.own.peek(), self.mate.peek()
        if own_next is None and mate_next is None:
            raise StopIteration
        if mate_next is None or \
           (own_next is not None and self.key(own_next) <= self.key(mate_next)):
            item = self._own_check.check(next(self.own))
        else:
            item = self._mate_check.check(next(self.mate))
        self.nmerged += 1
        return self._out_check.check(item)


class WindowedSortingIterator:
    """Re-sorts a stream whose order is only approximately the desired one.

    Items arrive ordered by input_key (reference_index, pos) and leave ordered
    by output_key. Every item's output position must lie no more than window
    bases before its input position; an item is released once the input has
    moved more than window bases past it (or to another reference).
    """

    def __init__(self, iterable, window, input_key, output_key=evidence_sort_key,
                 name='evidence'):
        self.window = window
        self.input_key = input_key
        self.output_key = output_key
        self.name = name
        self._it = iter(iterable)
        self._heap = []
        self._counter = itertools.count()
        self._input_check = _OrderCheck(name + ' (input order)', input_key)
        self._output_check = _OrderCheck(name, output_key)
        self._exhausted = False

    def __iter__(self):
        return self

    def _can_release(self, cursor):
        ref, pos = self._heap[0][0]
        return ref < cursor[0] or pos < cursor[1] - self.window

    def __next__(self):
        while not self._exhausted and \
                (len(self._heap) == 0 or not self._can_release(self._cursor)):
            item = next(self._it, None)
            if item is None:
                self._exhausted = True
                break
            self._cursor = self.input_key(self._input_check.check(item))
            heapq.heappush(self._heap, (self.output_key(item), next(self._counter), item))
        if len(self._heap) == 0:
            raise StopIteration
        item = heapq.heappop(self._heap)[2]
        return self._output_check.check(item)
