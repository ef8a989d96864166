class PromiseBuffer:
    """
    A single-slot buffer that blocks on get until filled and never blocks on put.

    The first value put into the buffer is kept: *all* subsequent gets succeed with this value, and *all*
    subsequent puts succeed but their values are ignored. A fetcher's completion slot is such a buffer, so a late
    result never blocks its producer and never replaces the first one.
    """
    __slots__ = ('_val',)

    def __init__(self):
        self._val = None

    def add(self, el):
        if self._val is None:
            self._val = el

    def take(self):
        return self._val

    can_add = True

    @property
    def can_take(self):
        return self._val is not None

    def __repr__(self):
        return 'PromiseBuffer<' + ('empty' if self._val is None else 'filled') + '>'
