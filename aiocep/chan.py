import asyncio
import collections
import random

from . import buffers

_buf_types = {'p': buffers.PromiseBuffer}

__all__ = ('Chan', 'select', 'go', 'nop')

MAX_OP_QUEUE_SIZE = 1024
"""
The maximum pending puts or pending gets for a channel.

A race only ever queues one get per completion slot, so hitting this limit means operations are leaking.
"""


class FnHandler:
    __slots__ = ('_f', '_blockable')

    @property
    def active(self):
        # a waiter cancelled along with its task must not consume a value
        return not (asyncio.isfuture(self._f) and self._f.done())

    @property
    def blockable(self):
        return self._blockable

    def __init__(self, f, blockable=True):
        self._f = f
        self._blockable = blockable

    def commit(self):
        return self._f


class SelectFlag:
    __slots__ = ('active',)

    def __init__(self):
        self.active = True

    def commit(self):
        self.active = False


class SelectHandler:
    """
    One arm of a :func:`select`. All arms share a :class:`SelectFlag`, and committing any arm deactivates the
    others, so at most one get of the select ever completes.
    """
    __slots__ = ('_f', '_flag')
    blockable = True

    def __init__(self, f, flag):
        self._f = f
        self._flag = flag

    @property
    def active(self):
        return self._flag.active

    def commit(self):
        self._flag.commit()
        return self._f


class Chan:
    """
    A channel, the meeting point between the fetchers of a race and the coordinator waiting on them.

    :param buffer: `None` for an unbuffered channel, the string `p` for a :class:`aiocep.buffers.PromiseBuffer`, or a
            buffer object.
    :param loop: the asyncio loop used when creating futures. If `None`, the running loop is used.
    :param name: used to provide more friendly debugging outputs.
    """

    _count = 0

    def __init__(self,
                 buffer=None,
                 *,
                 loop=None,
                 name=None):
        self._name = name or '_unk' + '_' + str(self.__class__._count)
        self.loop = loop or asyncio.get_running_loop()
        self._buf = _buf_types[buffer]() if isinstance(buffer, str) else buffer

        self._gets = collections.deque()
        self._puts = collections.deque()
        self._closed = False
        self.__class__._count += 1

    @staticmethod
    def _dispatch(f, value=None):
        if f is None:
            return
        elif asyncio.isfuture(f):
            # the waiter may have been cancelled together with its task
            if not f.done():
                f.set_result(value)
        else:
            f(value)

    def _clean(self):
        self._gets = collections.deque(g for g in self._gets if g.active)
        self._puts = collections.deque(p for p in self._puts if p[0].active)

    def _put(self, val, handler):
        if val is None:
            raise TypeError('Cannot put None on a channel')

        if self._closed or not handler.active:
            return (not self._closed,)

        # buffer has room: add, then hand buffered values to waiting getters
        if self._buf and self._buf.can_add:
            handler.commit()
            self._buf.add(val)
            while self._gets and self._buf.can_take:
                getter = self._gets.popleft()
                if getter.active:
                    self._dispatch(getter.commit(), self._buf.take())
            return (True,)

        getter = None
        while self._gets:
            g = self._gets.popleft()
            if g.active:
                getter = g
                break

        if getter is not None:
            handler.commit()
            self._dispatch(getter.commit(), val)
            return (True,)

        if len(self._puts) >= MAX_OP_QUEUE_SIZE:
            self._clean()
        assert len(self._puts) < MAX_OP_QUEUE_SIZE, \
            'No more than ' + str(MAX_OP_QUEUE_SIZE) + ' pending puts are allowed on a single channel'
        self._puts.append((handler, val))
        return None

    def _get(self, handler):
        if not handler.active:
            return None

        if self._buf and self._buf.can_take:
            handler.commit()
            return (self._buf.take(),)

        putter = None
        while self._puts:
            p = self._puts.popleft()
            if p[0].active:
                putter = p
                break

        if putter is not None:
            handler.commit()
            self._dispatch(putter[0].commit(), True)
            return (putter[1],)

        if self._closed:
            handler.commit()
            return (None,)

        if handler.blockable:
            if len(self._gets) >= MAX_OP_QUEUE_SIZE:
                self._clean()
            assert len(self._gets) < MAX_OP_QUEUE_SIZE, \
                'No more than ' + str(MAX_OP_QUEUE_SIZE) + ' pending gets are allowed on a single channel'
            self._gets.append(handler)
        return None

    def __repr__(self):
        return 'Chan<' + self._name + ' ' + str(id(self)) + '>'

    @property
    def name(self):
        return self._name

    def put(self, val):
        """
        **Coroutine**. Put a value into the channel.

        :param val: value to put into the channel. Cannot be `None`.
        :return: Awaitable of `True` if the op succeeds before the channel is closed, `False` if the op is applied to a
                 then-closed channel.
        """
        ft = self.loop.create_future()
        ret = self._put(val, FnHandler(ft))
        if ret is not None:
            ft = self.loop.create_future()
            ft.set_result(ret[0])
        return ft

    def get(self):
        """
        **Coroutine**. Get a value out of the channel.

        :return: An awaitable holding the obtained value, or `None` if the channel is closed before succeeding.
        """
        ft = self.loop.create_future()
        ret = self._get(FnHandler(ft))
        if ret is not None:
            ft = self.loop.create_future()
            ft.set_result(ret[0])
        return ft

    def get_nowait(self):
        """
        Get a value from the channel if one is available right now. Nothing is queued.

        :return: the value if available immediately, `None` otherwise
        """
        ret = self._get(FnHandler(None, blockable=False))
        return ret[0] if ret else None

    def close(self):
        """
        Close the channel.

        Further puts complete immediately without doing anything. Pending puts are still delivered, and a filled
        promise buffer keeps answering gets; once nothing is left, gets complete immediately with `None`.

        Closing an already closed channel is a no-op.

        :return: `self`
        """
        if self._closed:
            return self
        while self._gets:
            getter = self._gets.popleft()
            if getter.active:
                self._dispatch(getter.commit(), None)
        self._closed = True
        return self

    @property
    def closed(self):
        """
        :return: whether this channel is already closed.
        """
        return self._closed


def select(*chans, loop=None):
    """
    Asynchronously completes a get on at most one channel in `chans`.

    The channels are tried in random order, so a select over several ready channels picks each with equal chance.

    :param chans: the channels to get from.
    :param loop: asyncio loop to run on
    :return: a future containing `(val, chan)`, where `chan` is the channel whose get succeeded and `val` the value
             obtained (`None` when the channel is closed).
    """
    chans = list(chans)
    loop = loop or asyncio.get_running_loop()
    ft = loop.create_future()
    flag = SelectFlag()
    random.shuffle(chans)

    def set_result_wrap(c):
        def set_result(v):
            if not ft.done():
                ft.set_result((v, c))

        return set_result

    for chan in chans:
        # noinspection PyProtectedMember
        r = chan._get(SelectHandler(set_result_wrap(chan), flag))
        if r is not None:
            ft.set_result((r[0], chan))
            break

    return ft


def go(coro, loop=None):
    """
    Spawn a coroutine as a task on the given (or running) loop.

    :param coro: the coroutine to spawn.
    :param loop: the event loop to run the coroutine, or the running loop if `None`.
    :return: the task, which can be awaited for the result of the coroutine.
    """
    return asyncio.ensure_future(coro, loop=loop)


def nop():
    """
    Useful for yielding control to the scheduler.
    """
    return asyncio.sleep(0)
