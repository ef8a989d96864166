import asyncio
import logging

from .chan import Chan
from .errors import CancellationError

__all__ = ('Scope', 'REVOKED', 'DEADLINE')

logger = logging.getLogger(__name__)

REVOKED = 'revoked'
DEADLINE = 'deadline'


class Scope:
    """
    A revocable permission shared by the coordinator of a race and its fetchers.

    The scope is revoked at most once, either explicitly through :meth:`revoke` or by its deadline. Revoking closes
    :attr:`done`, which can be used in a :func:`aiocep.chan.select` like any other channel, and cancels every
    awaitable currently running through :meth:`run`. Fetchers only ever read the scope.

    :param seconds: time until the deadline revokes the scope. `None` means no deadline; zero or a negative value
                    gives an already expired scope.
    :param loop: the loop that the deadline timer and :attr:`done` use. If `None`, the running loop is used.
    """

    def __init__(self, seconds=None, *, loop=None):
        self.loop = loop or asyncio.get_running_loop()
        self.done = Chan(loop=self.loop, name='scope')
        self._reason = None
        self._timer = None
        self._running = set()
        self._workers = set()
        if seconds is None:
            self.deadline = None
        else:
            self.deadline = self.loop.time() + seconds
            if seconds <= 0:
                self.revoke(DEADLINE)
            else:
                self._timer = self.loop.call_at(self.deadline, self.revoke, DEADLINE)

    def __repr__(self):
        return 'Scope<' + (self._reason or 'active') + ' ' + str(id(self)) + '>'

    @property
    def revoked(self):
        """
        :return: whether the scope has been revoked, by hand or by its deadline.
        """
        return self._reason is not None

    @property
    def reason(self):
        """
        :return: `None` while the scope is active, then `'revoked'` or `'deadline'`.
        """
        return self._reason

    def remaining(self):
        """
        :return: seconds left before the deadline (never negative), or `None` if the scope has no deadline.
        """
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self.loop.time())

    def revoke(self, reason=REVOKED):
        """
        Revoke the scope. Only the first call has any effect; later calls, including a deadline firing after an
        explicit revoke, are no-ops.

        :return: `True` if this call revoked the scope.
        """
        if self._reason is not None:
            return False
        self._reason = reason
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._running):
            task.cancel()
        self.done.close()
        logger.debug('%r revoked: %s', self, reason)
        return True

    def check(self):
        """
        Raise :class:`aiocep.errors.CancellationError` if the scope is revoked.
        """
        if self._reason is not None:
            raise CancellationError('scope ' + self._reason)

    async def run(self, aw):
        """
        **Coroutine**. Run `aw` bound to the scope.

        If the scope is already revoked `aw` is never started. If the scope is revoked while `aw` runs, `aw` is
        cancelled at its next suspension point. In both cases :class:`aiocep.errors.CancellationError` is raised.
        Cancelling the caller cancels `aw` as well and propagates as usual.

        :return: the result of `aw`.
        """
        if self._reason is not None:
            if asyncio.iscoroutine(aw):
                aw.close()
            self.check()

        task = asyncio.ensure_future(aw, loop=self.loop)
        self._running.add(task)
        try:
            await asyncio.wait((task,))
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            self._running.discard(task)

        if task.cancelled():
            raise CancellationError('scope ' + (self._reason or REVOKED))
        return task.result()

    def go(self, coro):
        """
        Spawn `coro` as a task that lives alongside the scope. The scope keeps the task referenced until it
        finishes, so fetchers whose results nobody reads any more still wind down on their own.

        :return: the task
        """
        task = self.loop.create_task(coro)
        self._workers.add(task)
        task.add_done_callback(self._workers.discard)
        return task

    @property
    def workers(self):
        """
        :return: the tasks spawned through :meth:`go` that have not finished yet.
        """
        return frozenset(self._workers)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.revoke()
