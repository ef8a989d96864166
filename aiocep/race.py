import asyncio
import collections
import logging

from .chan import Chan, select
from .config import SECONDS
from .scope import Scope

__all__ = ('Success', 'Timeout', 'race')

logger = logging.getLogger(__name__)

Success = collections.namedtuple('Success', 'provider result')
Success.__doc__ = 'The race was won by `provider`, which returned `result`.'

Timeout = collections.namedtuple('Timeout', 'seconds')
Timeout.__doc__ = 'No provider delivered a result within `seconds`.'


async def race(entries, seconds, *, loop=None):
    """
    **Coroutine**. Look up every `(provider, identifier)` entry concurrently and return the first result delivered.

    All lookups share one :class:`aiocep.scope.Scope` expiring after `seconds`. Each lookup gets its own
    single-slot channel that receives its record only on success, and the race waits on a :func:`aiocep.chan.select`
    over those channels plus the scope's `done` channel. Whichever completes first decides the outcome; the scope is
    then revoked, so lookups still in flight are cancelled and any late result is left unread in its slot. The race
    returns without waiting for them.

    :param entries: `(provider, identifier)` pairs, at least one, with distinct provider names.
    :param seconds: the shared deadline, finite and not negative. Zero resolves to :class:`Timeout` without issuing
                    any request.
    :param loop: asyncio loop to run on
    :return: :class:`Success` or :class:`Timeout`
    """
    entries = list(entries)
    if not entries:
        raise ValueError('a race needs at least one provider')
    names = [provider.name for provider, _ in entries]
    if len(set(names)) != len(names):
        raise ValueError('provider names must be distinct: ' + ', '.join(names))
    seconds = SECONDS.validate_python(seconds)

    loop = loop or asyncio.get_running_loop()
    scope = Scope(seconds, loop=loop)
    slots = {}
    for provider, identifier in entries:
        slot = Chan('p', loop=loop, name=provider.name)
        slots[slot] = provider.name
        scope.go(provider.fetch_into(identifier, scope, slot))

    logger.info('racing %s with a %ss deadline', ', '.join(names), seconds)
    try:
        result, chan = await select(*slots, scope.done, loop=loop)
    finally:
        scope.revoke()

    if chan is scope.done:
        logger.info('no provider answered within %ss', seconds)
        return Timeout(seconds)

    logger.info('%s won the race', slots[chan])
    return Success(slots[chan], result)
