import asyncio

import pytest

from aiocep import *
from aiocep.errors import CancellationError


@pytest.mark.asyncio
async def test_revoke_closes_done():
    scope = Scope()
    assert not scope.revoked
    assert scope.reason is None
    assert scope.deadline is None
    assert scope.remaining() is None
    assert not scope.done.closed

    assert scope.revoke()
    assert scope.revoked
    assert scope.reason == REVOKED
    assert scope.done.closed
    assert await scope.done.get() is None


@pytest.mark.asyncio
async def test_revoke_is_idempotent():
    scope = Scope(10)
    assert scope.revoke()
    assert not scope.revoke()
    assert not scope.revoke(DEADLINE)
    assert scope.reason == REVOKED


@pytest.mark.asyncio
async def test_deadline_revokes():
    scope = Scope(0.02)
    assert 0 < scope.remaining() <= 0.02
    assert (None, scope.done) == await select(scope.done)
    assert scope.reason == DEADLINE
    assert scope.remaining() < 0.01
    # a revoke racing the expired deadline is a no-op
    assert not scope.revoke()


@pytest.mark.asyncio
async def test_revoke_before_deadline_cancels_timer():
    scope = Scope(0.02)
    scope.revoke()
    await asyncio.sleep(0.04)
    assert scope.reason == REVOKED


@pytest.mark.asyncio
async def test_expired_scope():
    for seconds in (0, -1):
        scope = Scope(seconds)
        assert scope.revoked
        assert scope.reason == DEADLINE
        assert scope.done.closed
        with pytest.raises(CancellationError):
            scope.check()


@pytest.mark.asyncio
async def test_run_returns_result():
    async def work():
        await nop()
        return 42

    scope = Scope(1)
    assert 42 == await scope.run(work())
    scope.check()


@pytest.mark.asyncio
async def test_run_propagates_errors():
    async def work():
        raise KeyError('boom')

    with pytest.raises(KeyError):
        await Scope().run(work())


@pytest.mark.asyncio
async def test_run_on_revoked_scope_never_starts():
    started = False

    async def work():
        nonlocal started
        started = True

    scope = Scope()
    scope.revoke()
    with pytest.raises(CancellationError) as exc_info:
        await scope.run(work())
    assert not started
    assert 'revoked' in str(exc_info.value)


@pytest.mark.asyncio
async def test_revoke_aborts_running_work():
    scope = Scope()
    finished = False

    async def work():
        nonlocal finished
        await asyncio.sleep(10)
        finished = True

    runner = go(scope.run(work()))
    await nop()
    scope.revoke()
    with pytest.raises(CancellationError):
        await asyncio.wait_for(runner, 1)
    assert not finished


@pytest.mark.asyncio
async def test_deadline_aborts_running_work():
    scope = Scope(0.01)
    with pytest.raises(CancellationError) as exc_info:
        await scope.run(asyncio.sleep(10))
    assert 'deadline' in str(exc_info.value)


@pytest.mark.asyncio
async def test_cancelling_caller_cancels_work():
    scope = Scope()
    inner_cancelled = asyncio.get_running_loop().create_future()

    async def work():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            inner_cancelled.set_result(True)
            raise

    runner = go(scope.run(work()))
    await asyncio.sleep(0.01)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner
    assert await asyncio.wait_for(inner_cancelled, 1)
    assert not scope.revoked


@pytest.mark.asyncio
async def test_go_tracks_workers():
    scope = Scope()
    gate = Chan()

    async def work():
        return await gate.get()

    task = scope.go(work())
    assert task in scope.workers
    gate.close()
    assert await task is None
    await nop()
    assert not scope.workers


@pytest.mark.asyncio
async def test_context_manager_revokes():
    async with Scope() as scope:
        assert not scope.revoked
    assert scope.revoked
