import click

from .race import Success, Timeout
from .records import encode

__all__ = ('render',)


def render(outcome, out=None, err=None):
    """
    Write a race outcome: the winning record as one line on `out` (stdout by default), or a single timeout
    diagnostic on `err` (stderr by default).

    :return: the number of provider payloads written, `1` or `0`.
    :raises aiocep.errors.EncodeError: if the winning record cannot be serialized.
    """
    if isinstance(outcome, Success):
        payload = encode(outcome.result)
        click.echo("response received from the '%s' api. Response data: %s" % (outcome.provider, payload), file=out)
        return 1
    if isinstance(outcome, Timeout):
        click.echo('no cep api responded within %gs' % outcome.seconds, file=err, err=True)
        return 0
    raise TypeError('not a race outcome: %r' % (outcome,))
