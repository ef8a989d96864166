"""Command line entry point: race the postal code providers and print whichever answers first."""

import asyncio
import logging
import sys

import click
import pydantic

from . import config as defaults
from .config import RaceConfig
from .errors import EncodeError
from .providers import ApiCep, ViaCep
from .race import race
from .sink import render

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


async def lookup(config, client_factory=None):
    """
    **Coroutine**. Run one race as described by `config`.

    :return: the race outcome
    """
    return await race(config.providers(client_factory), config.timeout)


def load_config(options):
    try:
        return RaceConfig(**options)
    except pydantic.ValidationError as exc:
        problems = ['--' + '-'.join(str(part) for part in e['loc']).replace('_', '-') + ': ' + e['msg']
                    for e in exc.errors()]
        raise click.UsageError('; '.join(problems)) from exc


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--apicep-cep', default=defaults.DEFAULT_APICEP_CEP, show_default=True, envvar='AIOCEP_APICEP_CEP',
              help='Postal code as sent to ApiCEP.')
@click.option('--viacep-cep', default=defaults.DEFAULT_VIACEP_CEP, show_default=True, envvar='AIOCEP_VIACEP_CEP',
              help='Postal code as sent to ViaCEP.')
@click.option('--timeout', type=float, default=defaults.DEFAULT_TIMEOUT, show_default=True,
              envvar='AIOCEP_TIMEOUT', help='Seconds the whole race may take.')
@click.option('--apicep-url', default=ApiCep.default_url, show_default=True, envvar='AIOCEP_APICEP_URL',
              help='ApiCEP base URL.')
@click.option('--viacep-url', default=ViaCep.default_url, show_default=True, envvar='AIOCEP_VIACEP_URL',
              help='ViaCEP base URL.')
@click.option('--http-timeout', type=float, default=None, envvar='AIOCEP_HTTP_TIMEOUT',
              help='Seconds a single request may take. Defaults to --timeout.')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=defaults.DEFAULT_LOG_LEVEL, show_default=True, envvar='AIOCEP_LOG_LEVEL')
@click.pass_context
def main(ctx, **options):
    config = load_config(options)
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)

    client_factory = (ctx.obj or {}).get('client_factory')
    outcome = asyncio.run(lookup(config, client_factory))

    try:
        render(outcome)
    except EncodeError as exc:
        logger.critical('unable to serialize the cep data into json: %s', exc)
        ctx.exit(1)
