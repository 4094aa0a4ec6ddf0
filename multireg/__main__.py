import logging

import click
import coloredlogs

from multireg.exceptions import CollisionAbortError
from multireg.notifier import EventNotifier
from multireg.policy import DEFAULT_POLICY, CollisionPolicy
from multireg.registry import Registry, RegistryEvent

logger = logging.getLogger('multireg')


def parse_entries(ctx: click.Context, param: click.Parameter, entries: tuple[str, ...]) -> list[tuple[str, str]]:
    """ Split KEY=VALUE arguments into (key, value) pairs """
    parsed = []
    for entry in entries:
        key, sep, value = entry.partition('=')
        if not sep or not key:
            raise click.BadParameter(f'expected KEY=VALUE, got: {entry!r}', ctx=ctx, param=param)
        parsed.append((key, value))
    return parsed


def create_notifier() -> EventNotifier[RegistryEvent]:
    notifier = EventNotifier()
    notifier.register(RegistryEvent.REGISTERED, lambda key, value: logger.info(f'registered {value!r} under {key!r}'))
    notifier.register(RegistryEvent.DEREGISTERED,
                      lambda key, value: logger.info(f'deregistered {value!r} from {key!r}'))
    return notifier


@click.command()
@click.argument('entries', nargs=-1, callback=parse_entries)
@click.option('-p', '--policy', type=click.Choice([p.value for p in CollisionPolicy], case_sensitive=False),
              default=DEFAULT_POLICY.value, show_default=True,
              help='how to handle a value already registered under the same key')
@click.option('-d', '--deregister', 'removals', multiple=True, callback=parse_entries, metavar='KEY=VALUE',
              help='value to deregister once all entries are registered')
@click.option('-k', '--drop-key', 'dropped_keys', multiple=True, metavar='KEY', help='key to deregister entirely')
@click.option('-v', '--verbose', is_flag=True, help='show debug logs')
def cli(entries: list[tuple[str, str]], policy: str, removals: list[tuple[str, str]], dropped_keys: tuple[str, ...],
        verbose: bool) -> None:
    """
    Register KEY=VALUE ENTRIES in order and print the resulting registry.
    """
    coloredlogs.install(level=logging.DEBUG if verbose else logging.INFO)

    registry: Registry[str, str] = Registry(policy=policy, notifier=create_notifier())
    for key, value in entries:
        try:
            if not registry.register(key, value):
                logger.warning(f'discarded {value!r}: already registered under {key!r}')
        except CollisionAbortError as e:
            raise click.ClickException(str(e)) from e

    for key, value in removals:
        if not registry.deregister(key, value):
            logger.warning(f'{value!r} is not registered under {key!r}')

    for key in dropped_keys:
        if not registry.deregister_key(key):
            logger.warning(f'key {key!r} is not registered')

    click.echo(str(registry))


if __name__ == '__main__':
    cli()
