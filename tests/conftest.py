import pytest

from multireg.notifier import EventNotifier
from multireg.policy import CollisionPolicy
from multireg.registry import Registry, RegistryEvent


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def discard_registry():
    return Registry(policy=CollisionPolicy.DISCARD)


@pytest.fixture
def abort_registry():
    return Registry(policy=CollisionPolicy.ABORT)


@pytest.fixture
def recorded():
    return []


@pytest.fixture
def notifier(recorded):
    """ Notifier appending every registry event to `recorded` as (event, *args) """
    notifier = EventNotifier()
    for event in RegistryEvent:
        notifier.register(event, lambda *args, event=event: recorded.append((event, *args)))
    return notifier
