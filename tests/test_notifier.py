import logging

import pytest

from multireg.notifier import EventNotifier


@pytest.fixture
def events():
    return EventNotifier()


def test_notify_in_registration_order(events):
    calls = []
    events.register('e', lambda value: calls.append(('first', value)))
    events.register('e', lambda value: calls.append(('second', value)))
    events.notify('e', 1)
    assert calls == [('first', 1), ('second', 1)]


def test_register_same_callback_twice(events):
    calls = []
    events.register('e', calls.append)
    events.register('e', calls.append)
    assert len(events.listeners('e')) == 1
    events.notify('e', 1)
    assert calls == [1]


def test_register_rejects_non_callable(events):
    with pytest.raises(TypeError):
        events.register('e', 'not callable')


def test_unregister(events):
    calls = []
    events.register('e', calls.append)
    assert events.unregister('e', calls.append)
    assert not events.unregister('e', calls.append)
    assert not events.has_listeners('e')
    events.notify('e', 1)
    assert calls == []


def test_register_once(events):
    calls = []
    events.register_once('e', calls.append)
    events.notify('e', 1)
    events.notify('e', 2)
    assert calls == [1]
    assert not events.has_listeners('e')


def test_clear(events):
    events.register('a', print)
    events.register('b', print)
    events.clear('a')
    assert not events.has_listeners('a')
    assert events.has_listeners('b')
    events.clear()
    assert not events.has_listeners('b')


def test_failing_callback_is_logged(events, caplog):
    calls = []

    def explode(value):
        raise RuntimeError('boom')

    events.register('e', explode)
    events.register('e', calls.append)
    with caplog.at_level(logging.ERROR, logger='multireg.notifier'):
        events.notify('e', 1)
    assert calls == [1]
    assert 'explode' in caplog.text


def test_register_once_removed_even_if_callback_raises(events, caplog):
    def explode():
        raise RuntimeError('boom')

    events.register_once('e', explode)
    with caplog.at_level(logging.ERROR, logger='multireg.notifier'):
        events.notify('e')
    assert not events.has_listeners('e')
