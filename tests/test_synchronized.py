from threading import Thread

import pytest

from multireg.exceptions import CollisionAbortError
from multireg.policy import CollisionPolicy
from multireg.registry import Registry
from multireg.synchronized import SynchronizedRegistry


def test_behaves_like_registry():
    registry = SynchronizedRegistry(policy=CollisionPolicy.ABORT)
    assert isinstance(registry, Registry)
    registry.register_all('k', [1, 2, 3])
    with pytest.raises(CollisionAbortError):
        registry.register('k', 2)
    assert registry.deregister_all('k', [2, 3])
    assert registry.get('k') == [1]
    assert 'k' in registry
    assert isinstance(registry.clone(), SynchronizedRegistry)


def test_concurrent_registration():
    registry = SynchronizedRegistry(policy=CollisionPolicy.DISCARD)

    def register_range(offset):
        for i in range(1000):
            registry.register(i % 10, offset + i)

    threads = [Thread(target=register_range, args=(n * 1000,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert registry.size() == 4000
    assert all(registry.size(key) == 400 for key in range(10))


def test_concurrent_register_and_deregister():
    registry = SynchronizedRegistry()

    def churn(key):
        for i in range(500):
            registry.register(key, i)
            assert registry.deregister(key, i)

    threads = [Thread(target=churn, args=(key,)) for key in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert registry.is_empty()
    assert registry.keys() == []
