import functools
import threading
from typing import Callable, TypeVar

from multireg.registry import Registry

K = TypeVar('K')
V = TypeVar('V')
F = TypeVar('F', bound=Callable)


def _synchronized(method: F) -> F:
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class SynchronizedRegistry(Registry[K, V]):
    """
    Thread-safe 1:N registry.

    Every public operation, including the ones scanning all keys, runs under a single re-entrant lock.
    Notifier callbacks are invoked while the lock is held, so they may call back into the registry from
    the same thread but block other threads until they return.
    """

    def __init__(self, *args, **kwargs) -> None:
        self._lock = threading.RLock()
        super().__init__(*args, **kwargs)

    register = _synchronized(Registry.register)
    register_all = _synchronized(Registry.register_all)
    try_register = _synchronized(Registry.try_register)
    try_register_all = _synchronized(Registry.try_register_all)
    deregister_key = _synchronized(Registry.deregister_key)
    deregister = _synchronized(Registry.deregister)
    deregister_value = _synchronized(Registry.deregister_value)
    deregister_all = _synchronized(Registry.deregister_all)
    deregister_if = _synchronized(Registry.deregister_if)
    deregister_key_if = _synchronized(Registry.deregister_key_if)
    clear = _synchronized(Registry.clear)
    get = _synchronized(Registry.get)
    contains = _synchronized(Registry.contains)
    keys = _synchronized(Registry.keys)
    items = _synchronized(Registry.items)
    size = _synchronized(Registry.size)
    clone = _synchronized(Registry.clone)
    __contains__ = _synchronized(Registry.__contains__)
