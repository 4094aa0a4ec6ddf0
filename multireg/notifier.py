import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from multireg.policy import CollisionPolicy
from multireg.synchronized import SynchronizedRegistry

logger = logging.getLogger(__name__)

E = TypeVar('E')
Callback = Callable[..., Any]


class EventNotifier(Generic[E]):
    """ Notifies registered callbacks when events occur """

    def __init__(self) -> None:
        self._callbacks: SynchronizedRegistry[E, Callback] = SynchronizedRegistry(policy=CollisionPolicy.DISCARD)

    def register(self, event: E, callback: Callback) -> None:
        """ Register a callback for an event. Registering it again is a no-op. """
        if not callable(callback):
            raise TypeError('callback must be callable')
        self._callbacks.register(event, callback)

    def unregister(self, event: E, callback: Callback) -> bool:
        """ Unregister a callback; returns True if it was present """
        return self._callbacks.deregister(event, callback)

    def register_once(self, event: E, callback: Callback) -> None:
        """ Register a callback that is dropped from the event the first time it fires """

        def _wrapper(*args: Any, **kwargs: Any) -> None:
            # a concurrent notify may have already claimed it
            if self.unregister(event, _wrapper):
                callback(*args, **kwargs)

        self.register(event, _wrapper)

    def clear(self, event: Optional[E] = None) -> None:
        """ Remove all callbacks (optionally only for one event) """
        if event is None:
            self._callbacks.clear()
        else:
            self._callbacks.deregister_key(event)

    def listeners(self, event: E) -> tuple[Callback, ...]:
        """ Return current listeners for an event (snapshot) """
        return tuple(self._callbacks.get(event) or ())

    def has_listeners(self, event: E) -> bool:
        return event in self._callbacks

    def notify(self, event: E, *args: Any, **kwargs: Any) -> None:
        """ Call a snapshot of the event's listeners in the order they were first registered """
        for callback in self.listeners(event):
            try:
                callback(*args, **kwargs)
            except Exception:
                logger.error(
                    'Error in callback %s for event %r',
                    getattr(callback, '__name__', repr(callback)),
                    event,
                    exc_info=True,
                )
