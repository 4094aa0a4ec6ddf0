import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterable, Iterator, MutableMapping, MutableSequence, \
    Optional, TypeVar, Union

from multireg.exceptions import CollisionAbortError, KeyNotRegisteredError
from multireg.policy import DEFAULT_POLICY, AddOutcome, CollisionPolicy

if TYPE_CHECKING:
    from multireg.notifier import EventNotifier

logger = logging.getLogger(__name__)

K = TypeVar('K')
V = TypeVar('V')

_ALL = object()


class RegistryEvent(Enum):
    """ Event identifiers for registry operations. """
    REGISTERED = auto()
    DEREGISTERED = auto()
    CLEARED = auto()


class _Bucket(Generic[V]):
    """ Ordered values of a single key. Additions go through the owning registry's policy. """

    __slots__ = ('_values', 'policy')

    def __init__(self, policy: CollisionPolicy, values: MutableSequence[V]) -> None:
        self._values = values
        self.policy = policy

    def add(self, value: V) -> AddOutcome:
        return self.policy.handle_add(self._values, value)

    def add_all(self, values: Iterable[V]) -> list[tuple[V, AddOutcome]]:
        return self.policy.handle_add_all(self._values, values)

    def remove(self, value: V) -> bool:
        """ Remove the first equal occurrence of value. Returns True if removed. """
        try:
            self._values.remove(value)
        except ValueError:
            return False
        return True

    def snapshot(self) -> list[V]:
        return list(self._values)

    def copy(self, values: MutableSequence[V]) -> '_Bucket[V]':
        values.extend(self._values)
        return _Bucket(self.policy, values)

    def __contains__(self, value: Any) -> bool:
        return value in self._values

    def __iter__(self) -> Iterator[V]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


class Registry(Generic[K, V]):
    """
    1:N registry (key -> ordered values) with a collision policy.

    The policy is fixed at construction and decides what happens when a value equal to one already
    registered under the same key is registered again. A key exists only while it has at least one value.

    Not thread-safe, see SynchronizedRegistry.
    """

    def __init__(self, mapping: Optional[MutableMapping[K, Any]] = None,
                 policy: Union[str, CollisionPolicy] = DEFAULT_POLICY,
                 notifier: Optional['EventNotifier'] = None,
                 bucket_factory: Callable[[], MutableSequence[V]] = list) -> None:
        """
        :param mapping: backing mapping, a new dict if omitted. Entries already in it are re-registered through
            the policy; if the policy refuses one of them the mapping is left untouched.
        :param policy: collision policy or its name
        :param notifier: receives a RegistryEvent for every value added or removed
        :param bucket_factory: creates the empty sequence backing each new bucket
        """
        self._data: MutableMapping[K, _Bucket[V]] = {} if mapping is None else mapping
        self._policy = CollisionPolicy.parse(policy)
        self._bucket_factory = bucket_factory
        self.notifier = notifier

        if self._data:
            self._adopt()

    @property
    def policy(self) -> CollisionPolicy:
        return self._policy

    def register(self, key: K, value: V) -> bool:
        """
        Register value under key.

        :return: True if the value was added, False if the DISCARD policy ignored it
        :raises CollisionAbortError: the ABORT policy refused the value
        """
        return self._raise_on_collision(key, self._offer(key, (value,)))

    def register_all(self, key: K, values: Iterable[V]) -> bool:
        """
        Register values under key in iteration order, each one checked against the bucket as it stands.

        :return: True if at least one value was added
        :raises CollisionAbortError: the ABORT policy refused a value. Values before it stay registered.
        """
        return self._raise_on_collision(key, self._offer(key, values))

    def try_register(self, key: K, value: V) -> AddOutcome:
        """ Like register(), but report a collision as an outcome instead of raising """
        (_, outcome), = self._offer(key, (value,))
        return outcome

    def try_register_all(self, key: K, values: Iterable[V]) -> list[AddOutcome]:
        """ Like register_all(), but report a collision as the last outcome instead of raising """
        return [outcome for _, outcome in self._offer(key, values)]

    def deregister_key(self, key: K) -> list[V]:
        """ Remove key with all of its values. Returns the removed values (empty if key is missing). """
        bucket = self._data.pop(key, None)
        if bucket is None:
            return []
        logger.debug('removed bucket of key %r', key)
        values = bucket.snapshot()
        for value in values:
            self._notify(RegistryEvent.DEREGISTERED, key, value)
        return values

    def deregister(self, key: K, value: V) -> bool:
        """ Remove the first occurrence of value under key. Returns True if removed. """
        bucket = self._data.get(key)
        if bucket is None or not bucket.remove(value):
            return False
        self._prune(key, bucket)
        self._notify(RegistryEvent.DEREGISTERED, key, value)
        return True

    def deregister_value(self, value: V) -> bool:
        """ Remove one occurrence of value from every key. Returns True if any key held it. """
        removed = False
        for key in list(self._data):
            removed |= self.deregister(key, value)
        return removed

    def deregister_all(self, key: K, values: Iterable[V]) -> bool:
        """ Remove each of values from key, one occurrence each. Returns True if anything was removed. """
        removed = False
        for value in values:
            removed |= self.deregister(key, value)
        return removed

    def deregister_if(self, predicate: Callable[[V], bool]) -> bool:
        """ Remove every value matching predicate, from all keys. Returns True if anything was removed. """
        removed = False
        for key in list(self._data):
            removed |= self.deregister_key_if(key, predicate)
        return removed

    def deregister_key_if(self, key: K, predicate: Callable[[V], bool]) -> bool:
        """ Remove every value of key matching predicate. A missing key removes nothing. """
        bucket = self._data.get(key)
        if bucket is None:
            return False
        return self.deregister_all(key, [value for value in bucket.snapshot() if predicate(value)])

    def clear(self) -> None:
        """ Remove all entries. """
        self._data.clear()
        self._notify(RegistryEvent.CLEARED)

    def get(self, key: K) -> Optional[list[V]]:
        """ Return a copy of the values under key, or None if missing. """
        bucket = self._data.get(key)
        return None if bucket is None else bucket.snapshot()

    def contains(self, key: K, value: V) -> bool:
        """ Return True if value is registered under key. """
        bucket = self._data.get(key)
        return bucket is not None and value in bucket

    def keys(self) -> list[K]:
        """ Snapshot of all registered keys. """
        return list(self._data)

    def items(self) -> list[tuple[K, list[V]]]:
        """ Snapshot of all (key, values) pairs. """
        return [(key, bucket.snapshot()) for key, bucket in self._data.items()]

    def size(self, key: Any = _ALL) -> int:
        """ Number of registered values, in total or under a single key. """
        if key is _ALL:
            return sum(len(bucket) for bucket in self._data.values())
        bucket = self._data.get(key)
        return 0 if bucket is None else len(bucket)

    def is_empty(self, key: Any = _ALL) -> bool:
        return self.size(key) == 0

    def clone(self) -> 'Registry[K, V]':
        """ Independent copy with the same policy, mapping type and bucket order. Does not share the notifier. """
        copied = self.__class__(type(self._data)(), policy=self._policy, bucket_factory=self._bucket_factory)
        for key, bucket in self._data.items():
            copied._data[key] = bucket.copy(self._bucket_factory())
        return copied

    def _offer(self, key: K, values: Iterable[V]) -> list[tuple[V, AddOutcome]]:
        bucket = self._data.get(key)
        if bucket is None:
            bucket = self._data[key] = _Bucket(self._policy, self._bucket_factory())
            logger.debug('created bucket for key %r', key)
        offered = []
        try:
            for value in values:
                outcome = bucket.add(value)
                offered.append((value, outcome))
                if outcome is AddOutcome.ADDED:
                    self._notify(RegistryEvent.REGISTERED, key, value)
                elif outcome is AddOutcome.COLLIDED:
                    break
        finally:
            # nothing may have been added to a bucket created just now
            self._prune(key, bucket)
        return offered

    def _adopt(self) -> None:
        adopted = {}
        for key, values in self._data.items():
            bucket = _Bucket(self._policy, self._bucket_factory())
            self._raise_on_collision(key, bucket.add_all(values))
            if bucket:
                adopted[key] = bucket
        self._data.clear()
        self._data.update(adopted)
        for key, bucket in adopted.items():
            for value in bucket:
                self._notify(RegistryEvent.REGISTERED, key, value)

    @staticmethod
    def _raise_on_collision(key: K, offered: list[tuple[V, AddOutcome]]) -> bool:
        added = False
        for value, outcome in offered:
            if outcome is AddOutcome.COLLIDED:
                raise CollisionAbortError(key, value)
            added |= bool(outcome)
        return added

    def _prune(self, key: K, bucket: _Bucket[V]) -> None:
        if not bucket:
            self._data.pop(key, None)
            logger.debug('removed empty bucket of key %r', key)

    def _notify(self, event: RegistryEvent, *args) -> None:
        if self.notifier is not None:
            self.notifier.notify(event, *args)

    def __getitem__(self, key: K) -> list[V]:
        values = self.get(key)
        if values is None:
            raise KeyNotRegisteredError(key)
        return values

    def __contains__(self, key: K) -> bool:
        """ Return True if the key has values registered. """
        return key in self._data

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(policy={self._policy.name}, items={self.items()!r})'

    def __str__(self) -> str:
        items = self.items()
        total = sum(len(vs) for _, vs in items)
        lines = [f'{self.__class__.__name__} [{self._policy.name}] ({len(items)} keys, {total} values):']
        lines += [f'  {k!r}: {vs!r}' for k, vs in items]
        return '\n'.join(lines)
