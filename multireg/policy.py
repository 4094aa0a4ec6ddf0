from enum import Enum, auto
from typing import Iterable, MutableSequence, TypeVar, Union

T = TypeVar('T')


class AddOutcome(Enum):
    """ Result of offering a single value to a bucket. """
    ADDED = auto()
    DISCARDED = auto()
    COLLIDED = auto()

    def __bool__(self) -> bool:
        return self is AddOutcome.ADDED


class CollisionPolicy(Enum):
    """
    How a bucket reacts to a value equal to one it already holds.

    DUPLICATE appends it anyway, DISCARD silently ignores it and ABORT reports a collision
    without touching the bucket.
    """
    DUPLICATE = 'duplicate'
    DISCARD = 'discard'
    ABORT = 'abort'

    @classmethod
    def parse(cls, policy: Union[str, 'CollisionPolicy']) -> 'CollisionPolicy':
        """ Resolve a policy from its (case-insensitive) name """
        if isinstance(policy, cls):
            return policy
        try:
            return cls(str(policy).strip().lower())
        except ValueError:
            names = ', '.join(p.value for p in cls)
            raise ValueError(f'unknown collision policy: {policy!r} (expected one of: {names})') from None

    def handle_add(self, bucket: MutableSequence[T], value: T) -> AddOutcome:
        """ Append value to bucket unless the policy says otherwise """
        if self is CollisionPolicy.DUPLICATE or value not in bucket:
            bucket.append(value)
            return AddOutcome.ADDED
        if self is CollisionPolicy.DISCARD:
            return AddOutcome.DISCARDED
        return AddOutcome.COLLIDED

    def handle_add_all(self, bucket: MutableSequence[T], values: Iterable[T]) -> list[tuple[T, AddOutcome]]:
        """
        Offer each value in order, checking it against the bucket as it stands at that moment.

        Stops right after the first collision, leaving earlier additions in place.
        """
        offered = []
        for value in values:
            outcome = self.handle_add(bucket, value)
            offered.append((value, outcome))
            if outcome is AddOutcome.COLLIDED:
                break
        return offered


DEFAULT_POLICY = CollisionPolicy.DUPLICATE
