class MultiRegException(Exception):
    """ general exception """
    pass


class CollisionAbortError(MultiRegException):
    """ a value equal to an already registered one was added under the same key while using the ABORT policy """

    def __init__(self, key, value) -> None:
        super().__init__(f'aborted per policy: {value!r} is already registered under key {key!r}')
        self.key = key
        self.value = value


class KeyNotRegisteredError(MultiRegException, KeyError):
    """ trying to access the values of a key which has nothing registered under it """
    pass
