# storefront/domain/exceptions.py


class StorefrontError(Exception):
    """Bazowy wyjatek warstwy store'ow."""


class ReentrantMutationError(StorefrontError, RuntimeError):
    """Subskrybent probowal zmodyfikowac store w trakcie jego wlasnego broadcastu."""

    def __init__(self, store_name: str):
        self.store_name = store_name
        super().__init__(
            f"{store_name} cannot be mutated from inside its own notification"
        )


class StoreDisposedError(StorefrontError, RuntimeError):
    """Operacja na store, ktory zostal juz zamkniety (dispose)."""

    def __init__(self, store_name: str):
        self.store_name = store_name
        super().__init__(f"{store_name} has been disposed")
