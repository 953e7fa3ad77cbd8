import typing

from wintergreen.exceptions import UndefinedSave

T = typing.TypeVar("T")


class SyncPersistence(typing.Protocol[T]):
    def persist(self, record: T) -> T: ...


class AsyncPersistence(typing.Protocol[T]):
    async def persist(self, record: T) -> T: ...


class RaisingSyncPersistence(SyncPersistence[T]):
    def persist(self, record: T) -> T:
        raise UndefinedSave()


class RaisingAsyncPersistence(AsyncPersistence[T]):
    async def persist(self, record: T) -> T:
        raise UndefinedSave()
