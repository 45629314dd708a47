# pizza_api/data/store.py
"""
Flat-file JSON document store.

One directory per collection, one ``<key>.json`` file per record. Writes go
to a temporary file in the same directory first, so a reader never sees a
half-written record: ``create`` publishes it with a hard link (which fails
if the key is taken) and ``update`` with an atomic replace.

There is no locking. Two writers on the same key race and the last one wins.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List

from pizza_api.domain.errors import RecordExistsError, RecordNotFoundError, StoreError
from pizza_api.utils.logging import get_logger

logger = get_logger(__name__)

SUFFIX = ".json"


class DocumentStore:
    def __init__(self, base_dir: str | os.PathLike):
        self.base_dir = Path(base_dir)

    def ensure_collections(self, collections: Iterable[str]) -> None:
        for collection in collections:
            try:
                self._collection_dir(collection).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise self._failure("mkdir", collection, "", e)

    #commands
    def create(self, collection: str, key: str, value: Any) -> None:
        path = self._path(collection, key)
        tmp = self._write_temp(path, collection, key, value)
        try:
            os.link(tmp, path)
        except FileExistsError:
            raise RecordExistsError(collection, key)
        except OSError as e:
            raise self._failure("create", collection, key, e)
        finally:
            _discard(tmp)
        logger.debug(f"Created {collection}/{key}")

    def update(self, collection: str, key: str, value: Any) -> None:
        path = self._record_path(collection, key)
        if not path.is_file():
            raise RecordNotFoundError(collection, key)
        tmp = self._write_temp(path, collection, key, value)
        try:
            os.replace(tmp, path)
        except OSError as e:
            _discard(tmp)
            raise self._failure("update", collection, key, e)
        logger.debug(f"Updated {collection}/{key}")

    def delete(self, collection: str, key: str) -> None:
        path = self._record_path(collection, key)
        try:
            os.remove(path)
        except FileNotFoundError:
            raise RecordNotFoundError(collection, key)
        except OSError as e:
            raise self._failure("delete", collection, key, e)
        logger.debug(f"Deleted {collection}/{key}")

    #queries
    def read(self, collection: str, key: str) -> Any:
        path = self._record_path(collection, key)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            raise RecordNotFoundError(collection, key)
        except (OSError, ValueError) as e:
            raise self._failure("read", collection, key, e)

    def exists(self, collection: str, key: str) -> bool:
        if not _is_safe(key):
            return False
        return self._path(collection, key).is_file()

    def list_keys(self, collection: str) -> List[str]:
        directory = self._collection_dir(collection)
        if not directory.is_dir():
            return []
        return sorted(p.name[: -len(SUFFIX)] for p in directory.iterdir() if p.name.endswith(SUFFIX))

    #internals
    def _collection_dir(self, collection: str) -> Path:
        _check_name(collection)
        return self.base_dir / collection

    def _path(self, collection: str, key: str) -> Path:
        _check_name(key)
        return self._collection_dir(collection) / f"{key}{SUFFIX}"

    def _record_path(self, collection: str, key: str) -> Path:
        # no file can exist under an unsafe key, so lookups by one simply miss
        if not _is_safe(key):
            raise RecordNotFoundError(collection, key)
        return self._path(collection, key)

    def _write_temp(self, path: Path, collection: str, key: str, value: Any) -> str:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise self._failure("serialize", collection, key, e)

        tmp = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as e:
            if tmp:
                _discard(tmp)
            raise self._failure("write", collection, key, e)
        return tmp

    @staticmethod
    def _failure(op: str, collection: str, key: str, exc: Exception) -> StoreError:
        detail = f"{op} {collection}/{key} failed: {exc}"
        logger.error(detail)
        return StoreError(detail)


def _is_safe(name: str) -> bool:
    return (
        isinstance(name, str)
        and bool(name)
        and name not in (".", "..")
        and "/" not in name
        and "\\" not in name
        and "\x00" not in name
    )


def _check_name(name: str) -> None:
    if not _is_safe(name):
        logger.error(f"Refusing unsafe record name {name!r}")
        raise StoreError(f"unsafe record name {name!r}")


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
