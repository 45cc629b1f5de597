# cropmarket/store.py
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Optional

from flask import current_app
from flask_pymongo import PyMongo
from pymongo.errors import PyMongoError

from cropmarket.errors import Conflict, StorageError

log = logging.getLogger(__name__)

USERS = "users"
CROPS = "crops"

mongo = PyMongo()


class RecordStore:
    """
    Whole-collection persistence: callers read everything, mutate in memory
    and write everything back. ``append`` does that cycle under the
    collection lock so concurrent appends never lose a record.
    """

    def __init__(self):
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def lock_for(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = self._locks[collection] = threading.RLock()
            return lock

    def load_all(self, collection: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def save_all(self, collection: str, records: List[Dict[str, Any]]) -> None:
        raise NotImplementedError

    def append(self, collection: str, record: Dict[str, Any], unique_key: Optional[str] = None) -> Dict[str, Any]:
        with self.lock_for(collection):
            records = self.load_all(collection)
            if unique_key is not None:
                value = record.get(unique_key)
                if any(r.get(unique_key) == value for r in records):
                    raise Conflict(f"{unique_key} already exists")
            records.append(record)
            self.save_all(collection, records)
        return record

    def describe(self) -> str:
        return type(self).__name__


class JsonFileRecordStore(RecordStore):
    """One ``<collection>.json`` file per collection, replaced atomically."""

    def __init__(self, data_dir: str):
        super().__init__()
        self.data_dir = data_dir
        os.makedirs(data_dir, exist_ok=True)

    def _path(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{collection}.json")

    def load_all(self, collection):
        path = self._path(collection)
        if not os.path.exists(path):
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log.error("Cannot read collection %s: %s", collection, e)
            raise StorageError(f"Cannot read collection '{collection}'") from e

        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise StorageError(f"Collection '{collection}' is malformed")
        return data

    def save_all(self, collection, records):
        path = self._path(collection)
        with self.lock_for(collection):
            fd, tmp_path = tempfile.mkstemp(prefix=f".{collection}-", suffix=".tmp", dir=self.data_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                log.error("Cannot write collection %s: %s", collection, e)
                raise StorageError(f"Cannot write collection '{collection}'") from e

    def describe(self):
        return f"json:{self.data_dir}"


class MongoRecordStore(RecordStore):
    """
    Same contract backed by Mongo. ``save_all`` fills a scratch collection and
    renames it over the target, so readers see either the old or the new set.
    """

    def __init__(self, db):
        super().__init__()
        self.db = db

    def load_all(self, collection):
        try:
            return list(self.db[collection].find({}, {"_id": 0}))
        except PyMongoError as e:
            raise StorageError(f"Cannot read collection '{collection}'") from e

    def save_all(self, collection, records):
        with self.lock_for(collection):
            try:
                if not records:
                    self.db[collection].drop()
                    return
                scratch = self.db[f"{collection}__swap"]
                scratch.drop()
                # insert_many adds _id to the dicts it is given
                scratch.insert_many([dict(r) for r in records])
                scratch.rename(collection, dropTarget=True)
            except PyMongoError as e:
                raise StorageError(f"Cannot write collection '{collection}'") from e

    def append(self, collection, record, unique_key=None):
        with self.lock_for(collection):
            try:
                col = self.db[collection]
                if unique_key is not None and col.find_one({unique_key: record.get(unique_key)}):
                    raise Conflict(f"{unique_key} already exists")
                col.insert_one(dict(record))
            except PyMongoError as e:
                raise StorageError(f"Cannot write collection '{collection}'") from e
        return record

    def describe(self):
        return f"mongo:{self.db.name}"


def init_store(app, store: Optional[RecordStore] = None) -> RecordStore:
    """
    Picks the backend from app.config["RECORD_STORE"] unless one is injected,
    and publishes it on app.extensions["record_store"].
    """
    if store is None:
        backend = app.config.get("RECORD_STORE", "json")
        if backend == "mongo":
            mongo.init_app(app)
            if mongo.db is None:
                raise RuntimeError("MONGO_URI must name a database when RECORD_STORE=mongo")
            store = MongoRecordStore(mongo.db)
        elif backend == "json":
            store = JsonFileRecordStore(app.config["DATA_DIR"])
        else:
            raise RuntimeError(f"Unknown RECORD_STORE '{backend}'")

    app.extensions["record_store"] = store
    app.logger.info("Record store ready: %s", store.describe())
    return store


def get_store() -> RecordStore:
    return current_app.extensions["record_store"]
