"""
In-memory cache of recent parse results, keyed by a hash of the SQL text
"""
import hashlib
import threading
import time
from collections import OrderedDict
from typing import Optional

from ..core import parse_sql, Schema


class ParseCache:
    """LRU cache with a time-to-live. Safe to share between request threads."""

    def __init__(self, max_size: int = 10, ttl: int = 3600):
        self.max_size = max_size
        self.ttl = ttl
        self._entries = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _key(sql: str) -> str:
        return hashlib.sha256(sql.encode('utf-8')).hexdigest()

    def get(self, sql: str) -> Optional[Schema]:
        key = self._key(sql)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            stored_at, schema = entry
            if time.monotonic() - stored_at > self.ttl:
                del self._entries[key]
                self.misses += 1
                return None

            self._entries.move_to_end(key)
            self.hits += 1
            return schema

    def put(self, sql: str, schema: Schema):
        if self.max_size <= 0:
            return
        key = self._key(sql)
        with self._lock:
            self._entries[key] = (time.monotonic(), schema)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def parse(self, sql: str) -> Schema:
        """Return the cached Schema for `sql`, parsing it on a miss"""
        schema = self.get(sql)
        if schema is None:
            # 在锁外解析：parse_sql 无共享状态，可并发执行
            schema = parse_sql(sql)
            self.put(sql, schema)
        return schema

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)
