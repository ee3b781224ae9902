"""Leveled vocabulary datasets and their in-process cache.

The datasets are produced by a separate ingestion step and laid out as:

  vocab-index.json        {level: {"file": name, "count": n}}
  vocab-<level>.json      VocabItem records with pre-generated questions
  vocab-table.json        the same records without the questions
  vocab-word-index.json   [{"w": word, "l": level}, ...]

``VocabStore`` owns the cache.  Once a document has loaded it is kept for
the lifetime of the store; a failed load yields empty data and is recorded
in ``VocabStore.unavailable`` so callers can tell it apart from an empty
dataset.
"""
from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import httpx

from vocab_worksheet.levels import level_filename
from vocab_worksheet.models import VocabItem, WordLevel

log = logging.getLogger("vocab_worksheet.data")

INDEX_FILE = "vocab-index.json"
TABLE_FILE = "vocab-table.json"
WORD_INDEX_FILE = "vocab-word-index.json"


class DataSourceError(Exception):
    """A dataset document could not be fetched or decoded."""


class DataSource(ABC):
    @abstractmethod
    async def read_json(self, name: str) -> Any:
        ...

    @abstractmethod
    def name(self) -> str:
        ...


class FileSource(DataSource):
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    async def read_json(self, name: str) -> Any:
        path = self.data_dir / name
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(text)
        except (OSError, json.JSONDecodeError) as e:
            raise DataSourceError(f"{path}: {e}") from e

    def name(self) -> str:
        return f"file:{self.data_dir}"


class HttpSource(DataSource):
    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def read_json(self, name: str) -> Any:
        url = f"{self.base_url}/{name}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            raise DataSourceError(f"{url}: {e}") from e

    def name(self) -> str:
        return f"http:{self.base_url}"


def build_word_levels(entries: list[WordLevel]) -> dict[str, list[str]]:
    """Map each lower-cased word to the distinct levels it appears at, in index order."""
    result: dict[str, list[str]] = {}
    for entry in entries:
        levels = result.setdefault(entry.word.lower(), [])
        if entry.level not in levels:
            levels.append(entry.level)
    return result


class VocabStore:
    def __init__(self, source: DataSource):
        self.source = source
        self.unavailable: set[str] = set()
        self._index: dict[str, dict] | None = None
        self._levels: dict[str, list[VocabItem]] = {}
        self._table: list[VocabItem] | None = None
        self._word_index: list[WordLevel] | None = None
        self._word_levels: dict[str, list[str]] | None = None

    async def _load(self, name: str) -> Any | None:
        try:
            data = await self.source.read_json(name)
        except DataSourceError as e:
            log.warning("Dataset %s unavailable: %s", name, e)
            self.unavailable.add(name)
            return None
        self.unavailable.discard(name)
        return data

    async def get_index(self) -> dict[str, dict]:
        if self._index is not None:
            return self._index
        data = await self._load(INDEX_FILE)
        if not isinstance(data, dict):
            return {}
        self._index = data
        return data

    async def get_level(self, level: str) -> list[VocabItem]:
        if level in self._levels:
            return self._levels[level]
        index = await self.get_index()
        entry = index.get(level)
        if not entry:
            return []
        # Entries without a file name follow the vocab-<slug>.json convention
        name = entry.get("file") if isinstance(entry, dict) else None
        data = await self._load(name or level_filename(level))
        if not isinstance(data, list):
            return []
        items = [VocabItem.from_dict(d) for d in data]
        self._levels[level] = items
        log.info("Loaded %d items for %s", len(items), level)
        return items

    async def get_table(self) -> list[VocabItem]:
        if self._table is not None:
            return self._table
        data = await self._load(TABLE_FILE)
        if not isinstance(data, list):
            return []
        self._table = [VocabItem.from_dict(d) for d in data]
        return self._table

    async def get_word_index(self) -> list[WordLevel]:
        if self._word_index is not None:
            return self._word_index
        data = await self._load(WORD_INDEX_FILE)
        if not isinstance(data, list):
            return []
        self._word_index = [WordLevel.from_dict(d) for d in data]
        return self._word_index

    async def get_word_levels(self) -> dict[str, list[str]]:
        if self._word_levels is not None:
            return self._word_levels
        entries = await self.get_word_index()
        if not entries:
            return {}
        self._word_levels = build_word_levels(entries)
        return self._word_levels

    @property
    def available(self) -> bool:
        return not self.unavailable
