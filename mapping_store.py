# mapping_store.py

import logging
import os
import threading
from typing import List, Optional

import yaml

from errors import ConflictError, NotFoundError, ValidationError
from models.mapping import Mapping

logger = logging.getLogger(__name__)


class YamlMappingFile:
    """
    Persists the mapping table as a YAML list under a `mappings` key.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Mapping]:
        if not os.path.exists(self.path):
            logger.info(f"Mappings file '{self.path}' not found. Starting with an empty table.")
            return []
        try:
            with open(self.path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Error parsing mappings file '{self.path}': {e}")
            raise
        mappings = [Mapping(**entry) for entry in data.get("mappings") or []]
        logger.info(f"Loaded {len(mappings)} mapping(s) from '{self.path}'.")
        return mappings

    def save(self, mappings: List[Mapping]):
        data = {"mappings": [m.model_dump(by_alias=True) for m in mappings]}
        with open(self.path, 'w') as f:
            yaml.safe_dump(data, f, sort_keys=False)
        logger.debug(f"Wrote {len(mappings)} mapping(s) to '{self.path}'.")


class MappingStore:
    """
    Ordered repository/branch to Confluence page table.

    The in-memory list is the source of truth. When a persistence adapter is
    given, every successful add or remove is written through to it.
    """

    def __init__(self, mappings: Optional[List[Mapping]] = None, persistence: Optional[YamlMappingFile] = None):
        self._mappings: List[Mapping] = list(mappings or [])
        self._persistence = persistence
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, path: str) -> "MappingStore":
        persistence = YamlMappingFile(path)
        return cls(persistence.load(), persistence)

    def list(self) -> List[Mapping]:
        with self._lock:
            return list(self._mappings)

    def resolve(self, repository: str, branch: str) -> Optional[Mapping]:
        with self._lock:
            for mapping in self._mappings:
                if mapping.matches(repository, branch):
                    return mapping
        return None

    def contains(self, repository: str, branch: str) -> bool:
        with self._lock:
            return any(m.repository == repository and m.branch == branch for m in self._mappings)

    def add(self, repository: str, branch: str, confluence_page_id: str) -> Mapping:
        if not repository or not branch or not confluence_page_id:
            raise ValidationError("Missing required fields: repository, branch, confluencePageId")

        with self._lock:
            if any(m.repository == repository and m.branch == branch for m in self._mappings):
                raise ConflictError(repository, branch)
            mapping = Mapping(repository=repository, branch=branch, confluence_page_id=confluence_page_id)
            self._commit(self._mappings + [mapping])

        logger.info(f"Added mapping {repository}:{branch} -> page {confluence_page_id}")
        return mapping

    def remove(self, repository: str, branch: str) -> Mapping:
        if not repository or not branch:
            raise ValidationError("Missing required fields: repository, branch")

        with self._lock:
            for index, mapping in enumerate(self._mappings):
                if mapping.repository == repository and mapping.branch == branch:
                    self._commit(self._mappings[:index] + self._mappings[index + 1:])
                    break
            else:
                raise NotFoundError(repository, branch)

        logger.info(f"Removed mapping {repository}:{branch}")
        return mapping

    def _commit(self, mappings: List[Mapping]):
        # Memory only changes once the file write succeeded.
        if self._persistence is not None:
            self._persistence.save(mappings)
        self._mappings = mappings

    def __len__(self):
        return len(self._mappings)
