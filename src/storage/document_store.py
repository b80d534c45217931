"""Document store capability used to persist calculation results.

Results are stored verbatim as JSON-compatible documents keyed by
(user id, collection, document id). No schema validation is done here;
the calculators own the shape of what they save. A store instance is always
passed in explicitly by the caller.
"""

import copy
import datetime
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class DocumentStore(ABC):
    """Abstract per-user document store."""

    @abstractmethod
    def get(self, user_id: str, collection: str, doc_id: str) -> Optional[dict]:
        """Return the stored data for a document, or None if it does not exist."""
        pass

    @abstractmethod
    def set(self, user_id: str, collection: str, doc_id: str, data: dict) -> None:
        """Create or replace a document."""
        pass

    @abstractmethod
    def delete(self, user_id: str, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns True if it existed."""
        pass

    @abstractmethod
    def list(self, user_id: str, collection: str) -> List[str]:
        """List document ids in a user's collection."""
        pass

    def save_projection(self, user_id: str, data: dict) -> None:
        self.set(user_id, 'projections', 'latest', data)

    def load_projection(self, user_id: str) -> Optional[dict]:
        return self.get(user_id, 'projections', 'latest')


class InMemoryDocumentStore(DocumentStore):
    """Document store kept in a dictionary; used by tests and the MCP server without a store dir."""

    def __init__(self):
        self._documents: Dict[tuple, dict] = {}

    def get(self, user_id: str, collection: str, doc_id: str) -> Optional[dict]:
        entry = self._documents.get((user_id, collection, doc_id))
        return copy.deepcopy(entry['data']) if entry else None

    def set(self, user_id: str, collection: str, doc_id: str, data: dict) -> None:
        self._documents[(user_id, collection, doc_id)] = {
            'data': copy.deepcopy(data),
            'updatedAt': _timestamp()
        }

    def delete(self, user_id: str, collection: str, doc_id: str) -> bool:
        return self._documents.pop((user_id, collection, doc_id), None) is not None

    def list(self, user_id: str, collection: str) -> List[str]:
        return sorted(d for (u, c, d) in self._documents if u == user_id and c == collection)


class JsonFileDocumentStore(DocumentStore):
    """Document store laid out as <root>/<user>/<collection>/<doc>.json.

    Each file holds {"data": ..., "updatedAt": ...}.
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir

    def _path(self, user_id: str, collection: str, doc_id: str) -> str:
        for part in (user_id, collection, doc_id):
            if not part or os.sep in part or part in ('.', '..'):
                raise ValueError(f"Invalid document key component: '{part}'")
        return os.path.join(self.root_dir, user_id, collection, f"{doc_id}.json")

    def get(self, user_id: str, collection: str, doc_id: str) -> Optional[dict]:
        path = self._path(user_id, collection, doc_id)
        if not os.path.exists(path):
            logger.debug("No document at %s", path)
            return None
        with open(path, 'r') as f:
            return json.load(f)['data']

    def set(self, user_id: str, collection: str, doc_id: str, data: dict) -> None:
        path = self._path(user_id, collection, doc_id)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        tmp_path = path + '.tmp'
        try:
            with open(tmp_path, 'w') as f:
                json.dump({'data': data, 'updatedAt': _timestamp()}, f, indent=2)
        except Exception:
            os.remove(tmp_path)
            raise
        os.replace(tmp_path, path)
        logger.info("Saved %s/%s/%s", user_id, collection, doc_id)

    def delete(self, user_id: str, collection: str, doc_id: str) -> bool:
        path = self._path(user_id, collection, doc_id)
        if not os.path.exists(path):
            return False
        os.remove(path)
        logger.info("Deleted %s/%s/%s", user_id, collection, doc_id)
        return True

    def list(self, user_id: str, collection: str) -> List[str]:
        directory = os.path.join(self.root_dir, user_id, collection)
        if not os.path.isdir(directory):
            return []
        return sorted(name[:-5] for name in os.listdir(directory) if name.endswith('.json'))
