"""
Marqo HTTP client implementing the vector index interface.
"""

from typing import Any, Dict, Sequence

import requests

from thoughtbank.core.errors import VectorIndexError
from thoughtbank.util.logging import logger
from .index import IVectorIndexClient


class MarqoIndexClient(IVectorIndexClient):
    """Synchronous client for a Marqo server."""

    def __init__(self, url: str = "http://localhost:8882", timeout: float = 10.0, session: requests.Session = None):
        """
        Initialize the Marqo client.

        Args:
            url: Base URL of the Marqo server
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

        logger.info(f"Initialized Marqo client for endpoint: {self.url}")

    def _post(self, path: str, body: Any) -> Dict[str, Any]:
        try:
            response = self.session.post(f"{self.url}{path}", json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise VectorIndexError(f"Marqo request to {path} failed: {e}") from e

        if response.status_code >= 300:
            raise VectorIndexError(f"Marqo request to {path} failed: {response.status_code}, {response.text}")

        try:
            result = response.json()
        except ValueError:
            return {}

        if isinstance(result, dict) and result.get("errors"):
            raise VectorIndexError(f"Marqo reported errors for {path}: {result.get('items')}")
        return result

    def store(self, index: str, id: str, doc: Dict[str, Any], non_tensor_fields: Sequence[str]) -> None:
        document = dict(doc)
        document["_id"] = id
        body = {
            "documents": [document],
            "nonTensorFields": list(non_tensor_fields),
        }
        self._post(f"/indexes/{index}/documents", body)

    def delete(self, index: str, id: str) -> None:
        self._post(f"/indexes/{index}/documents/delete-batch", [id])
