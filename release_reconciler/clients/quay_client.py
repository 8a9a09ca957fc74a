import os
import logging
from typing import Any

import requests

from release_reconciler.errors import TransportError
from release_reconciler.models import ManifestLabel, RegistryTag
from release_reconciler.utils.cancellation import CancellationScope

logger = logging.getLogger(__name__)


class QuayClient:
    """Tag and manifest label access through the Quay REST API.

    Implements both the TagStore and ManifestLabelReader protocols.
    """

    def __init__(self, registry_url: str = "https://quay.io", token: str | None = None, timeout: float = 10.0):
        self.registry_url: str = registry_url.rstrip("/")
        self.token: str | None = token if token is not None else os.getenv("QUAY_TOKEN")
        self.timeout: float = timeout

    def list_tags(self, scope: CancellationScope, repository: str, specific_tag: str | None = None) -> list[RegistryTag]:
        tags: list[RegistryTag] = []
        page = 1
        while True:
            params: dict[str, Any] = {"onlyActiveTags": "true", "page": page}
            if specific_tag:
                params["specificTag"] = specific_tag
            url = f"{self._repo_url(repository)}/tag/"
            body = self._request(scope, "GET", url, params=params)
            for tag in self._items(body, "tags", url):
                if tag.get("name") and tag.get("manifest_digest"):
                    tags.append(RegistryTag(name=tag["name"], manifest_digest=tag["manifest_digest"]))
            if not body.get("has_additional"):
                return tags
            page += 1

    def list_manifest_labels(
        self, scope: CancellationScope, repository: str, manifest_digest: str, key_filter: str | None = None
    ) -> list[ManifestLabel]:
        params = {"filter": key_filter} if key_filter else None
        url = f"{self._repo_url(repository)}/manifest/{manifest_digest}/labels"
        body = self._request(scope, "GET", url, params=params)
        labels: list[ManifestLabel] = []
        for label in self._items(body, "labels", url):
            if not isinstance(label.get("key"), str) or not isinstance(label.get("value"), str):
                raise TransportError(f"GET {url} returned a label without key or value: {label}")
            labels.append(ManifestLabel(key=label["key"], value=label["value"]))
        if key_filter:
            # the API filter is a prefix match
            labels = [label for label in labels if label.key == key_filter]
        return labels

    def create_or_move_tag(self, scope: CancellationScope, repository: str, tag_name: str, manifest_digest: str) -> None:
        url = f"{self._repo_url(repository)}/tag/{tag_name}"
        self._request(scope, "PUT", url, json={"manifest_digest": manifest_digest})
        logger.info(f"Tag {tag_name} in {repository} now points at {manifest_digest}")

    @staticmethod
    def _items(body: Any, field: str, url: str) -> list[dict[str, Any]]:
        if not isinstance(body, dict):
            raise TransportError(f"GET {url} returned an unexpected body")
        items = body.get(field, [])
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise TransportError(f"GET {url} returned an unexpected {field} list")
        return items

    def _repo_url(self, repository: str) -> str:
        path = repository.removeprefix("quay.io/")
        return f"{self.registry_url}/api/v1/repository/{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request_timeout(self, scope: CancellationScope) -> float:
        remaining = scope.remaining()
        if remaining is None:
            return self.timeout
        return min(self.timeout, remaining)

    def _request(self, scope: CancellationScope, method: str, url: str, **kwargs: Any) -> Any:
        scope.raise_if_cancelled()
        try:
            response = requests.request(
                method, url, headers=self._headers(), timeout=self._request_timeout(scope), **kwargs
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        if response.status_code >= 300:
            raise TransportError(
                f"{method} {url} failed with status code {response.status_code}", status_code=response.status_code
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{method} {url} returned an invalid body: {e}", status_code=response.status_code) from e
