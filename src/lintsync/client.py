from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Any

import httpx

from .endpoints import (
    ISSUE_COMMENT,
    ISSUE_COMMENTS,
    PULL_FILES,
    REVIEW_COMMENT,
    REVIEW_COMMENTS,
)
from .errors import ApiError, AuthError, DiffRejectedError, NetworkError
from .models import ChangedFile, RemoteComment

API_URL = "https://api.github.com"
PAGE_SIZE = 100
_DIFF_REJECTION = "line must be part of the diff"


class HttpMethod(str, Enum):
    GET = "GET"
    PATCH = "PATCH"
    POST = "POST"
    DELETE = "DELETE"


class GitHubClient:
    def __init__(self, token: str, base_url: str = API_URL, timeout: float = 30.0) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(timeout),
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self._client.close()

    def request(self, method: HttpMethod, path: str, payload: dict[str, Any] | None = None) -> Any:
        try:
            response = self._client.request(method.value, path, json=payload)
        except httpx.RequestError as exc:
            raise NetworkError(f"{method.value} {path} failed: {exc}") from exc

        if response.status_code == 401:
            raise AuthError(
                "GitHub token is invalid or missing required scopes.",
                status_code=401,
                body=response.text,
            )
        if response.status_code == 422 and _DIFF_REJECTION in response.text:
            raise DiffRejectedError(
                f"{method.value} {path} rejected: {_DIFF_REJECTION}",
                status_code=422,
                body=response.text,
            )
        if not response.is_success:
            raise ApiError(
                f"GitHub API returned HTTP {response.status_code} for {method.value} {path}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def get(self, path: str) -> Any:
        return self.request(HttpMethod.GET, path)

    def post(self, path: str, payload: dict[str, Any]) -> Any:
        return self.request(HttpMethod.POST, path, payload)

    def patch(self, path: str, payload: dict[str, Any]) -> Any:
        return self.request(HttpMethod.PATCH, path, payload)

    def delete(self, path: str) -> Any:
        return self.request(HttpMethod.DELETE, path)

    def fetch_pages(self, path: str) -> Iterator[list[dict[str, Any]]]:
        """Yield every page of a REST listing.

        Stops on the first page holding fewer than PAGE_SIZE items.
        """
        page = 1
        while True:
            items = self.get(f"{path}?per_page={PAGE_SIZE}&page={page}") or []
            if not isinstance(items, list):
                raise ApiError(f"Expected a list from {path}, got {type(items).__name__}")
            yield items
            if len(items) < PAGE_SIZE:
                return
            page += 1

    def fetch_all(self, path: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        for page in self.fetch_pages(path):
            items.extend(page)
        return items

    def list_changed_files(self, repo: str, number: int) -> list[ChangedFile]:
        return [ChangedFile.from_api(item) for item in self.fetch_all(PULL_FILES.format(repo=repo, number=number))]

    def list_review_comments(self, repo: str, number: int) -> list[RemoteComment]:
        nodes = self.fetch_all(REVIEW_COMMENTS.format(repo=repo, number=number))
        return [self._parse_comment(n) for n in nodes]

    def list_issue_comments(self, repo: str, number: int) -> list[RemoteComment]:
        nodes = self.fetch_all(ISSUE_COMMENTS.format(repo=repo, number=number))
        return [self._parse_comment(n) for n in nodes]

    def create_review_comment(
        self,
        repo: str,
        number: int,
        commit_id: str,
        path: str,
        line: int,
        body: str,
    ) -> RemoteComment:
        node = self.post(
            REVIEW_COMMENTS.format(repo=repo, number=number),
            {"body": body, "commit_id": commit_id, "path": path, "line": line, "side": "RIGHT"},
        )
        return self._parse_comment(node)

    def update_review_comment(self, repo: str, comment_id: int, body: str) -> RemoteComment:
        node = self.patch(REVIEW_COMMENT.format(repo=repo, comment_id=comment_id), {"body": body})
        return self._parse_comment(node)

    def delete_review_comment(self, repo: str, comment_id: int) -> None:
        self.delete(REVIEW_COMMENT.format(repo=repo, comment_id=comment_id))

    def create_issue_comment(self, repo: str, number: int, body: str) -> RemoteComment:
        node = self.post(ISSUE_COMMENTS.format(repo=repo, number=number), {"body": body})
        return self._parse_comment(node)

    def update_issue_comment(self, repo: str, comment_id: int, body: str) -> RemoteComment:
        node = self.patch(ISSUE_COMMENT.format(repo=repo, comment_id=comment_id), {"body": body})
        return self._parse_comment(node)

    def delete_issue_comment(self, repo: str, comment_id: int) -> None:
        self.delete(ISSUE_COMMENT.format(repo=repo, comment_id=comment_id))

    @staticmethod
    def _parse_comment(node: dict[str, Any]) -> RemoteComment:
        return RemoteComment(
            id=node["id"],
            body=node.get("body") or "",
            path=node.get("path"),
            line=node.get("line"),
        )
