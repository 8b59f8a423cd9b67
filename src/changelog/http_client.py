"""GitHub REST and GraphQL client with retry/backoff logic for changelog scripts."""

from __future__ import annotations

import os
import re
import time
from typing import Any, Dict, List, Optional

import requests

from .config import (
    BACKOFF_BASE_SEC,
    BASE_URL,
    GRAPHQL_URL,
    MAX_RETRIES,
    MAX_WAIT_ON_403,
    PER_PAGE,
    REQUEST_TIMEOUT,
    USER_AGENT,
)

NEXT_LINK_RE = re.compile(r'<([^>]+)>\s*;\s*rel="next"')
TERMINAL_ERRORS = {400, 401, 404, 410, 422}


class GitHubAPIError(RuntimeError):
    """Raised when GitHub answers a JSON helper call with a non-2xx status."""

    def __init__(self, status: int, url: str, message: str = "") -> None:
        super().__init__(f"HTTP {status} for {url}: {message}")
        self.status = status
        self.url = url
        self.message = message


def sleep_with_jitter(base: float) -> None:
    """Pause execution with +/- 25% jitter to avoid synchronized retries."""
    jitter = base * 0.25 * (0.5 - (os.urandom(1)[0] / 255.0))
    time.sleep(max(0.0, base + jitter))


def error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except Exception:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        return str(body)[:300]
    return body.get("message") or body.get("error") or body.get("text") or ""


def log_http_error(resp: requests.Response, url: str) -> None:
    """Print a short, human-readable message when GitHub returns an error."""
    print(f"[error] HTTP {resp.status_code} for {url}\n  -> {error_message(resp)}")


def next_page_url(resp: requests.Response) -> Optional[str]:
    """Return the `rel="next"` target from a Link header, if any."""
    link = (resp.headers or {}).get("Link") or ""
    match = NEXT_LINK_RE.search(link)
    return match.group(1) if match else None


def rate_limit_wait(resp: requests.Response, attempt: int) -> int:
    """Seconds to wait after a 403/429, derived from GitHub's rate-limit headers."""
    headers = resp.headers or {}
    retry_after = headers.get("Retry-After")
    reset = headers.get("X-RateLimit-Reset")
    if retry_after and str(retry_after).isdigit():
        wait_sec = int(retry_after)
    elif reset and str(reset).isdigit():
        wait_sec = max(0, int(reset) - int(time.time())) + 1
    else:
        wait_sec = BACKOFF_BASE_SEC * (2 ** (attempt - 1))
    return min(wait_sec, MAX_WAIT_ON_403)


class GitHubClient:
    """Authenticated wrapper around the GitHub HTTP API."""

    def __init__(
        self,
        token: str,
        base_url: str = BASE_URL,
        graphql_url: str = GRAPHQL_URL,
        timeout: int = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.graphql_url = graphql_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": USER_AGENT,
                "Authorization": f"token {token}",
            }
        )

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{path}"

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Perform a call with retry and exponential backoff; return the final response."""
        url = self._url(path)
        timeout = kwargs.pop("timeout", self.timeout)
        last_exc: Optional[requests.RequestException] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.session.request(method, url, timeout=timeout, **kwargs)
            except requests.RequestException as exc:
                last_exc = exc
                if attempt == self.max_retries:
                    break
                delay = BACKOFF_BASE_SEC * (2 ** (attempt - 1))
                print(f"[retry {attempt}/{self.max_retries}] {exc} -> sleep {delay:.1f}s")
                sleep_with_jitter(delay)
                continue

            if 200 <= resp.status_code < 300:
                return resp

            if resp.status_code in (403, 429) and attempt < self.max_retries:
                wait_sec = rate_limit_wait(resp, attempt)
                print(f"[backoff {resp.status_code}] waiting {wait_sec}s for {url}")
                sleep_with_jitter(wait_sec)
                continue

            if resp.status_code in TERMINAL_ERRORS:
                log_http_error(resp, url)
                return resp

            if resp.status_code >= 500 and attempt < self.max_retries:
                delay = BACKOFF_BASE_SEC * (2 ** (attempt - 1))
                print(f"[retry {attempt}/{self.max_retries}] HTTP {resp.status_code} -> sleep {delay:.1f}s")
                sleep_with_jitter(delay)
                continue

            log_http_error(resp, url)
            return resp

        if last_exc:
            raise last_exc
        raise RuntimeError(f"Request failed after retries: {method} {url}")

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET `path` and decode the body; raise GitHubAPIError on failure."""
        resp = self.request("GET", path, params=params)
        if not 200 <= resp.status_code < 300:
            raise GitHubAPIError(resp.status_code, self._url(path), error_message(resp))
        return resp.json()

    def paginate(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        max_pages: int = 0,
    ) -> List[Dict[str, Any]]:
        """Collect every page of a list endpoint, following Link headers when present."""
        query = dict(params or {})
        query.setdefault("per_page", PER_PAGE)
        per_page = int(query["per_page"])
        results: List[Dict[str, Any]] = []
        url: Optional[str] = self._url(path)
        page = 1

        while url:
            if max_pages and page > max_pages:
                break
            resp = self.request("GET", url, params=query)
            if resp.status_code != 200:
                raise GitHubAPIError(resp.status_code, url, error_message(resp))

            batch = resp.json()
            if not isinstance(batch, list) or not batch:
                break
            results.extend(batch)

            next_url = next_page_url(resp)
            if next_url:
                # the next link already carries the query string
                url, query = next_url, {}
            elif len(batch) < per_page:
                break
            else:
                query["page"] = int(query.get("page", 1)) + 1
            page += 1
        return results

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute a GraphQL query and return its `data` payload."""
        payload = {"query": query, "variables": variables or {}}
        resp = self.request("POST", self.graphql_url, json=payload)
        if resp.status_code != 200:
            raise GitHubAPIError(resp.status_code, self.graphql_url, error_message(resp))
        data = resp.json()
        if data.get("errors"):
            messages = ", ".join(
                [str(err.get("message")) for err in data["errors"] if isinstance(err, dict)]
            )
            raise RuntimeError(f"GraphQL error: {messages or data['errors']}")
        return data.get("data") or {}

    def get_repo(self, repository: str) -> Dict[str, Any]:
        return self.get_json(f"/repos/{repository}")

    def find_milestone(self, repository: str, title: str, state: str = "all") -> Optional[Dict[str, Any]]:
        """Return the milestone whose title matches `title` (a leading "v" is ignored)."""
        wanted = title.lstrip("v")
        for milestone in self.paginate(f"/repos/{repository}/milestones", {"state": state}):
            if (milestone.get("title") or "").lstrip("v") == wanted:
                return milestone
        return None

    def list_issues(self, repository: str, **filters: Any) -> List[Dict[str, Any]]:
        """List issues and pull requests matching the issues API filters."""
        filters.setdefault("state", "all")
        return self.paginate(f"/repos/{repository}/issues", filters)


__all__ = [
    "GitHubAPIError",
    "GitHubClient",
    "sleep_with_jitter",
    "error_message",
    "log_http_error",
    "next_page_url",
    "rate_limit_wait",
]
