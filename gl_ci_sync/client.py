"""GitLab API client with pagination support."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from gl_ci_sync.models import PER_PAGE, POOL_MAXSIZE


class GitLabClient:
    """Thin wrapper around the GitLab REST API v4, scoped to a single project."""

    def __init__(self, api_url: str, token: str, project_id: str, dry_run: bool = False):
        self.api_url = api_url.rstrip("/")
        self.project_id = str(project_id)
        self.session = requests.Session()
        self.session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Content-Type": "application/json",
            }
        )
        self.pool_maxsize = 0
        self.ensure_pool_size(POOL_MAXSIZE)
        self.dry_run = dry_run
        self.logger = logging.getLogger("gl-ci-sync")

    def ensure_pool_size(self, size: int) -> None:
        """Grow the connection pool so ``size`` concurrent requests each keep a connection."""
        if size <= self.pool_maxsize:
            return
        self.pool_maxsize = size
        adapter = HTTPAdapter(pool_maxsize=size)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    @property
    def project_endpoint(self) -> str:
        return f"/projects/{urllib.parse.quote(self.project_id, safe='')}"

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make a single HTTP request. Non-2xx responses raise requests.HTTPError."""
        url = f"{self.api_url}{endpoint}"
        self.logger.debug(f"{method.upper()} {url} {kwargs.get('params', '')} {kwargs.get('json', '')}")
        resp = self.session.request(method, url, **kwargs)

        if resp.status_code == 404:
            # Expected on the upsert path, callers decide whether it is an error
            self.logger.debug(f"API 404 for {method.upper()} {endpoint}")
        elif resp.status_code >= 400:
            self.logger.error(f"API error {resp.status_code} for {method.upper()} {endpoint}: {resp.text[:500]}")
        resp.raise_for_status()
        return resp

    def get(self, endpoint: str, params: dict | None = None) -> Any:
        return self._request("GET", endpoint, params=params).json()

    def post(self, endpoint: str, data: dict | None = None) -> Any:
        return self._request("POST", endpoint, json=data).json()

    def put(self, endpoint: str, data: dict | None = None, params: dict | None = None) -> Any:
        return self._request("PUT", endpoint, json=data, params=params).json()

    def delete(self, endpoint: str, params: dict | None = None) -> requests.Response:
        return self._request("DELETE", endpoint, params=params)

    def paginate(self, endpoint: str, params: dict | None = None, per_page: int = PER_PAGE) -> list[dict]:
        """
        Fetch all pages of a paginated endpoint.

        Stops on the last page reported by ``x-total-pages``; when the header is
        absent, stops on the first empty or short page. Any failed page raises and
        discards what was collected so far.
        """
        params = dict(params or {})
        params["per_page"] = per_page
        page = 1
        results = []
        while True:
            params["page"] = page
            self.logger.debug(f"Fetching page {page} of {endpoint}")
            resp = self._request("GET", endpoint, params=params)
            data = resp.json()
            if not data:
                break
            results.extend(data)
            total_pages = resp.headers.get("x-total-pages")
            if total_pages:
                if page >= int(total_pages):
                    break
            elif len(data) < per_page:
                break
            page += 1
        return results

    # -- CI/CD variables --

    def list_variables(self, environment: str | None = None) -> list[dict]:
        """List project variables, restricted to one environment scope when given."""
        params = {}
        if environment is not None:
            params = {"scope": "environment", "environment_scope": environment}
        variables = self.paginate(f"{self.project_endpoint}/variables", params=params)
        if environment is None:
            return variables
        return [v for v in variables if v.get("environment_scope") == environment]

    def update_variable(self, key: str, value: str, environment: str) -> dict:
        return self.put(
            f"{self.project_endpoint}/variables/{urllib.parse.quote(key, safe='')}",
            data={
                "value": value,
                "protected": False,
                "masked": False,
                "environment_scope": environment,
            },
            params={"filter[environment_scope]": environment},
        )

    def create_variable(self, key: str, value: str, environment: str) -> dict:
        return self.post(
            f"{self.project_endpoint}/variables",
            data={
                "key": key,
                "value": value,
                "protected": False,
                "masked": False,
                "environment_scope": environment,
            },
        )

    def delete_variable(self, key: str, environment: str) -> requests.Response:
        return self.delete(
            f"{self.project_endpoint}/variables/{urllib.parse.quote(key, safe='')}",
            params={"filter[environment_scope]": environment},
        )

    # -- Pipelines --

    def list_pipelines(self, per_page: int = PER_PAGE) -> list[dict]:
        return self.paginate(f"{self.project_endpoint}/pipelines", per_page=per_page)

    def delete_pipeline(self, pipeline_id: int) -> requests.Response:
        return self.delete(f"{self.project_endpoint}/pipelines/{pipeline_id}")
