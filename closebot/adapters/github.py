"""GitHub API client."""

from typing import Any, Dict

import requests

from closebot.adapters.base import ForgeClient, ForgeError
from closebot.config import StateNames

# Collaborator permission levels that may close and reopen
WRITE_PERMISSIONS = frozenset({"admin", "maintain", "write"})

LINKED_PR_COUNT_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    issue(number: $number) {
      closedByPullRequestsReferences(first: 1, includeClosedPrs: true) {
        totalCount
      }
    }
  }
}
"""


class GitHubClient(ForgeClient):
    """GitHub REST and GraphQL implementation."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://api.github.com",
        graphql_url: str | None = None,
        states: StateNames | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._graphql_url = graphql_url or f"{self._api_url}/graphql"
        self._states = states or StateNames()
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        return self._send(method, url, json=json)

    def _send(self, method: str, url: str, json: Dict[str, Any] | None = None) -> requests.Response:
        try:
            resp = self._session.request(method, url, json=json, timeout=30)
        except requests.RequestException as e:
            raise ForgeError(f"{method} {url}: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise ForgeError(f"{resp.status_code}: {msg}")
        return resp

    @staticmethod
    def _json(resp: requests.Response) -> Dict[str, Any]:
        """Decode a JSON object body; anything else is a failed call."""
        try:
            data = resp.json()
        except ValueError as e:
            raise ForgeError(f"{resp.status_code}: response is not JSON") from e
        if not isinstance(data, dict):
            raise ForgeError(f"{resp.status_code}: unexpected response: {data!r}")
        return data

    def _forge_state(self, state: str) -> str:
        """Translate a configured state name to GitHub's open/closed."""
        if state == self._states.opened:
            return "open"
        if state == self._states.closed:
            return "closed"
        raise ForgeError(f"Unknown state: {state}")

    def create_issue_comment(self, org: str, repo: str, number: int, body: str) -> None:
        self._request("POST", f"/repos/{org}/{repo}/issues/{number}/comments", json={"body": body})

    def create_pr_comment(self, org: str, repo: str, number: int, body: str) -> None:
        # Conversation comments on pull requests go through the issues API
        self._request("POST", f"/repos/{org}/{repo}/issues/{number}/comments", json={"body": body})

    def check_permission(self, org: str, repo: str, username: str) -> bool:
        resp = self._request("GET", f"/repos/{org}/{repo}/collaborators/{username}/permission")
        data = self._json(resp)
        return data.get("permission") in WRITE_PERMISSIONS

    def update_issue_state(self, org: str, repo: str, number: int, state: str) -> None:
        self._request(
            "PATCH",
            f"/repos/{org}/{repo}/issues/{number}",
            json={"state": self._forge_state(state)},
        )

    def update_pr_state(self, org: str, repo: str, number: int, state: str) -> None:
        self._request(
            "PATCH",
            f"/repos/{org}/{repo}/pulls/{number}",
            json={"state": self._forge_state(state)},
        )

    def get_issue_linked_pr_count(self, org: str, repo: str, number: int) -> int:
        resp = self._send(
            "POST",
            self._graphql_url,
            json={
                "query": LINKED_PR_COUNT_QUERY,
                "variables": {"owner": org, "name": repo, "number": number},
            },
        )
        data = self._json(resp)
        if data.get("errors"):
            raise ForgeError(f"GraphQL: {data['errors'][0].get('message', data['errors'])}")
        try:
            issue = data["data"]["repository"]["issue"]
            return int(issue["closedByPullRequestsReferences"]["totalCount"])
        except (KeyError, TypeError) as e:
            raise ForgeError(f"Unexpected linked pull requests response: {data}") from e
