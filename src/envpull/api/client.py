"""Remote API client.

Wraps `httpx.AsyncClient` to keep HTTP calls out of the command code and make
tests easy (inject a client built on `httpx.MockTransport`).

The client holds no team scope of its own: every call that can be scoped
takes an explicit `team_id`, so concurrent requests never depend on shared
mutable state.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from envpull import __version__
from envpull.models import EnvTarget, Org, Project

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the remote API returns an error or cannot be reached."""

    def __init__(self, message: str, *, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} ({self.status})"

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_forbidden(self) -> bool:
        return self.status in {401, 403}


class ApiClient:
    """Small async wrapper around the endpoints the pull command needs."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.vercel.com",
        timeout: float = 30.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        if not token:
            raise ValueError("API token is required")

        self._base_url = base_url.rstrip("/")
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "User-Agent": f"envpull/{__version__}",
        }
        if http is not None:
            http.headers.update(headers)
            self._http = http
            logger.debug("Using injected HTTP client")
        else:
            self._http = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=httpx.Timeout(timeout),
                follow_redirects=True,
            )

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        team_id: str | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        query: dict[str, str] = dict(params or {})
        if team_id:
            query["teamId"] = team_id

        try:
            resp = await self._http.request(
                method, self._url(path), params=query or None, json=json
            )
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {path} failed: {e}") from e

        if resp.is_error:
            raise _error_from_response(resp)

        data = resp.json()
        if not isinstance(data, dict):
            raise ApiError(f"Unexpected response from {path}: expected an object")
        return data

    async def get_user(self) -> Org:
        """Return the authenticated user's personal account as an org."""

        data = await self._request("GET", "/v2/user")
        user = data.get("user")
        if not isinstance(user, dict):
            raise ApiError("Unexpected user response: missing user")
        return Org(id=str(user["id"]), slug=str(user.get("username") or user["id"]), type="user")

    async def get_team(self, team_id: str) -> Org:
        data = await self._request("GET", f"/v2/teams/{team_id}")
        return Org(id=str(data["id"]), slug=str(data.get("slug") or data["id"]), type="team")

    async def list_teams(self) -> list[Org]:
        data = await self._request("GET", "/v2/teams")
        teams = data.get("teams")
        if not isinstance(teams, list):
            return []
        return [
            Org(id=str(t["id"]), slug=str(t.get("slug") or t["id"]), type="team")
            for t in teams
            if isinstance(t, dict) and "id" in t
        ]

    async def get_org(self, org_id: str) -> Org:
        """Resolve an org id to a team or to the personal account."""

        if org_id.startswith("team_"):
            return await self.get_team(org_id)

        user = await self.get_user()
        if user.id != org_id:
            raise ApiError(f"Account {org_id} is not accessible with this token", status=403)
        return user

    async def get_project(self, id_or_name: str, *, team_id: str | None = None) -> Project:
        data = await self._request("GET", f"/v9/projects/{id_or_name}", team_id=team_id)
        return Project.model_validate(data)

    async def find_project(self, name: str, *, team_id: str | None = None) -> Project | None:
        try:
            return await self.get_project(name, team_id=team_id)
        except ApiError as e:
            if e.is_not_found:
                return None
            raise

    async def create_project(self, name: str, *, team_id: str | None = None) -> Project:
        data = await self._request(
            "POST", "/v9/projects", team_id=team_id, json={"name": name}
        )
        logger.info("Created project", extra={"project": name, "team_id": team_id})
        return Project.model_validate(data)

    async def pull_env(
        self, project_id: str, target: EnvTarget, *, team_id: str | None = None
    ) -> dict[str, str]:
        """Return the decrypted environment variables for one target."""

        data = await self._request(
            "GET", f"/v1/env/pull/{project_id}/{target.value}", team_id=team_id
        )
        env = data.get("env")
        if not isinstance(env, dict):
            raise ApiError("Unexpected env response: missing env")
        return {str(k): "" if v is None else str(v) for k, v in env.items()}


def _error_from_response(resp: httpx.Response) -> ApiError:
    message = resp.reason_phrase or "Request failed"
    code: str | None = None
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            if isinstance(err.get("message"), str):
                message = err["message"]
            if isinstance(err.get("code"), str):
                code = err["code"]
    return ApiError(message, status=resp.status_code, code=code)
