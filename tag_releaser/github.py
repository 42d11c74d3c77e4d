"""Minimal GitHub REST client for creating releases."""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from .errors import ReleaseAPIError
from .models import Release, ReleaseRequest, RepoRef

DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
TIMEOUT_SECONDS = 30.0


def _error_from_response(response: httpx.Response) -> ReleaseAPIError:
    """Build a ReleaseAPIError from a non-2xx response.

    GitHub error bodies look like
    ``{"message": "Validation Failed", "errors": [{"code": "already_exists", ...}]}``.
    """
    try:
        data = response.json()
    except ValueError:
        return ReleaseAPIError(response.status_code, response.text or response.reason_phrase)

    if not isinstance(data, dict):
        return ReleaseAPIError(response.status_code, response.text)

    codes: list[str] = []
    for item in data.get("errors") or []:
        if isinstance(item, dict) and isinstance(item.get("code"), str):
            codes.append(item["code"])

    message = str(data.get("message") or response.reason_phrase)
    if codes:
        message = f"{message} ({', '.join(codes)})"
    return ReleaseAPIError(response.status_code, message, codes)


class GitHubClient:
    """Creates releases through the GitHub REST API.

    Args:
        token: Token with ``contents: write`` on the target repository.
        api_url: API root; GitHub Enterprise Server uses ``https://HOST/api/v3``.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
            timeout=TIMEOUT_SECONDS,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def create_release(self, repo: RepoRef, request: ReleaseRequest) -> Release:
        """Create a release and return the API's record of it.

        Raises:
            ReleaseAPIError: On any non-2xx response, transport failure, or a
                success response whose body is not a release record.
        """
        try:
            response = self._client.post(
                f"/repos/{repo.owner}/{repo.repo}/releases", json=request.payload()
            )
        except httpx.HTTPError as exc:
            raise ReleaseAPIError(0, f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            raise _error_from_response(response)
        try:
            return Release.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ReleaseAPIError(
                response.status_code, f"Unexpected release payload: {exc}"
            ) from exc
