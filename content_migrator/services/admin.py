"""Admin API calls that prepare an organization on the destination.

These are one-shot request/response calls made before the content copy:
registering the organization on the destination and copying its org-level
and site-level configuration documents.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from content_migrator.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
)
from content_migrator.core.config import MigrationConfig
from content_migrator.exceptions import AdminAPIError, ConfigError
from content_migrator.utils.logging import log_with_context


class AdminClient:
    """Thin wrapper around the source and destination admin APIs."""

    def __init__(
        self,
        source_url: str,
        dest_url: str,
        bearer: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.source_url = source_url.rstrip("/")
        self.dest_url = dest_url.rstrip("/")
        self.bearer = bearer
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: MigrationConfig) -> AdminClient:
        if not config.source.admin_url or not config.dest.admin_url:
            raise ConfigError(
                "Both source.admin_url and dest.admin_url are required to migrate org configuration"
            )
        return cls(
            config.source.admin_url,
            config.dest.admin_url,
            bearer=config.bearer,
            timeout=config.request_timeout,
        )

    def _headers(self, authorized: bool) -> dict[str, str]:
        if authorized and self.bearer:
            return {"Authorization": f"Bearer {self.bearer}"}
        return {}

    def _request(
        self, method: str, url: str, authorized: bool = True, **kwargs: Any
    ) -> requests.Response:
        log_with_context(logging.DEBUG, f"API Request: {method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(authorized),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            raise AdminAPIError(f"{method} {url} failed: {e}") from e
        log_with_context(logging.DEBUG, f"API Response: {response.status_code} from {url}")
        return response

    def _list_orgs(self, base_url: str) -> list[dict[str, Any]]:
        response = self._request("GET", f"{base_url}/list", authorized=False)
        if not response.ok:
            raise AdminAPIError(f"Could not fetch org list from {base_url} ({response.status_code})")
        try:
            return response.json()
        except ValueError as e:
            raise AdminAPIError(f"Org list from {base_url} is not valid JSON") from e

    def create_org(self, org: str) -> None:
        """Register ``org`` on the destination with its original creation date.

        Writes a temporary props document through the destination admin API,
        confirms the org is now listed, then removes the temporary document.
        """
        created = next(
            (o.get("created") for o in self._list_orgs(self.source_url) if o.get("name") == org),
            None,
        )
        if not created:
            raise AdminAPIError(f"Could not find org {org} in source list.")

        body = json.dumps(
            {"total": 1, "limit": 1, "offset": 0, "data": [{"created": created}]}
        )
        props_url = f"{self.dest_url}/source/{org}/migration"

        log_with_context(
            logging.INFO, f"Creating temporary {org} file, to register the org.", org=org
        )
        response = self._request("POST", props_url, authorized=False, data=body)
        if not response.ok:
            raise AdminAPIError(f"Could not create migration props file ({response.status_code}).")

        if not any(o.get("name") == org for o in self._list_orgs(self.dest_url)):
            raise AdminAPIError(f"Could not find new org {org} in destination list.")

        response = self._request("DELETE", props_url, authorized=False)
        if not response.ok:
            raise AdminAPIError(
                f"Could not delete org migration props file ({response.status_code})."
            )

    def _copy_config(self, path: str) -> bool:
        """Copy one config document; False when there is nothing to copy or no access."""
        response = self._request("GET", f"{self.source_url}/config/{path}")
        if response.status_code == HTTP_NOT_FOUND:
            log_with_context(logging.INFO, f"No config for {path} to migrate.")
            return False
        if response.status_code in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            log_with_context(
                logging.WARNING, f"Skipping config for {path} as not authorized."
            )
            return False
        if not response.ok:
            raise AdminAPIError(
                f"Could not fetch source config for {path} ({response.status_code})."
            )

        response = self._request(
            "POST",
            f"{self.dest_url}/config/{path}",
            files={"config": (None, response.text)},
        )
        if not response.ok:
            raise AdminAPIError(f"Could not create config for {path} ({response.status_code}).")
        return True

    def migrate_org_config(self, org: str) -> bool:
        """Copy the org-level configuration document. Returns True if one was copied."""
        return self._copy_config(org)

    def migrate_site_config(self, org: str) -> list[str]:
        """Copy each site's configuration document.

        Returns:
            Names of the sites whose config was copied.
        """
        response = self._request("GET", f"{self.source_url}/list/{org}")
        if response.status_code in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            log_with_context(
                logging.WARNING, f"Skipping site configs for {org} as not authorized.", org=org
            )
            return []
        if not response.ok:
            raise AdminAPIError(f"Could not list org sites ({response.status_code}).")

        sites = [entry["name"] for entry in response.json() if not entry.get("ext")]
        migrated = []
        for site in sites:
            log_with_context(logging.INFO, f"Migrating site config {site}", org=org)
            if self._copy_config(f"{org}/{site}"):
                migrated.append(site)
        return migrated
