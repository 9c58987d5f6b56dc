"""
Supabase storage backend for Sparks.

Implements the Storage interface on top of Supabase's PostgREST API.
All operations are plain HTTP requests made with `requests`.

PostgREST documentation: https://postgrest.org/en/stable/references/api.html

=============================================================================
SCHEMA
=============================================================================

create table categories (
    id          uuid primary key default gen_random_uuid(),
    name        text not null,
    created_at  timestamptz not null default now()
);

create table ideas (
    id          uuid primary key default gen_random_uuid(),
    raw_input   text not null,
    title       text not null,
    summary     text not null,
    category    text not null,          -- category name, not a foreign key
    tags        text[] not null default '{}',
    priority    text not null default 'normal',
    status      text not null default 'active',
    notes       text,
    created_at  timestamptz not null default now(),
    updated_at  timestamptz not null default now()
);

=============================================================================
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from sparks.config import SUPABASE_URL, SUPABASE_SERVICE_KEY, REQUEST_TIMEOUT
from sparks.errors import NotFoundError, StoreError, ValidationError
from sparks.models.idea import Category, Idea, utcnow
from sparks.storage.base import IDEA_CREATE_FIELDS, Storage, updatable_fields
from sparks.views.filters import sort_ideas

logger = logging.getLogger(__name__)


class SupabaseStorage(Storage):
    """
    Supabase-backed storage implementation.

    Configuration is pulled from environment variables via sparks.config:
    - SUPABASE_URL: Project URL
    - SUPABASE_SERVICE_KEY: Service role key (server-side only)
    """

    CATEGORIES_TABLE = "categories"
    IDEAS_TABLE = "ideas"

    def __init__(
        self,
        url: str = None,
        service_key: str = None,
        timeout: int = None,
    ):
        """
        Initialize SupabaseStorage.

        Args:
            url: Project URL. Defaults to config.SUPABASE_URL.
            service_key: Service role key. Defaults to config.SUPABASE_SERVICE_KEY.
            timeout: Request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
        """
        self.url = (url if url is not None else SUPABASE_URL).rstrip("/")
        self.service_key = service_key if service_key is not None else SUPABASE_SERVICE_KEY
        self.timeout = timeout or REQUEST_TIMEOUT

    @property
    def name(self) -> str:
        return "supabase"

    @property
    def _rest_url(self) -> str:
        return f"{self.url}/rest/v1"

    @property
    def _headers(self) -> Dict[str, str]:
        """Construct headers for API requests."""
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.url:
            raise StoreError("SUPABASE_URL is not configured")
        if not self.service_key:
            raise StoreError("SUPABASE_SERVICE_KEY is not configured")

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Make a request against a table and return the rows in the response.

        Raises:
            StoreError: On transport failure or a non-2xx response.
        """
        self._validate_config()

        try:
            response = requests.request(
                method,
                f"{self._rest_url}/{table}",
                headers=self._headers,
                params=params,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, table, e)
            raise StoreError(f"Record store unreachable: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error("%s %s returned %s: %s", method, table, response.status_code, message)
            raise StoreError(f"Record store error ({response.status_code}): {message}")

        if response.status_code == 204 or not response.content:
            return []

        try:
            rows = response.json()
        except ValueError as e:
            raise StoreError("Record store returned invalid JSON") from e

        return rows if isinstance(rows, list) else [rows]

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or response.text
        return response.text

    @staticmethod
    def _to_idea(row: Dict[str, Any]) -> Idea:
        try:
            return Idea.from_dict(row)
        except (KeyError, ValueError, ValidationError) as e:
            raise StoreError(f"Record store returned an invalid idea: {e}") from e

    # =========================================================================
    # Categories
    # =========================================================================

    def list_categories(self) -> List[Category]:
        rows = self._request(
            "GET",
            self.CATEGORIES_TABLE,
            params={"select": "*", "order": "name.asc"},
        )
        return [Category.from_dict(row) for row in rows]

    def create_category(self, name: str) -> Category:
        rows = self._request("POST", self.CATEGORIES_TABLE, payload={"name": name})
        if not rows:
            raise StoreError("Record store did not return the created category")
        return Category.from_dict(rows[0])

    def delete_category(self, category_id: str) -> None:
        rows = self._request(
            "DELETE",
            self.CATEGORIES_TABLE,
            params={"id": f"eq.{category_id}"},
        )
        if not rows:
            raise NotFoundError(f"Category not found: {category_id}")

    # =========================================================================
    # Ideas
    # =========================================================================

    def list_ideas(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        sort: str = "newest",
    ) -> List[Idea]:
        params = {"select": "*"}

        if category:
            params["category"] = f"eq.{category}"
        if status:
            params["status"] = f"eq.{status}"
        if priority:
            params["priority"] = f"eq.{priority}"

        # priority is a text column, so rank ordering happens after the fetch
        params["order"] = "created_at.asc" if sort == "oldest" else "created_at.desc"

        ideas = [self._to_idea(row) for row in self._request("GET", self.IDEAS_TABLE, params=params)]

        if sort == "priority":
            ideas = sort_ideas(ideas, "priority")

        return ideas

    def get_idea(self, idea_id: str) -> Idea:
        rows = self._request(
            "GET",
            self.IDEAS_TABLE,
            params={"select": "*", "id": f"eq.{idea_id}"},
        )
        if not rows:
            raise NotFoundError(f"Idea not found: {idea_id}")
        return self._to_idea(rows[0])

    def create_idea(self, fields: Dict[str, Any]) -> Idea:
        payload = {key: value for key, value in fields.items() if key in IDEA_CREATE_FIELDS}
        rows = self._request("POST", self.IDEAS_TABLE, payload=payload)
        if not rows:
            raise StoreError("Record store did not return the created idea")
        return self._to_idea(rows[0])

    def update_idea(self, idea_id: str, changes: Dict[str, Any]) -> Idea:
        payload = updatable_fields(changes)
        payload["updated_at"] = utcnow().isoformat()

        rows = self._request(
            "PATCH",
            self.IDEAS_TABLE,
            params={"id": f"eq.{idea_id}"},
            payload=payload,
        )
        if not rows:
            raise NotFoundError(f"Idea not found: {idea_id}")
        return self._to_idea(rows[0])

    def delete_idea(self, idea_id: str) -> None:
        rows = self._request(
            "DELETE",
            self.IDEAS_TABLE,
            params={"id": f"eq.{idea_id}"},
        )
        if not rows:
            raise NotFoundError(f"Idea not found: {idea_id}")
