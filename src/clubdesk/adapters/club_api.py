"""Club backend adapter - HTTP client for activity fetching."""

import logging

import requests

from clubdesk.config import Config, load_config
from clubdesk.core.activity import Activity

logger = logging.getLogger(__name__)

MAX_PAGES = 100


class AuthenticationError(Exception):
    """Raised when the API token is missing or rejected."""

    pass


class ClubApiAdapter:
    """
    Club backend REST adapter.

    Implements ActivityRepository protocol. Handles the bearer token and
    paging. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _api_request(self, endpoint: str, params: dict | None = None) -> dict:
        """Make authenticated API request and unwrap the response envelope."""
        if not self.config.api_token:
            raise AuthenticationError("No API token. Set API_TOKEN in clubdesk.conf.")

        resp = self._session.get(
            f"{self.config.api_base_url}{endpoint}",
            params=params,
            headers={"Authorization": f"Bearer {self.config.api_token}"},
        )
        if resp.status_code in (401, 403):
            raise AuthenticationError(f"API rejected token: {resp.status_code}")
        resp.raise_for_status()

        body = resp.json()
        if isinstance(body, dict) and body.get("success") is False:
            raise RuntimeError(body.get("error") or body.get("message") or "API request failed")
        return body.get("data", body) if isinstance(body, dict) else {"activities": body}

    def fetch_activities(self) -> list[Activity]:
        """Fetch all activities, following pagination."""
        activities = []
        page = 1
        while page <= MAX_PAGES:
            data = self._api_request(
                "/api/activities",
                params={"page": page, "limit": self.config.page_size},
            )
            batch = data.get("activities") or []
            activities.extend(Activity.from_api(a) for a in batch if isinstance(a, dict))

            pagination = data.get("pagination") or {}
            total_pages = pagination.get("totalPages") or pagination.get("pages") or 1
            if not batch or page >= total_pages:
                break
            page += 1

        logger.debug(f"Fetched {len(activities)} activities over {page} page(s)")
        return activities

    def fetch_activity(self, activity_id: str) -> Activity | None:
        """Fetch a single activity with its participants."""
        try:
            data = self._api_request(f"/api/activities/{activity_id}")
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return None
            raise
        activity = data.get("activity", data)
        if not isinstance(activity, dict):
            logger.warning(f"Unexpected payload for activity {activity_id}: {activity!r}")
            return None
        return Activity.from_api(activity)
