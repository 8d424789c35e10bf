"""
Opportunity Service - job/internship/event listings from SerpAPI.

SerpAPI proxies Google search. Depending on the query, Google answers with
jobs_results, events_results or plain organic_results; format_results maps
whichever is present into one listing shape per category.
"""

import logging
import time
from functools import lru_cache
from typing import Any, Dict, List, Optional

import httpx

from profilehub.core.config import get_settings
from profilehub.schemas.schemas import Opportunity, OpportunityCategory

logger = logging.getLogger(__name__)


# Results returned per request
MAX_LISTINGS = 10

# Query used when the caller does not pass q
DEFAULT_QUERIES = {
    OpportunityCategory.jobs: "jobs",
    OpportunityCategory.internships: "Internship",
    OpportunityCategory.bootcamps: "coding bootcamps",
    OpportunityCategory.hackathons: "Hackathons",
    OpportunityCategory.mentorship: "Mentorship programs",
    OpportunityCategory.remote: "Remote work",
}

# Checked in order; the first list found wins
RESULT_KEYS = ("jobs_results", "events_results", "organic_results")

FALLBACK_LOCATION = "India"
FALLBACK_LINK = "https://www.google.co.in"


class SearchProviderError(Exception):
    """Raised when SerpAPI fails or reports an error in its response."""


class SerpApiClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        google_domain: str,
        gl: str,
        hl: str,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.google_domain = google_domain
        self.gl = gl
        self.hl = hl
        self.timeout = timeout

    async def search(self, q: str, location: str) -> Dict[str, Any]:
        """Run a Google search through SerpAPI and return the raw JSON body."""
        params = {
            "api_key": self.api_key,
            "engine": "google",
            "q": q,
            "location": location,
            "google_domain": self.google_domain,
            "gl": self.gl,
            "hl": self.hl,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.get(self.base_url, params=params)
                body = r.json()
        except httpx.RequestError as e:
            logger.warning("SerpAPI request failed: %s", e)
            raise SearchProviderError("Search provider unavailable") from e
        except ValueError as e:
            raise SearchProviderError("Invalid response") from e

        # SerpAPI reports failures as {"error": "..."}, often with a 4xx status
        if not isinstance(body, dict):
            raise SearchProviderError("Invalid response")
        if body.get("error"):
            logger.warning("SerpAPI error for q=%r: %s", q, body["error"])
            raise SearchProviderError(str(body["error"]))
        if r.status_code >= 400:
            raise SearchProviderError(f"Search provider returned HTTP {r.status_code}")
        return body


def extract_results(body: Dict[str, Any]) -> List[dict]:
    """Pick the first result list SerpAPI returned."""
    for key in RESULT_KEYS:
        if isinstance(body.get(key), list):
            return body[key]
    return []


def _category_extras(result: dict, category: OpportunityCategory) -> dict:
    if category == OpportunityCategory.jobs:
        return {"salary": result.get("salary")}
    if category == OpportunityCategory.internships:
        return {"duration": "3-6 months"}
    if category == OpportunityCategory.bootcamps:
        return {"duration": result.get("duration"), "cost": result.get("price")}
    if category == OpportunityCategory.hackathons:
        return {"date": result.get("date"), "prize": result.get("prize")}
    if category == OpportunityCategory.mentorship:
        return {"mentor": result.get("mentor"), "duration": "3 months"}
    if category == OpportunityCategory.remote:
        return {"remote": True}
    return {}


def format_results(results: Any, category: OpportunityCategory) -> List[dict]:
    """
    Map raw search results into uniform listings.

    Only the first MAX_LISTINGS results are kept. Missing fields fall back
    to placeholders; category extras that the result does not carry are
    left out of the listing.
    """
    if not isinstance(results, list):
        return []

    label = category.value
    stamp = int(time.time() * 1000)
    listings = []
    for index, result in enumerate(results[:MAX_LISTINGS]):
        if not isinstance(result, dict):
            continue
        listing = Opportunity(
            id=str(result.get("job_id") or result.get("event_id") or f"{index}-{stamp}"),
            title=result.get("title") or f"Untitled {label}",
            company=result.get("via") or result.get("source") or result.get("organizer") or "Unknown",
            location=result.get("location") or FALLBACK_LOCATION,
            description=(
                result.get("snippet")
                or result.get("description")
                or f"No description available for this {label}"
            ),
            link=result.get("link") or FALLBACK_LINK,
            **{k: v for k, v in _category_extras(result, category).items() if v is not None},
        )
        listings.append(listing.model_dump())
    return listings


async def fetch_opportunities(
    client: SerpApiClient,
    category: OpportunityCategory,
    q: Optional[str] = None,
    location: Optional[str] = None,
) -> List[dict]:
    """Search for a category and format the listings."""
    query = q or DEFAULT_QUERIES[category]
    where = location or get_settings().serpapi_default_location
    body = await client.search(query, where)
    return format_results(extract_results(body), category)


@lru_cache
def get_search_client() -> SerpApiClient:
    """Dependency - SerpAPI client built from settings."""
    s = get_settings()
    return SerpApiClient(
        api_key=s.serpapi_key,
        base_url=s.serpapi_base_url,
        google_domain=s.serpapi_google_domain,
        gl=s.serpapi_gl,
        hl=s.serpapi_hl,
        timeout=s.http_timeout_seconds,
    )
