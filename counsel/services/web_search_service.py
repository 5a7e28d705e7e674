"""
Web search service backed by the Brave Search API.
Supplies recent legal sources to the research and examination plugins.
"""

import logging
import re
from calendar import monthrange
from datetime import datetime, timedelta, UTC
from typing import List, Optional

import httpx

from counsel.config import settings
from counsel.models.search import WebResult

logger = logging.getLogger(__name__)

LEGAL_QUERY_SUFFIX = (
    "site:*.gov site:*.edu site:*.org legal case law statute 2020..2025 "
    "-inurl:(signup login advertisement)"
)

_AGE_PATTERN = re.compile(r"^\s*(\d+)\s+(minute|hour|day|week|month|year)s?\b", re.IGNORECASE)


def shift_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_age(age: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Convert a Brave 'age' string such as '3 days ago' into a UTC datetime."""
    if not age:
        return None
    match = _AGE_PATTERN.match(age)
    if not match:
        return None

    amount = int(match.group(1))
    unit = match.group(2).lower()
    now = now or datetime.now(UTC)

    if unit == "minute":
        return now - timedelta(minutes=amount)
    if unit == "hour":
        return now - timedelta(hours=amount)
    if unit == "day":
        return now - timedelta(days=amount)
    if unit == "week":
        return now - timedelta(weeks=amount)
    if unit == "month":
        return shift_months(now, -amount)
    return shift_months(now, -12 * amount)


def format_web_results(results: List[WebResult]) -> str:
    """Render web results as a markdown block for LLM prompts."""
    if not results:
        return "No web search results found."

    lines = ["## Web Search Results"]
    for result in results:
        lines.append(f"### {result.title}")
        if result.source:
            lines.append(f"**Source:** {result.source}")
        if result.published_date:
            published = result.published_date
            lines.append(f"**Published:** {published.strftime('%B')} {published.day}, {published.year}")
        lines.append(f"**URL:** {result.url}")
        lines.append(result.description)
        lines.append("")
    return "\n".join(lines)


def curated_legal_results(query: str, limit: int = 5) -> List[WebResult]:
    """Static research starting points used when live search yields nothing."""
    now = datetime.now(UTC)
    normalized = query.lower()
    results: List[WebResult] = []

    if "contract" in normalized or "breach" in normalized:
        results.append(WebResult(
            title="Breach of Contract Principles",
            description="Discusses material breach, remedies, and defenses like waiver.",
            url="https://www.law.cornell.edu/wex/breach_of_contract",
            published_date=shift_months(now, -3),
            source="Cornell LII",
        ))
        results.append(WebResult(
            title="Recent Contract Cases",
            description="Summaries of 2020-2025 breach cases with payment delay issues.",
            url="https://www.justia.com/business/contracts/breach/",
            published_date=shift_months(now, -1),
            source="Justia",
        ))

    if "force majeure" in normalized:
        results.append(WebResult(
            title="Force Majeure in Contracts",
            description="Explains scope of force majeure clauses, excluding operational issues.",
            url="https://www.findlaw.com/business/contracts/force-majeure.html",
            published_date=shift_months(now, -2),
            source="FindLaw",
        ))

    if len(results) < limit:
        results.append(WebResult(
            title="Contract Law Research Guide",
            description="Strategies for finding case law and statutes.",
            url="https://www.americanbar.org/resources/contracts/",
            published_date=shift_months(now, -4),
            source="ABA",
        ))

    logger.info("Curated web search generated %d results", len(results))
    return results[:limit]


class WebSearchService:
    """Service for querying Brave Search."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        max_results: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.BRAVE_SEARCH_API_KEY if api_key is None else api_key
        self.url = url or settings.BRAVE_SEARCH_URL
        self.max_results = max_results or settings.MAX_WEB_RESULTS
        self.timeout = timeout or settings.BRAVE_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def raw_search(self, query: str, count: Optional[int] = None) -> List[dict]:
        """
        Run a Brave web search and return the raw `web.results` entries.

        Raises httpx errors on transport failures or non-2xx status codes.
        """
        params = {"q": query}
        if count:
            params["count"] = count
        headers = {
            "Accept": "application/json",
            "X-Subscription-Token": self.api_key,
        }
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.url, params=params, headers=headers)
            response.raise_for_status()
            body = response.json()

        web = body.get("web") if isinstance(body, dict) else None
        if not isinstance(web, dict):
            return []
        results = web.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    async def brave_search(self, query: str) -> List[WebResult]:
        """Search recent authoritative legal sources. Failures yield []."""
        if not self.enabled:
            logger.warning("Brave Search API key missing, skipping Brave search")
            return []

        enhanced_query = f"{query} {LEGAL_QUERY_SUFFIX}"
        try:
            raw = await self.raw_search(enhanced_query, count=self.max_results)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Brave Search failed with status %s: %s",
                e.response.status_code, e.response.text,
            )
            return []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Brave Search error: %s", e)
            return []

        results = [
            WebResult(
                title=r.get("title") or "",
                description=r.get("description") or "",
                url=r.get("url") or "",
                published_date=parse_age(r.get("age")),
                source="Brave Search",
            )
            for r in raw[:self.max_results]
        ]
        if not results:
            logger.warning("No web results found from Brave Search")
        else:
            logger.info("Brave Search returned %d results", len(results))
        return results

    async def search(self, query: str, allow_fallback: bool = True) -> List[WebResult]:
        """
        Search the web for a legal query.

        With `allow_fallback`, curated sources are returned when Brave
        produces nothing.
        """
        logger.info("Starting web search for: %s", query)
        results = await self.brave_search(query)
        if results or not allow_fallback:
            return results

        logger.warning("Brave Search returned no results, falling back to curated sources")
        return curated_legal_results(query, self.max_results)


web_search_service = WebSearchService()
