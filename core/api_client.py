from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urljoin
from core.models import (
    AttackLogEntry,
    ChainReport,
    MugEvent,
    RankedWarReport,
    ReviveLogEntry,
    UserAttack,
)
import requests
import logging


class TornApiClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.torn.com/v2/",
        timeout: float = 30,
        mug_log_type: int = 8160,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.mug_log_type = mug_log_type
        self.headers = {
            "accept": "application/json",
            "Authorization": f"ApiKey {api_key}",
        }
        self.logger = logging.getLogger(self.__class__.__name__)

    def fetch(self, path: str, query: Optional[Dict[str, Any]] = None) -> Dict:
        """Raw API request - GETs one page and returns the decoded body"""
        url = urljoin(self.base_url, path)
        self.logger.debug(f"GET {url} {query or ''}")

        response = requests.get(
            url,
            headers=self.headers,
            params=query,
            timeout=self.timeout,
        )
        response.raise_for_status()

        try:
            output = response.json()
        except ValueError as e:
            self.logger.error(f"Error decoding JSON response: {e}")
            self.logger.error(f"Response content: {response.text}")
            raise

        if output and "error" in output:
            error = output["error"]
            if isinstance(error, dict):
                error = error.get("error", error)
            self.logger.error(f"Torn API error for {path}: {error}")
            raise ValueError(f"API error: {error}")

        return output or {}

    def paginate(
        self, path: str, query: Optional[Dict[str, Any]], records_key: str
    ) -> Iterator[List[Dict]]:
        """Yield the record list of each page, following `_metadata.links.next`.

        Stops on the first empty page or when no continuation link is left.
        """
        page = self.fetch(path, query)

        while True:
            records = page.get(records_key) or []
            if not records:
                return

            yield records

            next_link = ((page.get("_metadata") or {}).get("links") or {}).get("next")
            if not next_link:
                return

            page = self.fetch(next_link)

    def get_faction_id(self) -> Optional[int]:
        faction_info = self.fetch("faction/basic")

        return (faction_info.get("basic") or {}).get("id")

    def get_last_war_id(self, faction_id: Optional[int]) -> Optional[int]:
        """Id of the most recent ranked war that has ended."""
        if not faction_id:
            return None

        wars = self.fetch(f"faction/{faction_id}/rankedwars")

        for war in wars.get("rankedwars") or []:
            if war.get("end"):
                return war.get("id")
        return None

    def get_ranked_war_report(self, war_id: int) -> Optional[RankedWarReport]:
        report = self.fetch(f"faction/{war_id}/rankedwarreport")

        if not report.get("rankedwarreport"):
            return None
        return RankedWarReport(**report["rankedwarreport"])

    def get_chain_ids(self, start: int, end: int) -> List[int]:
        chains = self.fetch(
            "faction/chains",
            {"limit": 100, "sort": "ASC", "from": start, "to": end},
        )

        return [chain["id"] for chain in chains.get("chains") or []]

    def get_chain_report(self, chain_id: int) -> Optional[ChainReport]:
        chain = self.fetch(f"faction/{chain_id}/chainreport")

        if not chain.get("chainreport"):
            return None
        return ChainReport(**chain["chainreport"])

    def _window_query(self, start: int, end: int, **extra) -> Dict[str, Any]:
        query: Dict[str, Any] = {"filters": "incoming", "limit": 1000, "sort": "ASC", "from": start, **extra}

        # end <= start leaves the window open-ended
        if end > start:
            query["to"] = end

        return query

    def iter_losses(self, start: int, end: int) -> Iterator[List[AttackLogEntry]]:
        """Incoming attacks on the faction in [start, end], one list per page."""
        for page in self.paginate("faction/attacksfull", self._window_query(start, end), "attacks"):
            yield [AttackLogEntry(**attack) for attack in page]

    def iter_revives(self, start: int, end: int) -> Iterator[List[ReviveLogEntry]]:
        """Incoming revives for the faction in [start, end], one list per page."""
        query = self._window_query(start, end, striptags="true")
        for page in self.paginate("faction/revivesFull", query, "revives"):
            yield [ReviveLogEntry(**revive) for revive in page]

    def get_user_attacks(self, count: int) -> List[UserAttack]:
        """The caller's most recent `count` attacks, newest first."""
        attacks: List[UserAttack] = []
        if count <= 0:
            return attacks

        query = {"filters": "outgoing", "limit": min(count, 100), "sort": "DESC"}
        for page in self.paginate("user/attacks", query, "attacks"):
            attacks.extend(UserAttack(**attack) for attack in page)
            if len(attacks) >= count:
                break

        return attacks[:count]

    def get_mugs(self, count: int) -> List[MugEvent]:
        """The caller's most recent `count` mugging log events, newest first."""
        mugs: List[MugEvent] = []
        if count <= 0:
            return mugs

        query = {"log": self.mug_log_type, "limit": min(count, 100), "sort": "DESC"}
        for page in self.paginate("user/log", query, "log"):
            mugs.extend(MugEvent(**event) for event in page)
            if len(mugs) >= count:
                break

        return mugs[:count]
