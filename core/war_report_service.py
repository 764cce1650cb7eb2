import logging
import time
from typing import Dict, Optional

from core.aggregators import aggregate_chain_reports, count_losses, count_revives
from core.api_client import TornApiClient
from core.models import PlayerChainReport, WarReport

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

class WarReportService:
    def __init__(self, api_client: TornApiClient):
        self.api_client = api_client

    def get_chain_reports(self, start: int, end: int) -> Dict[int, PlayerChainReport]:
        chain_ids = self.api_client.get_chain_ids(start, end)
        if not chain_ids:
            logger.info(f"No chains between {start} and {end}")
            return {}

        logger.info(f"Aggregating {len(chain_ids)} chain reports")
        reports = (self.api_client.get_chain_report(chain_id) for chain_id in chain_ids)
        return aggregate_chain_reports(report for report in reports if report)

    def get_losses(self, defender: int, attacker: int, start: int, end: int) -> Dict[int, int]:
        return count_losses(self.api_client.iter_losses(start, end), defender, attacker)

    def get_revives(self, faction_id: int, start: int, end: int) -> Dict[int, int]:
        return count_revives(self.api_client.iter_revives(start, end), faction_id)

    def get_war_report(self) -> Optional[WarReport]:
        """
        Assemble the faction's last ranked war with its chain, loss and revive aggregates.

        Returns None as soon as a prerequisite (faction, ended war, war report,
        faction or opponent entry) is missing.
        """
        faction_id = self.api_client.get_faction_id()
        if not faction_id:
            logger.info("API key is not attached to a faction")
            return None

        war_id = self.api_client.get_last_war_id(faction_id)
        if not war_id:
            logger.info(f"Faction {faction_id} has no ended ranked wars")
            return None

        ranked_war = self.api_client.get_ranked_war_report(war_id)
        if not ranked_war:
            logger.info(f"No ranked war report for war {war_id}")
            return None

        faction = next((x for x in ranked_war.factions if x.id == faction_id), None)
        opponent = next((x for x in ranked_war.factions if x.id != faction_id), None)
        if not faction or not opponent:
            logger.info(f"War {war_id} report is missing a participant")
            return None

        start = ranked_war.start
        end = ranked_war.end or int(time.time())
        logger.info(f"Building war report for {faction.name} vs {opponent.name} ({start} - {end})")

        player_chain_reports = self.get_chain_reports(start, end)
        player_med_outs = self.get_losses(faction.id, opponent.id, start, end)
        player_revives = self.get_revives(faction.id, start, end)

        return WarReport(
            war_id=ranked_war.id,
            faction_id=faction.id,
            faction_name=faction.name,
            opponent_id=opponent.id,
            opponent_name=opponent.name,
            start=start,
            end=end,
            members=faction.members,
            total_attacks=faction.attacks,
            total_respect=faction.score,
            total_assists=sum(x.assists for x in player_chain_reports.values()),
            total_bonus_respect=sum(x.bonus for x in player_chain_reports.values()),
            total_med_outs=sum(player_med_outs.values()),
            total_revives=sum(player_revives.values()),
            player_chain_reports=player_chain_reports,
            player_med_outs=player_med_outs,
            player_revives=player_revives,
        )
