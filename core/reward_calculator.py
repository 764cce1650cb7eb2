import logging
from typing import List, Optional

from core.api_client import TornApiClient
from core.models import (
    FactionMember,
    PayoutType,
    RewardResult,
    RewardSettings,
    UserStats,
    WarReport,
    WarStats,
)
from core.war_report_service import WarReportService
from utils.utils import blank

logger = logging.getLogger(__name__)

CHAIN_BONUS_THRESHOLD = 10


def rate(pool: float, denominator: float) -> float:
    """Reward per unit; a zero denominator yields the whole pool."""
    return pool / (denominator or 1)


class RewardCalculator:
    """Splits the reward pools of a war between the faction's members."""

    def __init__(self, settings: RewardSettings):
        self.settings = settings

    def get_war_stats(self, war_report: WarReport) -> WarStats:
        settings = self.settings
        calculated_respect = max(war_report.total_respect - war_report.total_bonus_respect, 0)
        per_attack = settings.payout_type == PayoutType.PER_ATTACK

        return WarStats(
            faction_name=war_report.faction_name,
            opponent_name=war_report.opponent_name,
            ranked_war_id=war_report.war_id,
            total_attacks=war_report.total_attacks,
            reward_per_attack=rate(settings.attack_rewards, war_report.total_attacks) if per_attack else None,
            total_respect=war_report.total_respect,
            reward_per_respect=None if per_attack else rate(settings.attack_rewards, calculated_respect),
            total_assists=war_report.total_assists,
            reward_per_assist=rate(settings.assist_rewards, war_report.total_assists),
            total_med_outs=war_report.total_med_outs,
            reward_per_med_out=rate(settings.med_out_rewards, war_report.total_med_outs),
            total_revives=war_report.total_revives,
            reward_per_revive=rate(settings.revive_rewards, war_report.total_revives),
        )

    def get_user_stats(self, member: FactionMember, war_report: WarReport, war_stats: WarStats) -> UserStats:
        settings = self.settings
        chain_report = war_report.player_chain_reports.get(member.id)
        player_bonus = chain_report.bonus if chain_report else None
        player_assists = chain_report.assists if chain_report else None
        player_med_outs = war_report.player_med_outs.get(member.id, 0)
        player_revives = war_report.player_revives.get(member.id, 0)

        player_respect = member.score
        if (
            settings.payout_type == PayoutType.PER_RESPECT
            and settings.ignore_chain_bonus
            and (player_bonus or 0) > CHAIN_BONUS_THRESHOLD
        ):
            # NOTE: min() of a positive number and 0 is always 0, so this never changes respect
            player_respect -= min(player_bonus - CHAIN_BONUS_THRESHOLD, 0)

        if settings.payout_type == PayoutType.PER_ATTACK:
            reward_attack_respect = member.attacks * (war_stats.reward_per_attack or 0)
        else:
            reward_attack_respect = player_respect * (war_stats.reward_per_respect or 0)

        reward_assists = (player_assists or 0) * war_stats.reward_per_assist
        reward_med_outs = player_med_outs * war_stats.reward_per_med_out
        if player_med_outs < settings.min_med_outs:
            reward_med_outs = 0
        reward_revives = player_revives * war_stats.reward_per_revive
        total_rewards = reward_attack_respect + reward_assists + reward_med_outs + reward_revives

        return UserStats(
            id=member.id,
            name=member.name,
            attacks=blank(member.attacks),
            respect=blank(member.score),
            bonus_respect=blank(player_bonus),
            assists=blank(player_assists),
            med_outs=blank(player_med_outs),
            revives=blank(player_revives),
            reward_attack_respect=blank(reward_attack_respect),
            reward_assists=blank(reward_assists),
            reward_med_outs=blank(reward_med_outs),
            reward_revives=blank(reward_revives),
            total_rewards=blank(total_rewards),
        )

    def calculate(self, war_report: WarReport) -> RewardResult:
        war_stats = self.get_war_stats(war_report)

        user_stats: List[UserStats] = []
        for member in war_report.members:
            stats = self.get_user_stats(member, war_report, war_stats)
            # Only members who earned something are reported
            if any(
                [
                    stats.reward_attack_respect,
                    stats.reward_assists,
                    stats.reward_med_outs,
                    stats.reward_revives,
                    stats.total_rewards,
                ]
            ):
                user_stats.append(stats)

        logger.info(f"{len(user_stats)} of {len(war_report.members)} members earned rewards in war {war_report.war_id}")
        return RewardResult(war_stats=war_stats, user_stats=user_stats)


def calculate_rewards(settings: RewardSettings, api_client: Optional[TornApiClient] = None) -> Optional[RewardResult]:
    """Fetch the last war for the settings' API key and split the reward pools."""
    api_client = api_client or TornApiClient(settings.api_key)
    war_report = WarReportService(api_client).get_war_report()

    if not war_report:
        return None

    return RewardCalculator(settings).calculate(war_report)
