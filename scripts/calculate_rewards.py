import argparse
import json
import logging

from dotenv import load_dotenv

from config import Config
from core.api_client import TornApiClient
from core.models import RewardResult
from core.reward_calculator import calculate_rewards
from settings.load_settings import get_reward_settings

logger = logging.getLogger(__name__)
load_dotenv()


def log_result(result: RewardResult):
    war_stats = result.war_stats
    logger.info(f"War {war_stats.ranked_war_id}: {war_stats.faction_name} vs {war_stats.opponent_name}")
    logger.info(
        f"Attacks: {war_stats.total_attacks}, respect: {war_stats.total_respect:.2f}, "
        f"assists: {war_stats.total_assists}, med-outs: {war_stats.total_med_outs}, "
        f"revives: {war_stats.total_revives}"
    )
    if war_stats.reward_per_attack is not None:
        logger.info(f"Reward per attack: ${war_stats.reward_per_attack:,.0f}")
    if war_stats.reward_per_respect is not None:
        logger.info(f"Reward per respect: ${war_stats.reward_per_respect:,.0f}")
    logger.info(
        f"Reward per assist: ${war_stats.reward_per_assist:,.0f}, "
        f"per med-out: ${war_stats.reward_per_med_out:,.0f}, "
        f"per revive: ${war_stats.reward_per_revive:,.0f}"
    )

    for user in result.user_stats:
        logger.info(
            f"{user.name} [{user.id}]: attacks {user.attacks:.0f}, respect {user.respect:.2f}, "
            f"assists {user.assists:.0f}, med-outs {user.med_outs:.0f}, revives {user.revives:.0f} "
            f"-> ${user.total_rewards:,.0f}"
        )


def main(save: bool = False):
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
    )

    config = Config()
    settings = get_reward_settings(config)
    api_client = TornApiClient(
        config.require_api_key(settings.api_key),
        base_url=config.base_url,
        timeout=config.request_timeout,
    )

    result = calculate_rewards(settings, api_client)
    if not result:
        logger.info("No ranked war data available")
        return

    log_result(result)

    if save:
        output = config.reports_dir / f"war_{result.war_stats.ranked_war_id}_rewards.json"
        with open(output, "w") as f:
            json.dump(result.model_dump(), f, indent=2)
        logger.info(f"Wrote rewards to {output}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Split war reward pools between faction members")
    parser.add_argument("--save", action="store_true", help="Write the rewards as JSON under outputs/reports")
    args = parser.parse_args()
    main(args.save)
