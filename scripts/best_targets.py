import argparse

from dotenv import load_dotenv

from config import Config
from core.api_client import TornApiClient
from core.attack_service import AttackService
from core.logger import LoggerFactory

logger = LoggerFactory.get_logger(name="best_targets", log_file="best_targets.log")
load_dotenv()


def report_targets(service: AttackService, count: int, min_respect: float):
    summary = service.get_user_attacks(count, min_respect)
    logger.info(f"Results: {summary.totals}")

    for attack in summary.attacks:
        faction = attack.defender.faction.name if attack.defender.faction else "-"
        logger.info(
            f"{attack.defender.name} [{attack.defender.id}] ({faction}): "
            f"weighted respect {attack.weighted_respect:.2f}, fair fight {attack.fair_fight:.2f}, "
            f"W/L/S {attack.wins}/{attack.losses}/{attack.stalemates}"
        )


def report_mugs(service: AttackService, count: int):
    summary = service.get_mugs(count)
    logger.info(f"{summary.totals.mugs} mugs, ${summary.totals.total_mugged:,.0f} total")

    for mug in summary.mugs:
        logger.info(f"[{mug.defender}] mugged {mug.times_mugged}x for ${mug.amount:,.0f} - last: {mug.link}")


def main():
    parser = argparse.ArgumentParser(description="Rank recent opponents by weighted respect")
    parser.add_argument("--count", type=int, help="Number of recent attacks or mugs to read")
    parser.add_argument("--min-respect", type=float, default=0, help="Ignore attacks gaining less respect")
    parser.add_argument("--mugs", action="store_true", help="Summarise muggings instead")
    args = parser.parse_args()

    config = Config()
    api_client = TornApiClient(
        config.require_api_key(),
        base_url=config.base_url,
        timeout=config.request_timeout,
        mug_log_type=config.mug_log_type,
    )
    service = AttackService(api_client)

    if args.mugs:
        report_mugs(service, args.count or config.mug_count)
    else:
        report_targets(service, args.count or config.attack_count, args.min_respect)


if __name__ == "__main__":
    main()
