from collections import defaultdict
from typing import Dict, Iterable, List

from core.models import AttackLogEntry, ChainReport, PlayerChainReport, ReviveLogEntry

# Every chain bonus hit carries a flat 10 respect that is not paid out
BASE_BONUS_RESPECT = 10


def bonus_respect(respect: float) -> float:
    return max(respect - BASE_BONUS_RESPECT, 0)


def aggregate_chain_reports(reports: Iterable[ChainReport]) -> Dict[int, PlayerChainReport]:
    """Fold bonus respect and assists per player across every chain report."""
    chains: Dict[int, PlayerChainReport] = {}

    for report in reports:
        for bonus in report.bonuses:
            player = chains.setdefault(bonus.attacker_id, PlayerChainReport(id=bonus.attacker_id))
            player.bonus += bonus_respect(bonus.respect)

        for attacker in report.attackers:
            player = chains.setdefault(attacker.id, PlayerChainReport(id=attacker.id))
            player.assists += attacker.attacks.assists if attacker.attacks else 0

    return chains


def count_losses(
    pages: Iterable[List[AttackLogEntry]], defender_faction_id: int, attacker_faction_id: int
) -> Dict[int, int]:
    """Count, per defender, the attacks made on them by the tracked attacking faction."""
    player_losses: Dict[int, int] = defaultdict(int)

    for page in pages:
        for attack in page:
            if not attack.attacker or not attack.defender:
                continue
            if attack.attacker.faction_id == attacker_faction_id and attack.defender.faction_id == defender_faction_id:
                player_losses[attack.defender.id] += 1

    return dict(player_losses)


def count_revives(pages: Iterable[List[ReviveLogEntry]], faction_id: int) -> Dict[int, int]:
    """Count, per reviver, the revives performed on members of their own faction."""
    player_revives: Dict[int, int] = defaultdict(int)

    for page in pages:
        for revive in page:
            if not revive.reviver or not revive.target:
                continue
            if revive.reviver.faction_id == faction_id and revive.target.faction_id == faction_id:
                player_revives[revive.reviver.id] += 1

    return dict(player_revives)
