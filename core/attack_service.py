import logging
from collections import Counter
from typing import Dict, Iterable, List

from core.api_client import TornApiClient
from core.models import (
    AttackSummary,
    MugEvent,
    MugSummary,
    MugTotals,
    UserAttack,
    UserMug,
    WeightedUserAttack,
)

logger = logging.getLogger(__name__)

WIN_TYPES = ["Attacked", "Hospitalized", "Mugged"]
LOST_TYPE = "Lost"
STALEMATE_TYPE = "Stalemate"


def weigh_attack(attack: UserAttack) -> float:
    """Respect gained with the situational multipliers divided back out."""
    modifiers = attack.modifiers
    multiplier = (
        modifiers.chain
        * modifiers.group
        * modifiers.overseas
        * modifiers.retaliation
        * modifiers.war
        * modifiers.warlord
    )
    return attack.respect_gain / (multiplier or 1)


def group_attacks(attacks: Iterable[UserAttack]) -> List[WeightedUserAttack]:
    """
    One record per opponent, keeping the attack with the highest weighted
    respect and tallying wins, losses and stalemates against them.
    """
    groups: Dict[int, WeightedUserAttack] = {}

    for attack in attacks:
        if attack.defender is None:
            continue

        win = attack.result in WIN_TYPES
        loss = attack.result == LOST_TYPE
        stalemate = attack.result == STALEMATE_TYPE
        record = WeightedUserAttack(
            id=attack.code,
            weighted_respect=weigh_attack(attack),
            fair_fight=attack.modifiers.fair_fight,
            result=attack.result,
            defender=attack.defender,
        )

        existing = groups.get(attack.defender.id)
        if existing is None:
            existing = groups[attack.defender.id] = record
        elif record.weighted_respect > existing.weighted_respect:
            record.wins, record.losses, record.stalemates = existing.wins, existing.losses, existing.stalemates
            existing = groups[attack.defender.id] = record

        existing.wins += int(win)
        existing.losses += int(loss)
        existing.stalemates += int(stalemate)

    return list(groups.values())


def summarise_mugs(events: Iterable[MugEvent]) -> List[UserMug]:
    """Total mugged per victim, linking to the most recent mugging."""
    groups: Dict[int, UserMug] = {}

    for event in events:
        existing = groups.get(event.data.defender)
        if existing is None:
            groups[event.data.defender] = UserMug(
                defender=event.data.defender,
                timestamp=event.timestamp,
                amount=event.data.money_mugged,
                times_mugged=1,
                link=event.data.log,
            )
            continue

        existing.times_mugged += 1
        existing.amount += event.data.money_mugged
        if event.timestamp >= existing.timestamp:
            existing.timestamp = event.timestamp
            existing.link = event.data.log

    return sorted(groups.values(), key=lambda x: x.amount, reverse=True)


class AttackService:
    def __init__(self, api_client: TornApiClient):
        self.api_client = api_client

    def get_user_attacks(self, count: int, min_respect: float = 0) -> AttackSummary:
        """Rank recent opponents by the best weighted respect won from them."""
        user_attacks = self.api_client.get_user_attacks(count)
        logger.info(f"Weighing {len(user_attacks)} attacks")

        totals = dict(Counter(x.result for x in user_attacks))
        eligible = [x for x in user_attacks if x.respect_gain >= min_respect]

        attacks = [x for x in group_attacks(eligible) if x.wins > 0 and x.weighted_respect > 0]
        attacks.sort(key=lambda x: x.weighted_respect, reverse=True)

        return AttackSummary(totals=totals, attacks=attacks)

    def get_mugs(self, count: int) -> MugSummary:
        events = self.api_client.get_mugs(count)
        logger.info(f"Summarising {len(events)} muggings")

        totals = MugTotals(
            mugs=len(events),
            total_mugged=sum(x.data.money_mugged for x in events),
        )

        return MugSummary(totals=totals, mugs=summarise_mugs(events))
