import pytest

from core.aggregators import aggregate_chain_reports, bonus_respect, count_losses, count_revives
from core.models import AttackLogEntry, ChainReport, ReviveLogEntry


def chain_report(chain_id, bonuses=(), attackers=()):
    return ChainReport(
        id=chain_id,
        bonuses=[{"attacker_id": player, "respect": respect} for player, respect in bonuses],
        attackers=[{"id": player, "attacks": {"assists": assists}} for player, assists in attackers],
    )


def attack(defender, defender_faction, attacker, attacker_faction):
    return AttackLogEntry(
        id=defender * 1000 + attacker,
        attacker={"id": attacker, "faction_id": attacker_faction},
        defender={"id": defender, "faction_id": defender_faction},
    )


def revive(reviver, reviver_faction, target, target_faction):
    return ReviveLogEntry(
        id=reviver * 1000 + target,
        reviver={"id": reviver, "faction_id": reviver_faction},
        target={"id": target, "faction_id": target_faction},
    )


@pytest.mark.parametrize("respect,expected", [(0, 0), (5, 0), (10, 0), (10.5, 0.5), (40, 30)])
def test_bonus_respect_excludes_base(respect, expected):
    assert bonus_respect(respect) == expected


def test_chain_bonus_accumulates_across_chains():
    chains = aggregate_chain_reports([
        chain_report(1, bonuses=[(11, 5)]),
        chain_report(2, bonuses=[(11, 15)]),
    ])

    assert chains[11].bonus == 5


def test_chain_assists_accumulate_across_chains():
    chains = aggregate_chain_reports([
        chain_report(1, attackers=[(11, 2), (12, 1)]),
        chain_report(2, bonuses=[(12, 20)], attackers=[(11, 3)]),
        chain_report(3, attackers=[(13, 4)]),
    ])

    assert chains[11].assists == 5
    assert chains[11].bonus == 0
    assert chains[12].assists == 1
    assert chains[12].bonus == 10
    assert chains[13].assists == 4


def test_chain_attacker_without_counts():
    report = ChainReport(id=1, attackers=[{"id": 11}])

    assert aggregate_chain_reports([report])[11].assists == 0


def test_no_chains():
    assert aggregate_chain_reports([]) == {}


def test_losses_require_both_factions():
    pages = [
        [attack(11, 1, 21, 2), attack(11, 1, 22, 2)],
        [
            attack(12, 1, 21, 2),
            attack(12, 1, 31, 3),  # someone else's attack
            attack(21, 2, 11, 1),  # outgoing
            attack(13, 4, 21, 2),
        ],
    ]

    assert count_losses(pages, defender_faction_id=1, attacker_faction_id=2) == {11: 2, 12: 1}


def test_losses_skip_stealthed_attacks():
    stealthed = AttackLogEntry(id=1, attacker=None, defender={"id": 11, "faction_id": 1})

    assert count_losses([[stealthed]], 1, 2) == {}


def test_revives_within_faction():
    pages = [
        [revive(11, 1, 12, 1), revive(11, 1, 13, 1), revive(11, 1, 12, 1)],
        [revive(12, 1, 99, 5), revive(88, 5, 12, 1), revive(12, 1, 11, 1)],
    ]

    assert count_revives(pages, faction_id=1) == {11: 3, 12: 1}


def test_revives_empty_log():
    assert count_revives([], 1) == {}
