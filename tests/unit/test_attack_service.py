import pytest
from unittest.mock import MagicMock
from core.api_client import TornApiClient
from core.attack_service import AttackService, group_attacks, summarise_mugs, weigh_attack
from core.models import AttackSummary, MugEvent, MugSummary, UserAttack


def user_attack(code, defender_id, respect_gain, result="Hospitalized", **modifiers):
    return UserAttack(
        id=ord(code[0]),
        code=code,
        defender={"id": defender_id, "name": f"player{defender_id}", "level": 20},
        result=result,
        respect_gain=respect_gain,
        modifiers={"fair_fight": 2.5, **modifiers},
    )


def mug(event_id, defender, timestamp, amount):
    return MugEvent(
        id=event_id,
        timestamp=timestamp,
        data={"defender": defender, "money_mugged": amount, "log": f"log-{event_id}"},
    )


@pytest.fixture
def mock_api_client():
    client = MagicMock(spec=TornApiClient)
    client.get_user_attacks.return_value = [
        user_attack("a", 1, 3),
        user_attack("b", 1, 7),
        user_attack("c", 2, 4, result="Lost"),
        user_attack("d", 3, 8, chain=2),
        user_attack("e", 3, 1, result="Stalemate"),
        user_attack("f", 4, 0, result="Mugged"),
    ]
    client.get_mugs.return_value = [
        mug("m1", 9, 100, 1000),
        mug("m2", 9, 200, 500),
        mug("m3", 8, 150, 3000),
    ]
    return client


@pytest.fixture
def attack_service(mock_api_client):
    return AttackService(api_client=mock_api_client)


def test_weigh_attack_removes_modifiers():
    attack = user_attack("a", 1, 10, chain=2, group=1, overseas=1, retaliation=1, war=1, warlord=1)

    assert weigh_attack(attack) == 5


def test_weigh_attack_all_modifiers():
    attack = user_attack("a", 1, 12, chain=1.5, war=2, overseas=1.25, retaliation=1.5, group=1, warlord=1)

    assert weigh_attack(attack) == pytest.approx(12 / (1.5 * 2 * 1.25 * 1.5))


def test_group_keeps_best_attack():
    groups = group_attacks([user_attack("a", 1, 3), user_attack("b", 1, 7), user_attack("c", 1, 7)])

    assert len(groups) == 1
    assert groups[0].id == "b"
    assert groups[0].weighted_respect == 7
    assert groups[0].wins == 3


def test_group_tallies_results():
    groups = group_attacks([
        user_attack("a", 1, 5),
        user_attack("b", 1, 0, result="Lost"),
        user_attack("c", 1, 0, result="Stalemate"),
        user_attack("d", 1, 0, result="Escape"),
        user_attack("e", 1, 6, result="Mugged"),
    ])

    assert groups[0].id == "e"
    assert (groups[0].wins, groups[0].losses, groups[0].stalemates) == (2, 1, 1)
    assert groups[0].fair_fight == 2.5


def test_get_user_attacks(attack_service, mock_api_client):
    summary = attack_service.get_user_attacks(6)

    assert isinstance(summary, AttackSummary)
    mock_api_client.get_user_attacks.assert_called_once_with(6)
    assert summary.totals == {"Hospitalized": 3, "Lost": 1, "Stalemate": 1, "Mugged": 1}
    assert [x.defender.id for x in summary.attacks] == [1, 3]
    assert summary.attacks[0].weighted_respect == 7
    assert summary.attacks[1].weighted_respect == 4
    assert summary.attacks[1].stalemates == 1


def test_get_user_attacks_min_respect(attack_service):
    summary = attack_service.get_user_attacks(6, min_respect=5)

    assert [x.id for x in summary.attacks] == ["b", "d"]
    assert summary.attacks[0].wins == 1


def test_summarise_mugs_keeps_latest_link():
    mugs = summarise_mugs([mug("m2", 9, 200, 500), mug("m1", 9, 100, 1000)])

    assert len(mugs) == 1
    assert mugs[0].times_mugged == 2
    assert mugs[0].amount == 1500
    assert mugs[0].link == "log-m2"
    assert mugs[0].timestamp == 200


def test_summarise_mugs_same_timestamp_keeps_later_event():
    mugs = summarise_mugs([mug("m1", 9, 100, 1000), mug("m2", 9, 100, 500)])

    assert mugs[0].times_mugged == 2
    assert mugs[0].amount == 1500
    assert mugs[0].link == "log-m2"


def test_get_mugs(attack_service):
    summary = attack_service.get_mugs(3)

    assert isinstance(summary, MugSummary)
    assert summary.totals.mugs == 3
    assert summary.totals.total_mugged == 4500
    assert [x.defender for x in summary.mugs] == [8, 9]
    assert summary.mugs[1].link == "log-m2"
