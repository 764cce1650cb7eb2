from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from utils.utils import to_number


class PayoutType(str, Enum):
    PER_ATTACK = "perAttack"
    PER_RESPECT = "perRespect"


class RewardSettings(BaseModel):
    """Reward pools and payout rules entered by the user for one calculation."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    api_key: str = Field(default="", alias="apiKey")
    attack_rewards: float = Field(default=0, alias="attackRewards")
    assist_rewards: float = Field(default=0, alias="assistRewards")
    med_out_rewards: float = Field(default=0, alias="medOutRewards")
    revive_rewards: float = Field(default=0, alias="reviveRewards")
    payout_type: PayoutType = Field(default=PayoutType.PER_ATTACK, alias="payoutType")
    ignore_chain_bonus: bool = Field(default=False, alias="ignoreChainBonus")
    min_med_outs: int = Field(default=0, alias="minMedOuts")

    @field_validator(
        "attack_rewards",
        "assist_rewards",
        "med_out_rewards",
        "revive_rewards",
        mode="before",
    )
    @classmethod
    def coerce_pool(cls, value):
        return to_number(value)

    @field_validator("min_med_outs", mode="before")
    @classmethod
    def coerce_min_med_outs(cls, value):
        return int(to_number(value))

    @field_validator("api_key", mode="before")
    @classmethod
    def strip_api_key(cls, value):
        return (value or "").strip()

    @field_validator("ignore_chain_bonus")
    @classmethod
    def only_for_respect_payouts(cls, value, info: ValidationInfo):
        if info.data.get("payout_type") != PayoutType.PER_RESPECT:
            return False
        return value


# --- Torn API payloads ---

class TornModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class FactionMember(TornModel):
    id: int
    name: str = ""
    level: int = 0
    attacks: int = 0
    score: float = 0


class WarFaction(TornModel):
    id: int
    name: str = ""
    score: float = 0
    attacks: int = 0
    members: List[FactionMember] = []


class RankedWarReport(TornModel):
    id: int
    start: int
    end: Optional[int] = None
    winner: Optional[int] = None
    forfeit: bool = False
    factions: List[WarFaction] = []


class ChainBonus(TornModel):
    attacker_id: int
    defender_id: Optional[int] = None
    chain: int = 0
    respect: float = 0


class ChainAttackerCounts(TornModel):
    total: int = 0
    assists: int = 0


class ChainAttacker(TornModel):
    id: int
    attacks: Optional[ChainAttackerCounts] = None


class ChainReport(TornModel):
    id: int
    faction_id: Optional[int] = None
    start: int = 0
    end: int = 0
    bonuses: List[ChainBonus] = []
    attackers: List[ChainAttacker] = []


class LogParticipant(TornModel):
    id: int
    faction_id: Optional[int] = None


class AttackLogEntry(TornModel):
    id: int
    code: str = ""
    started: int = 0
    ended: int = 0
    attacker: Optional[LogParticipant] = None
    defender: Optional[LogParticipant] = None
    result: str = ""
    respect_gain: float = 0
    respect_loss: float = 0


class ReviveLogEntry(TornModel):
    id: int
    reviver: Optional[LogParticipant] = None
    target: Optional[LogParticipant] = None
    result: str = ""
    timestamp: int = 0


class FactionRef(TornModel):
    id: int
    name: str = ""


class Opponent(TornModel):
    id: int
    name: str = ""
    level: int = 0
    faction: Optional[FactionRef] = None


class AttackModifiers(TornModel):
    fair_fight: float = 1
    war: float = 1
    retaliation: float = 1
    group: float = 1
    overseas: float = 1
    chain: float = 1
    warlord: float = 1


class UserAttack(TornModel):
    id: int
    code: str = ""
    started: int = 0
    ended: int = 0
    defender: Optional[Opponent] = None
    result: str = ""
    respect_gain: float = 0
    modifiers: AttackModifiers = AttackModifiers()


class MugData(TornModel):
    defender: int
    money_mugged: float = 0
    log: str = ""


class MugEvent(TornModel):
    id: str
    timestamp: int
    data: MugData


# --- Derived reports ---

class PlayerChainReport(BaseModel):
    id: int
    bonus: float = 0
    assists: int = 0


class WarReport(BaseModel):
    war_id: int
    faction_id: int
    faction_name: str
    opponent_id: int
    opponent_name: str
    start: int
    end: int
    members: List[FactionMember]
    total_attacks: int
    total_respect: float
    total_assists: int
    total_bonus_respect: float
    total_med_outs: int
    total_revives: int
    player_chain_reports: Dict[int, PlayerChainReport]
    player_med_outs: Dict[int, int]
    player_revives: Dict[int, int]


class WarStats(BaseModel):
    faction_name: str
    opponent_name: str
    ranked_war_id: int
    total_attacks: int
    reward_per_attack: Optional[float] = None
    total_respect: float
    reward_per_respect: Optional[float] = None
    total_assists: int
    reward_per_assist: float
    total_med_outs: int
    reward_per_med_out: float
    total_revives: int
    reward_per_revive: float


class UserStats(BaseModel):
    id: int
    name: str
    attacks: int = 0
    respect: float = 0
    bonus_respect: float = 0
    assists: int = 0
    med_outs: int = 0
    revives: int = 0
    reward_attack_respect: float = 0
    reward_assists: float = 0
    reward_med_outs: float = 0
    reward_revives: float = 0
    total_rewards: float = 0


class RewardResult(BaseModel):
    war_stats: WarStats
    user_stats: List[UserStats]


class WeightedUserAttack(BaseModel):
    id: str
    weighted_respect: float
    fair_fight: float
    wins: int = 0
    losses: int = 0
    stalemates: int = 0
    result: str
    defender: Opponent


class UserMug(BaseModel):
    defender: int
    timestamp: int
    amount: float
    times_mugged: int
    link: str


class AttackSummary(BaseModel):
    totals: Dict[str, int]
    attacks: List[WeightedUserAttack]


class MugTotals(BaseModel):
    mugs: int = 0
    total_mugged: float = 0


class MugSummary(BaseModel):
    totals: MugTotals
    mugs: List[UserMug]
