"""apply_* 操作的结果 - 成功的结果对象，或带原因的拒绝"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from doudizhu.engine.card import Card
from doudizhu.engine.pattern import Pattern
from doudizhu.exceptions import (
    DoudizhuError,
    IllegalMoveError,
    InvalidPatternError,
    NotYourTurnError,
    StaleBidError,
)


class RejectReason(str, Enum):
    """拒绝原因"""
    INVALID_PATTERN = "INVALID_PATTERN"   # 不构成合法牌型
    ILLEGAL_MOVE = "ILLEGAL_MOVE"         # 压不过 / 阶段不对 / 没有这些牌
    NOT_YOUR_TURN = "NOT_YOUR_TURN"       # 不是该玩家的回合
    STALE_BID = "STALE_BID"               # 过期或重复的叫分


_REASON_BY_ERROR = {
    InvalidPatternError: RejectReason.INVALID_PATTERN,
    IllegalMoveError: RejectReason.ILLEGAL_MOVE,
    NotYourTurnError: RejectReason.NOT_YOUR_TURN,
    StaleBidError: RejectReason.STALE_BID,
}


@dataclass(frozen=True)
class Rejected:
    """操作被拒绝，状态没有任何改变"""
    player_id: int
    reason: RejectReason
    message: str = ""

    @property
    def accepted(self) -> bool:
        return False

    @classmethod
    def from_error(cls, player_id: int, error: DoudizhuError) -> "Rejected":
        reason = _REASON_BY_ERROR.get(type(error), RejectReason.ILLEGAL_MOVE)
        return cls(player_id, reason, str(error))


@dataclass(frozen=True)
class BidOutcome:
    """一次叫地主的结果"""
    player_id: int
    bid: bool
    resolved: bool = False               # 叫地主阶段是否结束
    landlord: Optional[int] = None       # 确定的地主
    redeal: bool = False                 # 三人都不叫，需要重新发牌
    next_player: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class PlayOutcome:
    """一次成功出牌的结果"""
    player_id: int
    pattern: Pattern
    cards: Tuple[Card, ...]
    game_over: bool = False
    winner: Optional[int] = None
    next_player: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class PassOutcome:
    """一次不出的结果"""
    player_id: int
    table_cleared: bool = False          # 连续两家不出，桌面清空
    next_player: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return True


BidResult = Union[BidOutcome, Rejected]
PlayResult = Union[PlayOutcome, Rejected]
PassResult = Union[PassOutcome, Rejected]
