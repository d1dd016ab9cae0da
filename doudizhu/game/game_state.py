"""游戏状态 - 一局斗地主的桌面、叫地主和结算状态"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from doudizhu.engine.card import Card
from doudizhu.engine.pattern import Pattern
from doudizhu.game.player import Player, Role


class GamePhase(str, Enum):
    """游戏阶段"""
    WAITING = "WAITING"         # 等待开始（大厅）
    BIDDING = "BIDDING"         # 叫地主
    PLAYING = "PLAYING"         # 出牌中
    FINISHED = "FINISHED"       # 已结束


@dataclass
class GameEvent:
    """游戏事件记录"""
    phase: GamePhase
    player_id: int
    action: str                  # "deal", "bid", "landlord", "redeal", "play", "pass", "clear", "finish"
    data: Any = None             # 叫地主 bool / Pattern / None


@dataclass
class GameState:
    """一局游戏的完整状态"""
    players: List[Player]
    phase: GamePhase = GamePhase.WAITING
    turn_order: List[int] = field(default_factory=lambda: [0, 1, 2])
    dizhu_cards: List[Card] = field(default_factory=list)

    # 叫地主相关
    first_bidder: int = 0                                   # 首叫玩家
    bids: Dict[int, Optional[bool]] = field(default_factory=dict)
    landlord: Optional[int] = None
    redeal_count: int = 0

    # 出牌相关
    current_player: int = 0                                 # 当前行动玩家（叫地主时为当前叫分者）
    last_pattern: Optional[Pattern] = None
    last_played_cards: List[Card] = field(default_factory=list)
    last_player: Optional[int] = None
    pass_count: int = 0                                     # 连续不出次数
    bomb_count: int = 0                                     # 本局炸弹/火箭数

    # 结算相关
    winner: Optional[int] = None
    is_spring: bool = False          # 春天
    is_anti_spring: bool = False     # 反春天
    multiplier: int = 1

    # 事件日志
    events: List[GameEvent] = field(default_factory=list)
    play_history: List[Tuple[int, Pattern]] = field(default_factory=list)

    def __post_init__(self):
        if not self.bids:
            self.bids = {pid: None for pid in self.turn_order}

    @property
    def is_table_open(self) -> bool:
        """桌面为空，可以任意出牌"""
        return self.last_pattern is None

    @property
    def landlord_wins(self) -> Optional[bool]:
        if self.winner is None:
            return None
        return self.players[self.winner].role == Role.LANDLORD

    def next_seat(self, pid: int) -> int:
        """按座次顺序的下一位玩家"""
        idx = self.turn_order.index(pid)
        return self.turn_order[(idx + 1) % len(self.turn_order)]

    def played_cards(self) -> List[Card]:
        """本局已经出过的所有牌"""
        cards: List[Card] = []
        for _, pattern in self.play_history:
            cards.extend(pattern.cards)
        return cards

    def all_cards(self) -> List[Card]:
        """三家手牌 + 底牌 + 已出的牌，应当恰好是一副完整的牌"""
        cards: List[Card] = []
        for p in self.players:
            cards.extend(p.hand)
        # 底牌并入地主手牌后只作展示，不再单独计数
        if self.landlord is None:
            cards.extend(self.dizhu_cards)
        cards.extend(self.played_cards())
        return cards
