"""玩家模型 - 斗地主三人玩家的数据结构"""

from collections import Counter
from enum import Enum
from dataclasses import dataclass, field
from typing import Iterable, List

from doudizhu.engine.card import Card, sort_cards
from doudizhu.exceptions import IllegalMoveError


class Role(str, Enum):
    """玩家角色"""
    LANDLORD = "LANDLORD"   # 地主
    FARMER = "FARMER"       # 农民
    UNKNOWN = "UNKNOWN"     # 未确定


@dataclass
class Player:
    """
    一个座位上的玩家。
    手牌只在三处变化：发牌、地主收底牌、出牌。
    """
    id: int                          # 座位号 0/1/2
    name: str                        # 显示名
    hand: List[Card] = field(default_factory=list)
    role: Role = Role.UNKNOWN
    play_count: int = 0              # 本局出牌次数（春天判定）
    score: int = 0                   # 累计积分，跨局保留

    @property
    def hand_size(self) -> int:
        return len(self.hand)

    @property
    def is_landlord(self) -> bool:
        return self.role == Role.LANDLORD

    @property
    def is_out(self) -> bool:
        """牌已出完"""
        return not self.hand

    def sort_hand(self) -> None:
        self.hand = sort_cards(self.hand)

    def take_pile(self, pile: Iterable[Card]) -> None:
        """地主收下底牌"""
        self.hand.extend(pile)
        self.sort_hand()

    def missing_cards(self, cards: Iterable[Card]) -> List[Card]:
        """返回 cards 中手牌凑不出的那部分（按张数计，同一张牌选两次也算缺）"""
        wanted = Counter(cards)
        held = Counter(self.hand)
        return sort_cards(list((wanted - held).elements()))

    def has_cards(self, cards: Iterable[Card]) -> bool:
        return not self.missing_cards(cards)

    def remove_cards(self, cards: Iterable[Card]) -> None:
        """
        从手牌中移除指定的牌。
        任何一张不在手里就整体拒绝，手牌保持不变。
        """
        cards = list(cards)
        missing = self.missing_cards(cards)
        if missing:
            raise IllegalMoveError(f"玩家{self.id}手牌中没有: {missing}")
        for card in cards:
            self.hand.remove(card)

    def reset_for_new_game(self) -> None:
        """新一局重置（积分保留）"""
        self.hand.clear()
        self.role = Role.UNKNOWN
        self.play_count = 0
