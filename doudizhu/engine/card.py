"""牌的定义 - 斗地主54张扑克牌的数据模型"""

from enum import IntEnum, Enum
from dataclasses import dataclass
from typing import List, Optional, Tuple
import random


class Rank(IntEnum):
    """点数枚举（数值即 rank_order，越大牌越大）"""
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14
    TWO = 15
    BLACK_JOKER = 16
    RED_JOKER = 17


class Suit(str, Enum):
    """花色枚举（大小王没有花色）"""
    SPADE = "♠"
    HEART = "♥"
    DIAMOND = "♦"
    CLUB = "♣"


# 点数显示映射
RANK_DISPLAY = {
    Rank.THREE: "3", Rank.FOUR: "4", Rank.FIVE: "5",
    Rank.SIX: "6", Rank.SEVEN: "7", Rank.EIGHT: "8",
    Rank.NINE: "9", Rank.TEN: "10", Rank.JACK: "J",
    Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A",
    Rank.TWO: "2", Rank.BLACK_JOKER: "小王", Rank.RED_JOKER: "大王",
}

JOKERS = (Rank.BLACK_JOKER, Rank.RED_JOKER)

# 一副牌的张数 / 每人手牌 / 底牌
DECK_SIZE = 54
HAND_SIZE = 17
PILE_SIZE = 3


@dataclass(frozen=True)
class Card:
    """一张扑克牌，大小王的 suit 为 None"""
    rank: Rank
    suit: Optional[Suit] = None

    def __post_init__(self):
        if self.is_joker and self.suit is not None:
            raise ValueError(f"王牌不能带花色: {self.suit}")
        if not self.is_joker and self.suit is None:
            raise ValueError(f"普通牌必须有花色: {self.rank!r}")

    @property
    def rank_order(self) -> int:
        """出牌比较用的大小，3→3 … A→14, 2→15, 小王→16, 大王→17"""
        return int(self.rank)

    @property
    def is_joker(self) -> bool:
        return self.rank in JOKERS

    @property
    def display(self) -> str:
        if self.is_joker:
            return RANK_DISPLAY[self.rank]
        return f"{self.suit.value}{RANK_DISPLAY[self.rank]}"

    def __repr__(self) -> str:
        return self.display

    def __lt__(self, other: "Card") -> bool:
        return self.sort_key < other.sort_key

    @property
    def sort_key(self) -> Tuple[int, str]:
        return (self.rank_order, self.suit.value if self.suit else "")


BLACK_JOKER_CARD = Card(Rank.BLACK_JOKER)
RED_JOKER_CARD = Card(Rank.RED_JOKER)


def create_deck() -> List[Card]:
    """创建一副54张标准扑克牌"""
    deck: List[Card] = []
    ranks = [r for r in Rank if r not in JOKERS]

    for rank in ranks:
        for suit in Suit:
            deck.append(Card(rank=rank, suit=suit))

    deck.append(BLACK_JOKER_CARD)
    deck.append(RED_JOKER_CARD)

    assert len(deck) == DECK_SIZE, f"牌数错误: {len(deck)}"
    return deck


def shuffle_and_deal(
    deck: List[Card], rng: Optional[random.Random] = None
) -> Tuple[List[Card], List[Card], List[Card], List[Card]]:
    """洗牌并发牌: 返回 (玩家1手牌, 玩家2手牌, 玩家3手牌, 底牌)"""
    shuffled = deck.copy()
    (rng or random).shuffle(shuffled)
    return deal(shuffled)


def deal(
    shuffled: List[Card],
) -> Tuple[List[Card], List[Card], List[Card], List[Card]]:
    """按已洗好的顺序发牌，不再打乱"""
    if len(shuffled) != DECK_SIZE or len(set(shuffled)) != DECK_SIZE:
        raise ValueError(f"发牌需要一副完整的{DECK_SIZE}张牌")

    hands = tuple(
        sort_cards(shuffled[i * HAND_SIZE:(i + 1) * HAND_SIZE]) for i in range(3)
    )
    pile = sort_cards(shuffled[3 * HAND_SIZE:])
    return hands[0], hands[1], hands[2], pile


def sort_cards(cards: List[Card]) -> List[Card]:
    """按点数排序手牌（从小到大）"""
    return sorted(cards, key=lambda c: c.sort_key)


def parse_card(text: str) -> Card:
    """
    从文本解析一张牌，如 "♠A", "♥10", "小王", "大王"。
    供 UI/测试 使用。
    """
    text = text.strip()
    for rank in JOKERS:
        if text == RANK_DISPLAY[rank]:
            return Card(rank)
    if len(text) < 2:
        raise ValueError(f"无法解析卡牌: {text!r}")
    suit_char, rank_text = text[0], text[1:].upper()
    try:
        suit = Suit(suit_char)
    except ValueError:
        raise ValueError(f"未知花色: {text!r}") from None
    for rank, shown in RANK_DISPLAY.items():
        if shown == rank_text:
            return Card(rank, suit)
    raise ValueError(f"未知点数: {text!r}")
