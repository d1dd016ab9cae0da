"""牌型定义 - 斗地主12种合法牌型"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple

from .card import Card


class PatternKind(str, Enum):
    """牌型枚举"""
    SINGLE = "SINGLE"                                # 单张
    PAIR = "PAIR"                                    # 对子
    TRIPLET = "TRIPLET"                              # 三条
    TRIPLET_WITH_SINGLE = "TRIPLET_WITH_SINGLE"      # 三带一
    TRIPLET_WITH_PAIR = "TRIPLET_WITH_PAIR"          # 三带一对
    STRAIGHT = "STRAIGHT"                            # 顺子 (5~12张)
    PAIR_SEQUENCE = "PAIR_SEQUENCE"                  # 连对 (≥3对)
    AIRPLANE = "AIRPLANE"                            # 飞机不带
    AIRPLANE_WITH_SINGLES = "AIRPLANE_WITH_SINGLES"  # 飞机带单
    AIRPLANE_WITH_PAIRS = "AIRPLANE_WITH_PAIRS"      # 飞机带对
    BOMB = "BOMB"                                    # 炸弹
    ROCKET = "ROCKET"                                # 火箭(王炸)


class Wings(str, Enum):
    """飞机的翅膀类型"""
    NONE = "NONE"
    SINGLES = "SINGLES"
    PAIRS = "PAIRS"


_AIRPLANE_WINGS = {
    PatternKind.AIRPLANE: Wings.NONE,
    PatternKind.AIRPLANE_WITH_SINGLES: Wings.SINGLES,
    PatternKind.AIRPLANE_WITH_PAIRS: Wings.PAIRS,
}

# 出牌候选排序用：普通牌型在前，炸弹其次，火箭最后
KIND_PRIORITY = {kind: i for i, kind in enumerate(PatternKind)}

# 火箭的比较值，高于任何炸弹
ROCKET_ORDER = 100


@dataclass(frozen=True)
class Pattern:
    """一手出牌的结构化表示"""
    kind: PatternKind
    primary_rank_order: int   # 主牌点数（用于比较大小）
    length: int               # 总张数，同牌型不同张数不可比较
    cards: Tuple[Card, ...]

    @property
    def wings(self) -> Optional[Wings]:
        return _AIRPLANE_WINGS.get(self.kind)

    @property
    def is_bomb_like(self) -> bool:
        return self.kind in (PatternKind.BOMB, PatternKind.ROCKET)

    @property
    def sort_key(self) -> Tuple[int, int, int]:
        return (KIND_PRIORITY[self.kind], self.length, self.primary_rank_order)

    def __repr__(self) -> str:
        cards_str = " ".join(c.display for c in self.cards)
        return f"[{self.kind.value}] {cards_str}"
