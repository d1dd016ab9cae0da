"""出牌搜索 - 枚举一手牌在当前桌面下所有能出的牌型（供 AI 座位使用）"""

from itertools import combinations
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from collections import defaultdict

from .card import Card, Rank, sort_cards
from .pattern import Pattern, PatternKind
from .classifier import CHAIN_FORBIDDEN, classify, beats


Play = Tuple[Pattern, List[Card]]

# 各链式牌型的组数范围
STRAIGHT_LENGTHS = range(5, 13)
PAIR_SEQUENCE_LENGTHS = range(3, 11)
AIRPLANE_BODY_COUNTS = range(2, 7)

# 可组成顺子/连对/飞机的点数：3 ~ A
_CHAIN_RANKS = [int(r) for r in Rank if r not in CHAIN_FORBIDDEN]


def find_plays(hand: Iterable[Card], table: Optional[Pattern]) -> List[Play]:
    """
    枚举 hand 能压过 table 的所有出牌，返回 [(Pattern, cards)]。
    排序：(牌型优先级, 张数, 主牌点数) 升序，调用方取第一个即为"最小够用"的出法。
    纯函数：不修改 hand，每个候选的牌都直接取自原手牌。
    """
    by_rank = _group_by_rank(hand)

    # 1. 有火箭直接出火箭
    rocket = _rocket(by_rank)
    if rocket is not None and beats(rocket[0], table):
        return [rocket]

    # 2. 炸弹（小的在前，保留大炸弹）
    bombs = [p for p in _bombs(by_rank) if beats(p[0], table)]

    # 3. 桌面是炸弹/火箭，普通牌型不可能压过
    if table is not None and table.is_bomb_like:
        return bombs

    # 4. 普通牌型
    candidates = [p for p in _ordinary_plays(by_rank) if beats(p[0], table)]
    candidates.extend(bombs)

    # 5. 最小够用排序
    candidates.sort(key=lambda p: p[0].sort_key)
    return candidates


# ============================================================
#  辅助函数
# ============================================================

def _group_by_rank(hand: Iterable[Card]) -> Dict[int, List[Card]]:
    """按点数分组，组内按花色排序"""
    groups: Dict[int, List[Card]] = defaultdict(list)
    for card in sort_cards(list(hand)):
        groups[card.rank_order].append(card)
    return dict(groups)


def _take(by_rank: Dict[int, List[Card]], ranks: Iterable[int], count: int) -> List[Card]:
    """从每个点数中取 count 张（新列表，不共享）"""
    cards: List[Card] = []
    for r in ranks:
        cards.extend(by_rank[r][:count])
    return cards


def _play(cards: List[Card], expected: PatternKind) -> Optional[Play]:
    """用识别器复核候选，确保与 classify 的结论一致"""
    pattern = classify(cards)
    if pattern is None or pattern.kind != expected:
        return None
    return pattern, cards


def _runs(ranks: List[int], lengths: range) -> Iterator[List[int]]:
    """在可用点数中，枚举长度属于 lengths 的所有连续窗口（3 ~ A 之内）"""
    available = set(ranks)
    for length in lengths:
        for start in _CHAIN_RANKS:
            window = list(range(start, start + length))
            if window[-1] > Rank.ACE:
                break
            if all(r in available for r in window):
                yield window


def _ranks_with(by_rank: Dict[int, List[Card]], count: int) -> List[int]:
    return sorted(r for r, cards in by_rank.items() if len(cards) >= count)


# ============================================================
#  炸弹 / 火箭
# ============================================================

def _rocket(by_rank: Dict[int, List[Card]]) -> Optional[Play]:
    if Rank.BLACK_JOKER in by_rank and Rank.RED_JOKER in by_rank:
        cards = by_rank[Rank.BLACK_JOKER][:1] + by_rank[Rank.RED_JOKER][:1]
        return _play(cards, PatternKind.ROCKET)
    return None


def _bombs(by_rank: Dict[int, List[Card]]) -> List[Play]:
    bombs = []
    for r in sorted(by_rank):
        if len(by_rank[r]) == 4:
            play = _play(list(by_rank[r]), PatternKind.BOMB)
            if play is not None:
                bombs.append(play)
    return bombs


# ============================================================
#  普通牌型
# ============================================================

def _ordinary_plays(by_rank: Dict[int, List[Card]]) -> Iterator[Play]:
    generators = (
        _same_rank_plays,
        _triplet_with_kicker_plays,
        _straight_plays,
        _pair_sequence_plays,
        _airplane_plays,
    )
    for gen in generators:
        for play in gen(by_rank):
            if play is not None:
                yield play


_SAME_RANK_KINDS = ((1, PatternKind.SINGLE), (2, PatternKind.PAIR), (3, PatternKind.TRIPLET))


def _same_rank_plays(by_rank: Dict[int, List[Card]]) -> Iterator[Optional[Play]]:
    """单张 / 对子 / 三条"""
    for count, kind in _SAME_RANK_KINDS:
        for r in _ranks_with(by_rank, count):
            yield _play(by_rank[r][:count], kind)


def _triplet_with_kicker_plays(by_rank: Dict[int, List[Card]]) -> Iterator[Optional[Play]]:
    """三带一 / 三带一对：三条配任意其它点数的单张或对子"""
    for r in _ranks_with(by_rank, 3):
        body = by_rank[r][:3]
        for w in sorted(by_rank):
            if w == r:
                continue
            yield _play(body + by_rank[w][:1], PatternKind.TRIPLET_WITH_SINGLE)
            if len(by_rank[w]) >= 2:
                yield _play(body + by_rank[w][:2], PatternKind.TRIPLET_WITH_PAIR)


def _straight_plays(by_rank: Dict[int, List[Card]]) -> Iterator[Optional[Play]]:
    """顺子：5~12张"""
    for window in _runs(_ranks_with(by_rank, 1), STRAIGHT_LENGTHS):
        yield _play(_take(by_rank, window, 1), PatternKind.STRAIGHT)


def _pair_sequence_plays(by_rank: Dict[int, List[Card]]) -> Iterator[Optional[Play]]:
    """连对：3~10对"""
    for window in _runs(_ranks_with(by_rank, 2), PAIR_SEQUENCE_LENGTHS):
        yield _play(_take(by_rank, window, 2), PatternKind.PAIR_SEQUENCE)


def _airplane_plays(by_rank: Dict[int, List[Card]]) -> Iterator[Optional[Play]]:
    """
    飞机：每段≥2组的连续三条，可不带，或从其余点数中组合出等量的单张/对子作翅膀。
    同点数的牌可互换，翅膀按点数组合而不是按具体哪张牌组合。
    """
    triple_ranks = _ranks_with(by_rank, 3)
    for bodies in _runs(triple_ranks, AIRPLANE_BODY_COUNTS):
        body = _take(by_rank, bodies, 3)
        yield _play(body, PatternKind.AIRPLANE)

        others = [r for r in sorted(by_rank) if r not in bodies]
        k = len(bodies)
        for wings in combinations(others, k):
            yield _play(body + _take(by_rank, wings, 1), PatternKind.AIRPLANE_WITH_SINGLES)
        pair_ranks = [r for r in others if len(by_rank[r]) >= 2]
        for wings in combinations(pair_ranks, k):
            yield _play(body + _take(by_rank, wings, 2), PatternKind.AIRPLANE_WITH_PAIRS)
