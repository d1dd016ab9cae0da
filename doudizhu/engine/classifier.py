"""牌型识别与比较 - 识别一组牌的牌型，并判断能否压过桌面上的牌"""

from typing import Iterable, List, Optional
from collections import Counter

from .card import Card, Rank
from .pattern import Pattern, PatternKind, ROCKET_ORDER


# 顺子/连对/飞机中不允许出现的点数
CHAIN_FORBIDDEN = {Rank.TWO, Rank.BLACK_JOKER, Rank.RED_JOKER}

# 一次出牌的张数上限（地主满手牌）
MAX_PLAY_SIZE = 20


def classify(cards: Iterable[Card]) -> Optional[Pattern]:
    """
    识别一组牌的牌型。
    返回 Pattern 或 None（非法牌型）。结果与输入顺序无关。
    """
    cards = sorted(cards, key=lambda c: c.sort_key)
    n = len(cards)
    if n == 0 or n > MAX_PLAY_SIZE:
        return None

    rank_counts = Counter(c.rank_order for c in cards)

    # 按检测优先级依次尝试：特殊牌型必须先于顺子类
    # 火箭 > 炸弹 > 单张/对子/三条 > 带牌类 > 顺子 > 连对 > 飞机
    for detector in _DETECTORS:
        pattern = detector(cards, n, rank_counts)
        if pattern is not None:
            return pattern
    return None


# ============================================================
#  辅助函数
# ============================================================

def _make(kind: PatternKind, primary: int, cards: List[Card]) -> Pattern:
    return Pattern(kind, primary, len(cards), tuple(cards))


def _groups_by_count(rank_counts: Counter, count: int) -> List[int]:
    """返回出现恰好 count 次的所有点数，按点数排序"""
    return sorted(r for r, c in rank_counts.items() if c == count)


def is_chain(ranks: List[int]) -> bool:
    """已排序的 ranks 是否为不含2和王的连续点数"""
    if any(r in CHAIN_FORBIDDEN for r in ranks):
        return False
    return all(ranks[i + 1] - ranks[i] == 1 for i in range(len(ranks) - 1))


# ============================================================
#  基础牌型检测
# ============================================================

def _detect_rocket(cards: List[Card], n: int, rc: Counter) -> Optional[Pattern]:
    """火箭：小王 + 大王"""
    if n == 2 and Rank.BLACK_JOKER in rc and Rank.RED_JOKER in rc:
        return _make(PatternKind.ROCKET, ROCKET_ORDER, cards)
    return None


def _detect_bomb(cards: List[Card], n: int, rc: Counter) -> Optional[Pattern]:
    """炸弹：四张相同点数"""
    if n == 4 and len(rc) == 1:
        return _make(PatternKind.BOMB, next(iter(rc)), cards)
    return None


_SAME_RANK_KINDS = {1: PatternKind.SINGLE, 2: PatternKind.PAIR, 3: PatternKind.TRIPLET}


def _detect_same_rank(cards: List[Card], n: int, rc: Counter) -> Optional[Pattern]:
    """单张 / 对子 / 三条"""
    if n in _SAME_RANK_KINDS and len(rc) == 1:
        return _make(_SAME_RANK_KINDS[n], next(iter(rc)), cards)
    return None


# ============================================================
#  带牌类检测
# ============================================================

def _detect_triplet_with_kicker(cards: List[Card], n: int, rc: Counter) -> Optional[Pattern]:
    """三带一 (4张, {3,1}) / 三带一对 (5张, {3,2})"""
    if n not in (4, 5) or len(rc) != 2:
        return None
    triples = _groups_by_count(rc, 3)
    if len(triples) != 1:
        return None
    kind = PatternKind.TRIPLET_WITH_SINGLE if n == 4 else PatternKind.TRIPLET_WITH_PAIR
    return _make(kind, triples[0], cards)


# ============================================================
#  顺子类检测
# ============================================================

def _detect_straight(cards: List[Card], n: int, rc: Counter) -> Optional[Pattern]:
    """顺子：5~12张连续单牌，不含2和王"""
    if n < 5 or n > 12 or len(rc) != n:
        return None
    ranks = sorted(rc)
    if is_chain(ranks):
        return _make(PatternKind.STRAIGHT, ranks[0], cards)
    return None


def _detect_pair_sequence(cards: List[Card], n: int, rc: Counter) -> Optional[Pattern]:
    """连对：≥3对连续对子，不含2和王"""
    if n < 6 or n % 2 != 0:
        return None
    if any(c != 2 for c in rc.values()):
        return None
    ranks = sorted(rc)
    if is_chain(ranks):
        return _make(PatternKind.PAIR_SEQUENCE, ranks[0], cards)
    return None


# ============================================================
#  飞机类检测
# ============================================================

def _detect_airplane(cards: List[Card], n: int, rc: Counter) -> Optional[Pattern]:
    """
    飞机：所有恰好出现3次的点数为机身，至少2组且连续（不含2和王）。
    剩余的牌（翅膀）只能是：没有 / 与机身等量的不同单张 / 与机身等量的对子。
    """
    bodies = _groups_by_count(rc, 3)
    if len(bodies) < 2 or not is_chain(bodies):
        return None

    body_count = len(bodies)
    wing_counts = [c for r, c in rc.items() if r not in bodies]

    if not wing_counts:
        kind = PatternKind.AIRPLANE
    elif len(wing_counts) == body_count and all(c == 1 for c in wing_counts):
        kind = PatternKind.AIRPLANE_WITH_SINGLES
    elif len(wing_counts) == body_count and all(c == 2 for c in wing_counts):
        kind = PatternKind.AIRPLANE_WITH_PAIRS
    else:
        return None
    return _make(kind, bodies[0], cards)


_DETECTORS = (
    _detect_rocket,
    _detect_bomb,
    _detect_same_rank,
    _detect_triplet_with_kicker,
    _detect_straight,
    _detect_pair_sequence,
    _detect_airplane,
)


# ============================================================
#  牌型比较
# ============================================================

def beats(new: Optional[Pattern], table: Optional[Pattern]) -> bool:
    """
    判断 new 能否压过桌面上的 table。
    规则：
    0. 桌面为空（新一轮），任何合法牌型都能出
    1. 火箭压一切，没有牌能压火箭
    2. 炸弹压非炸弹/非火箭，炸弹之间比点数
    3. 同类型同张数，比主牌点数
    """
    if new is None:
        return False
    if table is None:
        return True

    # 火箭压一切
    if new.kind == PatternKind.ROCKET:
        return True
    if table.kind == PatternKind.ROCKET:
        return False

    # 炸弹逻辑
    if new.kind == PatternKind.BOMB:
        if table.kind == PatternKind.BOMB:
            return new.primary_rank_order > table.primary_rank_order
        return True  # 炸弹压非炸弹
    if table.kind == PatternKind.BOMB:
        return False  # 非炸弹不能压炸弹

    # 同类型同张数比较
    if new.kind != table.kind:
        return False
    if new.length != table.length:
        return False
    return new.primary_rank_order > table.primary_rank_order
