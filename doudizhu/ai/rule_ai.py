"""规则引擎 AI - 基于出牌搜索的"最小够用"策略"""

import logging
from typing import List, Optional
from collections import Counter

from doudizhu.engine.card import Card, Rank
from doudizhu.engine.classifier import classify
from doudizhu.engine.move_finder import Play, find_plays
from doudizhu.engine.pattern import PatternKind
from doudizhu.game.player import Player
from doudizhu.game.game_state import GameState

logger = logging.getLogger(__name__)

# 叫地主的手牌强度阈值
CALL_THRESHOLD = 5

# 对手剩余牌数不超过该值时，才舍得用炸弹跟牌
BOMB_ALERT_HAND_SIZE = 5


class RuleAI:
    """基于简单规则的 AI 策略"""

    def decide_bid(self, player: Player, state: GameState) -> bool:
        """
        叫地主决策：根据手牌强度决定叫不叫。
        简单策略：数炸弹和大牌数量。
        """
        return self.hand_strength(player.hand) >= CALL_THRESHOLD

    @staticmethod
    def hand_strength(hand: List[Card]) -> int:
        rc = Counter(c.rank for c in hand)

        score = 0
        # 炸弹 +6 分
        score += 6 * sum(1 for cnt in rc.values() if cnt == 4)
        # 火箭 +8 分，单个王 +3 分
        if Rank.BLACK_JOKER in rc and Rank.RED_JOKER in rc:
            score += 8
        elif Rank.BLACK_JOKER in rc or Rank.RED_JOKER in rc:
            score += 3
        # 2 的数量 +2 分
        score += rc.get(Rank.TWO, 0) * 2
        # A 的数量 +1 分
        score += rc.get(Rank.ACE, 0)
        return score

    def decide_play(self, player: Player, state: GameState) -> Optional[List[Card]]:
        """
        出牌决策。
        自由出牌：能一手出完就出完，否则出最小的牌，不拆炸弹。
        跟牌：找能压过上家的最小牌型；队友的牌不压；炸弹留到对手快出完时用。
        """
        hand = player.hand
        if not hand:
            return None

        if state.is_table_open:
            return self._free_play(hand)
        return self._follow_play(player, state)

    def _free_play(self, hand: List[Card]) -> List[Card]:
        """自由出牌：优先出小牌，保留炸弹"""
        # 只剩一手牌直接出完
        if classify(hand) is not None:
            return list(hand)

        plays = find_plays(hand, None)
        if plays[0][0].kind == PatternKind.ROCKET:
            # 火箭留着跟牌用，先从其余的牌里找
            rest = [c for c in hand if not c.is_joker]
            plays = find_plays(rest, None) + plays
        rc = Counter(c.rank_order for c in hand)
        ordinary = [p for p in plays if not p[0].is_bomb_like and not _breaks_bomb(p, rc)]
        if not ordinary:
            return list(plays[0][1])

        # 点数最小的牌优先，同点数下一次出得越多越好
        best = min(ordinary, key=lambda p: (p[0].primary_rank_order, -p[0].length))
        return list(best[1])

    def _follow_play(self, player: Player, state: GameState) -> Optional[List[Card]]:
        """跟牌：找能压过上家的最小组合"""
        plays = find_plays(player.hand, state.last_pattern)
        if not plays:
            return None

        # 能一手出完直接出
        for pattern, cards in plays:
            if len(cards) == player.hand_size:
                return list(cards)

        last = state.players[state.last_player] if state.last_player is not None else None
        if last is not None and last.role == player.role:
            # 队友的牌不压
            return None

        rc = Counter(c.rank_order for c in player.hand)
        for pattern, cards in plays:
            if not pattern.is_bomb_like and not _breaks_bomb((pattern, cards), rc):
                return list(cards)

        bombs = [p for p in plays if p[0].is_bomb_like]
        if bombs and last is not None and last.hand_size <= BOMB_ALERT_HAND_SIZE:
            logger.debug("玩家%d 对手只剩%d张，出炸弹", player.id, last.hand_size)
            return list(bombs[0][1])
        return None


def _breaks_bomb(play: Play, rc: Counter) -> bool:
    """出这手牌是否会拆散手里的炸弹"""
    return any(rc[c.rank_order] == 4 for c in play[1])
