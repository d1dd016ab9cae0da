"""游戏控制器 - 叫地主 → 出牌 → 不出 → 清桌 → 结算 的状态机"""

import logging
import random
from typing import Callable, Iterable, List, Optional, Protocol

from doudizhu.config import GameConfig
from doudizhu.engine.card import Card, create_deck, deal, shuffle_and_deal
from doudizhu.engine.pattern import Pattern
from doudizhu.engine.classifier import classify, beats
from doudizhu.exceptions import (
    DoudizhuError,
    IllegalMoveError,
    InvalidPatternError,
    NotYourTurnError,
    StaleBidError,
)
from doudizhu.game.player import Player, Role
from doudizhu.game.game_state import GameState, GamePhase, GameEvent
from doudizhu.game.outcomes import (
    BidOutcome,
    BidResult,
    PassOutcome,
    PassResult,
    PlayOutcome,
    PlayResult,
    Rejected,
)

logger = logging.getLogger(__name__)

# 连续不出多少次后清空桌面（除出牌者外的两家都不要）
PASSES_TO_CLEAR = 2


class AIStrategy(Protocol):
    """AI 决策接口（策略模式）"""

    def decide_bid(self, player: Player, state: GameState) -> bool:
        """决定是否叫地主"""
        ...

    def decide_play(self, player: Player, state: GameState) -> Optional[List[Card]]:
        """决定出牌：返回要出的牌列表，None=不出(PASS)"""
        ...


class GameController:
    """
    游戏控制器：持有一局斗地主的 GameState，
    所有状态变更都经过 apply_bid / apply_play / apply_pass。
    校验失败时返回 Rejected，状态不做任何修改。
    调用方需保证同一局的 apply_* 串行调用。
    """

    def __init__(
        self,
        strategies: Optional[List[AIStrategy]] = None,
        config: Optional[GameConfig] = None,
        deck_supplier: Optional[Callable[[], List[Card]]] = None,
    ):
        self.config = config or GameConfig()
        if strategies is not None and len(strategies) != 3:
            raise ValueError(f"需要3个AI策略: {len(strategies)}")
        self.players = [
            Player(id=i, name=name) for i, name in enumerate(self.config.player_names)
        ]
        self.strategies = strategies
        self.rng = random.Random(self.config.seed)
        self._deck_supplier = deck_supplier
        self.state = GameState(players=self.players)
        self._callbacks: List[Callable[[GameEvent], None]] = []  # 事件回调（用于 UI 通知）

    def on_event(self, callback: Callable[[GameEvent], None]) -> None:
        """注册事件回调"""
        self._callbacks.append(callback)

    def _emit(self, event: GameEvent) -> None:
        """触发事件通知"""
        self.state.events.append(event)
        for cb in self._callbacks:
            cb(event)

    def _reject(self, pid: int, error: DoudizhuError) -> Rejected:
        rejected = Rejected.from_error(pid, error)
        logger.warning("玩家%d 的操作被拒绝 [%s]: %s", pid, rejected.reason.value, error)
        return rejected

    # ============================================================
    #  发牌阶段
    # ============================================================

    def deal(self, redeal: bool = False) -> None:
        """
        洗牌发牌，进入叫地主阶段。
        redeal=True 表示三人都不叫后的重新发牌，保留重发次数和事件记录。
        """
        previous = self.state
        self._reset_round()
        if redeal:
            self.state.redeal_count = previous.redeal_count
            self.state.events = previous.events

        if self._deck_supplier is not None:
            h1, h2, h3, dizhu = deal(self._deck_supplier())
        else:
            h1, h2, h3, dizhu = shuffle_and_deal(create_deck(), self.rng)

        for player, hand in zip(self.players, (h1, h2, h3)):
            player.hand = hand
        self.state.dizhu_cards = dizhu

        # 随机选首叫玩家
        s = self.state
        s.first_bidder = self.rng.choice(s.turn_order)
        s.current_player = s.first_bidder
        s.phase = GamePhase.BIDDING

        logger.info("发牌完成，首叫玩家: %d", s.first_bidder)
        self._emit(GameEvent(GamePhase.BIDDING, s.first_bidder, "deal", dizhu))

    def _reset_round(self) -> None:
        """重置一轮的状态（用于重新发牌）"""
        for p in self.players:
            p.reset_for_new_game()
        self.state = GameState(players=self.players)

    # ============================================================
    #  叫地主阶段
    # ============================================================

    def apply_bid(self, pid: int, bid: bool) -> BidResult:
        """
        玩家 pid 叫地主(True) 或不叫(False)。
        有人叫 → 立即确定地主；三人都不叫 → 重新发牌，重新叫地主。
        """
        try:
            self._check_bid(pid)
        except DoudizhuError as e:
            return self._reject(pid, e)

        s = self.state
        s.bids[pid] = bool(bid)
        self._emit(GameEvent(GamePhase.BIDDING, pid, "bid", bool(bid)))

        callers = [p for p in s.turn_order if s.bids[p] is True]
        if callers:
            # 多人同时叫地主时随机选一个
            landlord = self.rng.choice(callers)
            self._assign_landlord(landlord)
            return BidOutcome(pid, bool(bid), resolved=True, landlord=landlord,
                              next_player=landlord)

        if all(b is not None for b in s.bids.values()):
            logger.info("三人都不叫，重新发牌")
            self._emit(GameEvent(GamePhase.BIDDING, pid, "redeal"))
            s.redeal_count += 1
            self.deal(redeal=True)
            return BidOutcome(pid, bool(bid), resolved=True, redeal=True,
                              next_player=self.state.current_player)

        s.current_player = s.next_seat(pid)
        return BidOutcome(pid, bool(bid), next_player=s.current_player)

    def _check_bid(self, pid: int) -> None:
        s = self.state
        if s.phase != GamePhase.BIDDING:
            raise StaleBidError(f"当前阶段不能叫地主: {s.phase.value}")
        if pid in s.bids and s.bids[pid] is not None:
            raise StaleBidError(f"玩家{pid}已经叫过了")
        if pid != s.current_player:
            raise NotYourTurnError(f"轮到玩家{s.current_player}叫地主，不是玩家{pid}")

    def _assign_landlord(self, pid: int) -> None:
        """确定地主：分配角色、发底牌，地主先出牌"""
        s = self.state
        landlord = self.players[pid]
        landlord.role = Role.LANDLORD
        landlord.take_pile(s.dizhu_cards)

        for p in self.players:
            if p.id != pid:
                p.role = Role.FARMER

        s.landlord = pid
        s.current_player = pid
        s.last_pattern = None
        s.last_played_cards = []
        s.last_player = None
        s.pass_count = 0
        s.phase = GamePhase.PLAYING

        logger.info("玩家%d (%s) 成为地主", pid, landlord.name)
        self._emit(GameEvent(GamePhase.PLAYING, pid, "landlord", list(s.dizhu_cards)))

    # ============================================================
    #  出牌阶段
    # ============================================================

    def _check_turn(self, pid: int) -> None:
        s = self.state
        if s.phase != GamePhase.PLAYING:
            raise IllegalMoveError(f"当前阶段不能出牌: {s.phase.value}")
        if pid != s.current_player:
            raise NotYourTurnError(f"轮到玩家{s.current_player}出牌，不是玩家{pid}")

    def validate_play(self, pid: int, cards: List[Card]) -> Pattern:
        """校验一次出牌，合法时返回牌型，否则抛出对应异常"""
        self._check_turn(pid)
        if not cards:
            raise InvalidPatternError("没有选择任何牌")
        missing = self.players[pid].missing_cards(cards)
        if missing:
            raise IllegalMoveError(f"玩家{pid}手牌中没有这些牌: {missing}")

        pattern = classify(cards)
        if pattern is None:
            raise InvalidPatternError(f"不构成合法牌型: {cards}")

        table = self.state.last_pattern
        if not beats(pattern, table):
            raise IllegalMoveError(f"{pattern.kind.value} 压不过 {table.kind.value}")
        return pattern

    def apply_play(self, pid: int, cards: Iterable[Card]) -> PlayResult:
        """玩家 pid 出牌"""
        cards = list(cards)
        try:
            pattern = self.validate_play(pid, cards)
        except DoudizhuError as e:
            return self._reject(pid, e)

        s = self.state
        player = self.players[pid]
        player.remove_cards(cards)
        player.play_count += 1

        # 记录炸弹/火箭
        if pattern.is_bomb_like:
            s.bomb_count += 1

        s.last_pattern = pattern
        s.last_played_cards = list(pattern.cards)
        s.last_player = pid
        s.pass_count = 0
        s.play_history.append((pid, pattern))

        logger.debug("玩家%d 出牌 %r，剩余%d张", pid, pattern, player.hand_size)
        self._emit(GameEvent(GamePhase.PLAYING, pid, "play", pattern))

        # 出完牌立即结束，不再轮转
        if player.is_out:
            self._finish_game(pid)
            return PlayOutcome(pid, pattern, pattern.cards, game_over=True, winner=pid)

        s.current_player = s.next_seat(pid)
        return PlayOutcome(pid, pattern, pattern.cards, next_player=s.current_player)

    def apply_pass(self, pid: int) -> PassResult:
        """玩家 pid 不出；连续两家不出时清空桌面"""
        try:
            self._check_turn(pid)
        except DoudizhuError as e:
            return self._reject(pid, e)

        s = self.state
        s.pass_count += 1
        self._emit(GameEvent(GamePhase.PLAYING, pid, "pass"))

        cleared = False
        if s.pass_count >= PASSES_TO_CLEAR:
            cleared = s.last_pattern is not None
            s.last_pattern = None
            s.last_played_cards = []
            s.pass_count = 0
            if cleared:
                logger.info("连续%d家不出，清空桌面", PASSES_TO_CLEAR)
                self._emit(GameEvent(GamePhase.PLAYING, pid, "clear"))

        s.current_player = s.next_seat(pid)
        return PassOutcome(pid, table_cleared=cleared, next_player=s.current_player)

    # ============================================================
    #  结算阶段
    # ============================================================

    def _finish_game(self, winner_id: int) -> None:
        """游戏结束，计算结果"""
        s = self.state
        s.phase = GamePhase.FINISHED
        s.winner = winner_id

        landlord = next(p for p in self.players if p.is_landlord)
        farmers = [p for p in self.players if not p.is_landlord]

        # 春天判定：地主赢 + 农民都没出过牌 = 春天
        # 反春判定：农民赢 + 地主只出了一手牌 = 反春
        landlord_wins = (landlord.id == winner_id)
        if landlord_wins:
            s.is_spring = all(f.play_count == 0 for f in farmers)
        else:
            s.is_anti_spring = landlord.play_count <= 1

        s.multiplier = self._calc_multiplier()
        self._settle_scores(landlord, farmers, s.multiplier, landlord_wins)

        logger.info(
            "游戏结束，玩家%d 获胜 (%s方)，倍数 %d",
            winner_id, "地主" if landlord_wins else "农民", s.multiplier,
        )
        self._emit(GameEvent(GamePhase.FINISHED, winner_id, "finish", landlord_wins))

    def _calc_multiplier(self) -> int:
        """计算本局最终倍数：每个炸弹/火箭 ×2，春天/反春 ×2"""
        s = self.state
        m = 2 ** s.bomb_count
        if s.is_spring or s.is_anti_spring:
            m *= 2
        return m

    @staticmethod
    def _settle_scores(
        landlord: Player,
        farmers: List[Player],
        multiplier: int,
        landlord_wins: bool,
    ) -> None:
        """结算积分"""
        if landlord_wins:
            landlord.score += 2 * multiplier
            for f in farmers:
                f.score -= multiplier
        else:
            landlord.score -= 2 * multiplier
            for f in farmers:
                f.score += multiplier

    # ============================================================
    #  AI 对局驱动
    # ============================================================

    def _strategy(self, pid: int) -> AIStrategy:
        if self.strategies is None:
            raise RuntimeError("未配置 AI 策略，无法自动驱动对局")
        return self.strategies[pid]

    def run_bidding(self) -> bool:
        """
        由 AI 策略完成叫地主。
        返回 True=成功确定地主，False=三人都不叫（已重新发牌）。
        """
        s = self.state
        while s.phase == GamePhase.BIDDING:
            pid = s.current_player
            bid = self._strategy(pid).decide_bid(self.players[pid], s)
            outcome = self.apply_bid(pid, bid)
            if isinstance(outcome, BidOutcome) and outcome.redeal:
                return False
        return True

    def run_playing(self) -> None:
        """执行出牌流程，直到有人出完牌"""
        while self.state.phase == GamePhase.PLAYING:
            self._play_one_turn()

    def _play_one_turn(self) -> None:
        """执行一个玩家的出牌回合"""
        s = self.state
        pid = s.current_player
        cards = self._strategy(pid).decide_play(self.players[pid], s)

        if cards is None:
            self.apply_pass(pid)
            return

        outcome = self.apply_play(pid, cards)
        if isinstance(outcome, Rejected):
            # AI 出了非法的牌，强制 PASS
            self.apply_pass(pid)

    def run_game(self) -> GameState:
        """
        运行一局完整游戏。
        三人都不叫时重新发牌，超过 max_redeal 次后强制首叫玩家当地主。
        """
        self.deal()
        while not self.run_bidding():
            if self.state.redeal_count >= self.config.max_redeal:
                logger.info("超过重发次数，强制玩家%d当地主", self.state.first_bidder)
                self._assign_landlord(self.state.first_bidder)
                break

        self.run_playing()
        return self.state
