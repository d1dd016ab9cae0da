"""GameController 状态机单元测试 - 叫地主 / 出牌 / 不出 / 清桌 / 结算"""

import logging
from collections import Counter
from typing import List

import pytest
from doudizhu.ai.rule_ai import RuleAI
from doudizhu.config import GameConfig
from doudizhu.engine.card import Card, Rank, Suit, create_deck
from doudizhu.engine.pattern import PatternKind
from doudizhu.game.controller import GameController
from doudizhu.game.game_state import GamePhase
from doudizhu.game.outcomes import (
    BidOutcome, PassOutcome, PlayOutcome, Rejected, RejectReason,
)
from doudizhu.game.player import Role


# ============================================================
#  辅助工具
# ============================================================

def _c(rank: Rank, suit: Suit = Suit.SPADE) -> Card:
    """快速创建一张牌"""
    return Card(rank=rank, suit=suit)


def _controller(seed: int = 7, **kwargs) -> GameController:
    return GameController(config=GameConfig(seed=seed), **kwargs)


def _make_landlord(gc: GameController, seat: int) -> None:
    """按座次让其他人不叫，直到 seat 叫地主"""
    while gc.state.current_player != seat:
        outcome = gc.apply_bid(gc.state.current_player, False)
        assert isinstance(outcome, BidOutcome)
    outcome = gc.apply_bid(seat, True)
    assert outcome.landlord == seat


def _playing(hands: List[List[Card]], landlord: int = 0) -> GameController:
    """发牌、确定地主后，用指定手牌替换三家的牌"""
    gc = _controller()
    gc.deal()
    _make_landlord(gc, landlord)
    for player, hand in zip(gc.players, hands):
        player.hand = list(hand)
    return gc


def _snapshot(gc: GameController):
    s = gc.state
    return (
        s.phase, s.current_player, s.last_pattern, list(s.last_played_cards),
        s.pass_count, s.last_player, [list(p.hand) for p in gc.players],
    )


# ============================================================
#  叫地主
# ============================================================

class TestBidding:

    def test_deal_enters_bidding(self):
        gc = _controller()
        gc.deal()
        assert gc.state.phase == GamePhase.BIDDING
        assert [p.hand_size for p in gc.players] == [17, 17, 17]
        assert len(gc.state.dizhu_cards) == 3
        assert gc.state.current_player == gc.state.first_bidder

    def test_first_call_resolves_and_merges_pile(self):
        gc = _controller()
        gc.deal()
        pid = gc.state.current_player
        pile = list(gc.state.dizhu_cards)

        outcome = gc.apply_bid(pid, True)

        assert isinstance(outcome, BidOutcome)
        assert outcome.resolved and outcome.landlord == pid
        assert gc.state.phase == GamePhase.PLAYING
        assert gc.state.current_player == pid  # 地主先出
        assert gc.players[pid].hand_size == 20
        assert set(pile) <= set(gc.players[pid].hand)
        assert gc.players[pid].role == Role.LANDLORD
        assert sum(1 for p in gc.players if p.role == Role.FARMER) == 2

    def test_pass_moves_to_next_bidder(self):
        gc = _controller()
        gc.deal()
        pid = gc.state.current_player
        outcome = gc.apply_bid(pid, False)
        assert not outcome.resolved
        assert gc.state.current_player == gc.state.next_seat(pid)
        assert gc.state.phase == GamePhase.BIDDING

    def test_bid_out_of_turn_rejected(self):
        gc = _controller()
        gc.deal()
        other = gc.state.next_seat(gc.state.current_player)
        before = dict(gc.state.bids)

        outcome = gc.apply_bid(other, True)

        assert isinstance(outcome, Rejected)
        assert outcome.reason == RejectReason.NOT_YOUR_TURN
        assert gc.state.bids == before

    def test_repeated_bid_is_stale(self):
        gc = _controller()
        gc.deal()
        pid = gc.state.current_player
        gc.apply_bid(pid, False)
        outcome = gc.apply_bid(pid, True)
        assert isinstance(outcome, Rejected)
        assert outcome.reason == RejectReason.STALE_BID

    def test_bid_before_deal_is_stale(self):
        gc = _controller()
        outcome = gc.apply_bid(0, True)
        assert isinstance(outcome, Rejected)
        assert outcome.reason == RejectReason.STALE_BID

    def test_bid_while_playing_is_stale(self):
        gc = _controller()
        gc.deal()
        pid = gc.state.current_player
        gc.apply_bid(pid, True)
        outcome = gc.apply_bid(pid, True)
        assert isinstance(outcome, Rejected)
        assert outcome.reason == RejectReason.STALE_BID

    def test_nobody_calls_redeals(self):
        gc = _controller()
        gc.deal()
        first_hands = [list(p.hand) for p in gc.players]
        for _ in range(3):
            outcome = gc.apply_bid(gc.state.current_player, False)

        assert outcome.redeal and outcome.landlord is None
        assert gc.state.phase == GamePhase.BIDDING
        assert gc.state.redeal_count == 1
        assert all(b is None for b in gc.state.bids.values())
        assert [p.hand_size for p in gc.players] == [17, 17, 17]
        assert [list(p.hand) for p in gc.players] != first_hands

    def test_redeal_keeps_event_log(self):
        gc = _controller()
        gc.deal()
        for _ in range(3):
            gc.apply_bid(gc.state.current_player, False)
        actions = [e.action for e in gc.state.events]
        assert actions == ["deal", "bid", "bid", "bid", "redeal", "deal"]

    def test_fresh_deal_resets_redeal_history(self):
        gc = _controller()
        gc.deal()
        for _ in range(3):
            gc.apply_bid(gc.state.current_player, False)
        gc.deal()
        assert gc.state.redeal_count == 0
        assert [e.action for e in gc.state.events] == ["deal"]

    def test_deck_supplier_is_used(self):
        deck = create_deck()
        gc = _controller(deck_supplier=lambda: list(deck))
        gc.deal()
        assert set(gc.players[0].hand) == set(deck[:17])
        assert set(gc.state.dizhu_cards) == set(deck[51:])


# ============================================================
#  出牌 / 不出
# ============================================================

P0 = [_c(Rank.THREE, Suit.SPADE), _c(Rank.THREE, Suit.HEART),
      _c(Rank.THREE, Suit.DIAMOND), _c(Rank.FOUR, Suit.CLUB),
      _c(Rank.NINE), _c(Rank.KING)]
P1 = [_c(Rank.FIVE, Suit.SPADE), _c(Rank.FIVE, Suit.HEART),
      _c(Rank.FIVE, Suit.DIAMOND), _c(Rank.SIX, Suit.CLUB),
      _c(Rank.SIX, Suit.SPADE), _c(Rank.TEN)]
P2 = [_c(Rank.SEVEN), _c(Rank.ACE), _c(Rank.JACK, Suit.HEART)]


class TestPlaying:

    def test_triplet_with_single_opens_then_triplet_with_pair_rejected(self):
        gc = _playing([P0, P1, P2])
        outcome = gc.apply_play(0, P0[:4])
        assert isinstance(outcome, PlayOutcome)
        assert outcome.pattern.kind == PatternKind.TRIPLET_WITH_SINGLE
        assert outcome.next_player == 1
        assert gc.state.last_pattern.primary_rank_order == 3
        assert gc.players[0].hand_size == 2

        before = _snapshot(gc)
        rejected = gc.apply_play(1, P1[:5])
        assert isinstance(rejected, Rejected)
        assert rejected.reason == RejectReason.ILLEGAL_MOVE
        assert _snapshot(gc) == before

    def test_invalid_pattern_rejected_without_mutation(self):
        gc = _playing([P0, P1, P2])
        before = _snapshot(gc)
        outcome = gc.apply_play(0, [P0[4], P0[5]])  # 9 + K
        assert isinstance(outcome, Rejected)
        assert outcome.reason == RejectReason.INVALID_PATTERN
        assert _snapshot(gc) == before

    def test_empty_selection_is_invalid(self):
        gc = _playing([P0, P1, P2])
        outcome = gc.apply_play(0, [])
        assert outcome.reason == RejectReason.INVALID_PATTERN

    def test_cards_not_in_hand_rejected(self):
        gc = _playing([P0, P1, P2])
        outcome = gc.apply_play(0, [_c(Rank.ACE, Suit.CLUB)])
        assert isinstance(outcome, Rejected)
        assert outcome.reason == RejectReason.ILLEGAL_MOVE
        assert gc.players[0].hand == P0

    def test_not_your_turn(self):
        gc = _playing([P0, P1, P2])
        before = _snapshot(gc)
        assert gc.apply_play(1, [P1[5]]).reason == RejectReason.NOT_YOUR_TURN
        assert gc.apply_pass(2).reason == RejectReason.NOT_YOUR_TURN
        assert _snapshot(gc) == before

    def test_play_resets_pass_count(self):
        gc = _playing([P0, P1, P2])
        gc.apply_play(0, [P0[4]])              # 9
        gc.apply_pass(1)
        assert gc.state.pass_count == 1
        outcome = gc.apply_play(2, [P2[1]])    # A
        assert isinstance(outcome, PlayOutcome)
        assert gc.state.pass_count == 0
        assert gc.state.last_player == 2
        assert gc.state.current_player == 0

    def test_two_passes_clear_table(self):
        gc = _playing([P0, P1, P2])
        gc.apply_play(0, [P0[5]])              # K
        first = gc.apply_pass(1)
        assert isinstance(first, PassOutcome) and not first.table_cleared
        second = gc.apply_pass(2)
        assert second.table_cleared
        assert gc.state.last_pattern is None
        assert gc.state.last_played_cards == []
        assert gc.state.pass_count == 0
        assert gc.state.current_player == 0

        # 清桌后任何牌型都能出
        outcome = gc.apply_play(0, [P0[4]])    # 9
        assert isinstance(outcome, PlayOutcome)

    def test_table_clear_logged_at_info(self, caplog):
        gc = _playing([P0, P1, P2])
        gc.apply_play(0, [P0[5]])
        caplog.set_level(logging.INFO, logger="doudizhu.game.controller")
        gc.apply_pass(1)
        gc.apply_pass(2)
        assert any(
            r.levelno == logging.INFO and "清空桌面" in r.getMessage()
            for r in caplog.records
        )

    def test_pass_after_clear_has_no_special_effect(self):
        gc = _playing([P0, P1, P2])
        gc.apply_play(0, [P0[5]])
        gc.apply_pass(1)
        gc.apply_pass(2)
        third = gc.apply_pass(0)
        assert isinstance(third, PassOutcome)
        assert not third.table_cleared
        assert gc.state.last_pattern is None
        assert gc.state.pass_count == 1
        assert gc.state.current_player == 1

    def test_bomb_over_triplet_with_single(self):
        bomb_hand = [_c(Rank.SIX, s) for s in Suit] + [_c(Rank.TEN)]
        gc = _playing([P0, bomb_hand, P2])
        gc.apply_play(0, P0[:4])
        outcome = gc.apply_play(1, bomb_hand[:4])
        assert isinstance(outcome, PlayOutcome)
        assert outcome.pattern.kind == PatternKind.BOMB
        assert gc.state.bomb_count == 1


# ============================================================
#  胜负与结算
# ============================================================

class TestGameOver:

    def test_emptying_hand_finishes_before_turn_advance(self):
        gc = _playing([[_c(Rank.THREE)], P1, P2])
        outcome = gc.apply_play(0, [_c(Rank.THREE)])
        assert outcome.game_over and outcome.winner == 0
        assert outcome.next_player is None
        assert gc.state.phase == GamePhase.FINISHED
        assert gc.state.winner == 0
        assert gc.state.current_player == 0

    def test_no_actions_after_game_over(self):
        gc = _playing([[_c(Rank.THREE)], P1, P2])
        gc.apply_play(0, [_c(Rank.THREE)])
        before = _snapshot(gc)
        assert gc.apply_pass(1).reason == RejectReason.ILLEGAL_MOVE
        assert gc.apply_play(1, [P1[5]]).reason == RejectReason.ILLEGAL_MOVE
        assert gc.apply_bid(1, True).reason == RejectReason.STALE_BID
        assert _snapshot(gc) == before

    def test_landlord_spring_settlement(self):
        gc = _playing([[_c(Rank.THREE)], P1, P2], landlord=0)
        gc.apply_play(0, [_c(Rank.THREE)])
        s = gc.state
        assert s.landlord_wins is True
        assert s.is_spring
        assert s.multiplier == 2
        assert [p.score for p in gc.players] == [4, -2, -2]

    def test_bomb_doubles_multiplier(self):
        bomb = [_c(Rank.SIX, s) for s in Suit]
        gc = _playing([bomb, P1, P2], landlord=0)
        gc.apply_play(0, bomb)
        assert gc.state.bomb_count == 1
        assert gc.state.multiplier == 4
        assert gc.players[0].score == 8

    def test_farmer_win(self):
        gc = _playing([P0, P1, [_c(Rank.ACE)]], landlord=0)
        gc.apply_play(0, [P0[4]])      # 9
        gc.apply_pass(1)
        gc.apply_play(2, [_c(Rank.ACE)])
        s = gc.state
        assert s.phase == GamePhase.FINISHED
        assert s.landlord_wins is False
        assert s.is_anti_spring        # 地主只出了一手
        assert gc.players[0].score == -4
        assert gc.players[1].score == 2 and gc.players[2].score == 2


# ============================================================
#  完整 AI 对局
# ============================================================

class TestFullGame:

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_ai_game_finishes_and_conserves_cards(self, seed):
        gc = GameController(
            strategies=[RuleAI(), RuleAI(), RuleAI()],
            config=GameConfig(seed=seed),
        )
        state = gc.run_game()

        assert state.phase == GamePhase.FINISHED
        assert gc.players[state.winner].hand_size == 0
        assert sum(p.score for p in gc.players) == 0

        all_cards = state.all_cards()
        assert len(all_cards) == 54
        assert Counter(all_cards) == Counter(create_deck())

    def test_events_are_emitted(self):
        gc = GameController(
            strategies=[RuleAI(), RuleAI(), RuleAI()],
            config=GameConfig(seed=11),
        )
        seen = []
        gc.on_event(lambda e: seen.append(e.action))
        gc.run_game()
        assert "deal" in seen
        assert "landlord" in seen
        assert "play" in seen
        assert seen[-1] == "finish"

    def test_run_without_strategies_fails(self):
        gc = _controller()
        with pytest.raises(RuntimeError):
            gc.run_game()

    def test_wrong_number_of_strategies(self):
        with pytest.raises(ValueError):
            GameController(strategies=[RuleAI()])
