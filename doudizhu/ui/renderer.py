"""终端可视化渲染器 - 在终端中展示斗地主对局过程"""

import os
import time
from typing import Callable, List

from doudizhu.engine.card import Card, Rank
from doudizhu.engine.pattern import Pattern, PatternKind
from doudizhu.game.player import Player, Role
from doudizhu.game.game_state import GameState, GamePhase, GameEvent


# 颜色常量 (ANSI)
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
MAGENTA = "\033[95m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

# 角色颜色映射
ROLE_COLOR = {
    Role.LANDLORD: RED,
    Role.FARMER: GREEN,
    Role.UNKNOWN: DIM,
}

# 牌型中文名
PATTERN_NAME = {
    PatternKind.SINGLE: "单张",
    PatternKind.PAIR: "对子",
    PatternKind.TRIPLET: "三条",
    PatternKind.TRIPLET_WITH_SINGLE: "三带一",
    PatternKind.TRIPLET_WITH_PAIR: "三带二",
    PatternKind.STRAIGHT: "顺子",
    PatternKind.PAIR_SEQUENCE: "连对",
    PatternKind.AIRPLANE: "飞机",
    PatternKind.AIRPLANE_WITH_SINGLES: "飞机带翅膀(单)",
    PatternKind.AIRPLANE_WITH_PAIRS: "飞机带翅膀(对)",
    PatternKind.BOMB: "炸弹 💣",
    PatternKind.ROCKET: "火箭 🚀",
}


class TerminalRenderer:
    """终端可视化渲染器"""

    def __init__(self, delay: float = 0.8):
        self.delay = delay  # 每步之间的延迟（秒）

    def clear(self) -> None:
        """清屏"""
        os.system("clear" if os.name != "nt" else "cls")

    def pause(self, seconds: float = 0) -> None:
        """暂停，delay 为 0 时（快速模式）不停顿"""
        if self.delay > 0:
            time.sleep(seconds or self.delay)

    # ============================================================
    #  牌面渲染
    # ============================================================

    @staticmethod
    def format_cards(cards: List[Card]) -> str:
        """将牌列表格式化为彩色字符串"""
        parts = []
        for c in cards:
            display = c.display
            if c.is_joker:
                color = f"{RED}{BOLD}" if c.rank == Rank.RED_JOKER else CYAN
                parts.append(f"{color}{display}{RESET}")
            elif c.suit.value in ("♥", "♦"):
                parts.append(f"{RED}{display}{RESET}")
            else:
                parts.append(display)
        return " ".join(parts)

    @staticmethod
    def format_player_name(player: Player) -> str:
        """格式化玩家名（带角色颜色）"""
        color = ROLE_COLOR.get(player.role, DIM)
        role_tag = ""
        if player.role == Role.LANDLORD:
            role_tag = " [地主👑]"
        elif player.role == Role.FARMER:
            role_tag = " [农民🌾]"
        return f"{color}{BOLD}{player.name}{role_tag}{RESET}"

    # ============================================================
    #  分隔线与标题
    # ============================================================

    @staticmethod
    def separator(char: str = "─", width: int = 60) -> str:
        return char * width

    def print_header(self, title: str) -> None:
        """打印带框的标题"""
        print(f"\n{YELLOW}{BOLD}{'═' * 60}{RESET}")
        print(f"{YELLOW}{BOLD}  {title}{RESET}")
        print(f"{YELLOW}{BOLD}{'═' * 60}{RESET}\n")

    # ============================================================
    #  各阶段展示
    # ============================================================

    def show_deal(self, players: List[Player], dizhu_cards: List[Card]) -> None:
        """展示发牌结果"""
        self.print_header("🃏 发牌完成")
        for p in players:
            name = self.format_player_name(p)
            print(f"  {name} ({p.hand_size}张): {self.format_cards(p.hand)}")
        print(f"\n  {MAGENTA}底牌: {self.format_cards(dizhu_cards)}{RESET}\n")

    def show_bid(self, player: Player, bid: bool) -> None:
        """展示一次叫地主"""
        name = self.format_player_name(player)
        if bid:
            print(f"  {name}: {YELLOW}叫地主！{RESET}")
        else:
            print(f"  {name}: {DIM}不叫{RESET}")

    def show_landlord(self, player: Player, dizhu_cards: List[Card]) -> None:
        """展示地主确定"""
        name = self.format_player_name(player)
        print(f"\n  🎉 {name} 成为地主！")
        print(f"  底牌亮出: {self.format_cards(dizhu_cards)}")
        print(f"  地主手牌 ({player.hand_size}张): {self.format_cards(player.hand)}\n")

    def show_play(self, player: Player, pattern: Pattern) -> None:
        """展示一次出牌"""
        name = self.format_player_name(player)
        type_name = PATTERN_NAME.get(pattern.kind, pattern.kind.value)
        cards_str = self.format_cards(list(pattern.cards))
        print(f"  {name} 出牌 [{type_name}]: {cards_str}  (剩余{player.hand_size}张)")

    def show_pass(self, player: Player) -> None:
        """展示不出"""
        print(f"  {self.format_player_name(player)}: {DIM}不出{RESET}")

    def show_result(self, state: GameState, players: List[Player]) -> None:
        """展示游戏结果"""
        self.print_header("🏆 游戏结束")

        winner = players[state.winner]
        side = "地主" if winner.is_landlord else "农民"
        print(f"  胜利方: {self.format_player_name(winner)} ({side}方获胜)")

        if state.is_spring:
            print(f"  {RED}{BOLD}  🌸 春天！农民一张没出！{RESET}")
        elif state.is_anti_spring:
            print(f"  {RED}{BOLD}  🌸 反春天！地主只出了一手！{RESET}")

        if state.bomb_count > 0:
            print(f"  炸弹/火箭数: {state.bomb_count}")

        print(f"  最终倍数: {state.multiplier}")
        print(f"\n  {self.separator('─', 40)}")
        print(f"  {'玩家':<12} {'角色':<8} {'累计积分':<10}")
        print(f"  {self.separator('─', 40)}")
        for p in players:
            role = "地主" if p.is_landlord else "农民"
            sign = "+" if p.score > 0 else ""
            print(f"  {p.name:<10} {role:<6} {sign}{p.score}")
        print()

    # ============================================================
    #  事件回调（注册到 GameController）
    # ============================================================

    def make_event_callback(self, players: List[Player]) -> Callable[[GameEvent], None]:
        """创建事件回调函数，供 GameController.on_event() 使用"""
        renderer = self

        def callback(event: GameEvent) -> None:
            player = players[event.player_id]

            if event.action == "deal":
                renderer.show_deal(players, event.data)
                renderer.print_header("📢 叫地主阶段")
            elif event.action == "bid":
                renderer.show_bid(player, event.data)
                renderer.pause(0.5)
            elif event.action == "redeal":
                print("  三人都不叫，重新发牌...")
            elif event.action == "landlord":
                renderer.show_landlord(player, event.data)
                renderer.print_header("🎴 出牌阶段")
                renderer.pause(1.0)
            elif event.phase == GamePhase.PLAYING:
                if event.action == "play":
                    renderer.show_play(player, event.data)
                    renderer.pause()
                elif event.action == "pass":
                    renderer.show_pass(player)
                    renderer.pause(0.3)
                elif event.action == "clear":
                    print(f"  {DIM}-- 新一轮 --{RESET}")

        return callback
