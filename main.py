"""斗地主 AI 对局 - 主入口"""

import argparse
import logging

from doudizhu.ai.rule_ai import RuleAI
from doudizhu.config import GameConfig
from doudizhu.game.controller import GameController
from doudizhu.ui.renderer import TerminalRenderer


def run_one_game(gc: GameController, renderer: TerminalRenderer) -> None:
    """运行一局完整对局"""
    renderer.print_header("🀄 AI 斗地主对局开始")
    state = gc.run_game()
    renderer.show_result(state, gc.players)


def main():
    """命令行入口"""
    parser = argparse.ArgumentParser(description="AI 斗地主对局")
    parser.add_argument("--rounds", type=int, default=1, help="对局数 (默认1)")
    parser.add_argument("--delay", type=float, default=None, help="出牌延迟秒数 (默认0.8)")
    parser.add_argument("--fast", action="store_true", help="快速模式 (无延迟)")
    parser.add_argument("--seed", type=int, default=None, help="随机种子")
    parser.add_argument("--log-level", default="WARNING", help="日志级别 (默认WARNING)")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_env(
        seed=args.seed,
        delay=0.0 if args.fast else args.delay,
    )
    renderer = TerminalRenderer(delay=config.delay)
    gc = GameController(strategies=[RuleAI(), RuleAI(), RuleAI()], config=config)
    gc.on_event(renderer.make_event_callback(gc.players))

    for i in range(args.rounds):
        if args.rounds > 1:
            print(f"\n{'=' * 60}")
            print(f"  第 {i + 1}/{args.rounds} 局")
            print(f"{'=' * 60}")
        run_one_game(gc, renderer)


if __name__ == "__main__":
    main()
