"""
游戏配置
包含玩家名、重新发牌次数和随机种子，可从环境变量读取
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from doudizhu.exceptions import GameConfigError


DEFAULT_PLAYER_NAMES = ["烈焰哥🔥", "冰山姐❄️", "戏精弟🎭"]

# 环境变量名
ENV_SEED = "DOUDIZHU_SEED"
ENV_MAX_REDEAL = "DOUDIZHU_MAX_REDEAL"
ENV_DELAY = "DOUDIZHU_DELAY"


@dataclass
class GameConfig:
    """
    一局斗地主的配置
    """
    player_names: List[str] = field(default_factory=lambda: list(DEFAULT_PLAYER_NAMES))
    max_redeal: int = 3               # 三人都不叫时最多重新发牌次数
    seed: Optional[int] = None        # 随机种子（None=不固定）
    delay: float = 0.8                # 渲染器每步延迟（秒）

    def __post_init__(self):
        """验证配置的有效性"""
        if len(self.player_names) != 3:
            raise GameConfigError(f"斗地主需要3名玩家: {self.player_names}")
        if len(set(self.player_names)) != 3:
            raise GameConfigError(f"玩家名不能重复: {self.player_names}")
        if self.max_redeal < 1:
            raise GameConfigError(f"重新发牌次数至少为1: {self.max_redeal}")
        if self.delay < 0:
            raise GameConfigError(f"延迟不能为负数: {self.delay}")

    @classmethod
    def from_env(cls, **overrides) -> "GameConfig":
        """从环境变量读取配置，overrides 中非 None 的值优先"""
        values = {}
        try:
            if os.environ.get(ENV_SEED):
                values["seed"] = int(os.environ[ENV_SEED])
            if os.environ.get(ENV_MAX_REDEAL):
                values["max_redeal"] = int(os.environ[ENV_MAX_REDEAL])
            if os.environ.get(ENV_DELAY):
                values["delay"] = float(os.environ[ENV_DELAY])
        except ValueError as e:
            raise GameConfigError(f"环境变量格式错误: {e}") from e
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

