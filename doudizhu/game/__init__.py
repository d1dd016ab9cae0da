# 游戏流程控制模块
from .player import Player, Role
from .game_state import GameState, GamePhase, GameEvent
from .outcomes import BidOutcome, PlayOutcome, PassOutcome, Rejected, RejectReason
from .controller import GameController, AIStrategy
