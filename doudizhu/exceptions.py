"""
斗地主规则引擎异常定义
校验阶段抛出，由 GameController 的 apply_* 入口捕获并转换为 Rejected 结果
"""


class DoudizhuError(Exception):
    """斗地主引擎基础异常类"""
    pass


class InvalidPatternError(DoudizhuError):
    """所选的牌不构成任何合法牌型"""
    pass


class IllegalMoveError(DoudizhuError):
    """牌型合法但压不过桌面，或当前阶段不允许该操作"""
    pass


class NotYourTurnError(DoudizhuError):
    """不是该玩家的回合"""
    pass


class StaleBidError(DoudizhuError):
    """不在叫地主阶段叫分，或重复叫分"""
    pass


class GameConfigError(DoudizhuError):
    """游戏配置错误"""
    pass
