"""斗地主规则引擎"""

__version__ = "0.1.0"
