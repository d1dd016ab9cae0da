# AI 策略模块
from .rule_ai import RuleAI
