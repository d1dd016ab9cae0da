# 规则引擎模块
from .card import Card, Rank, Suit, create_deck, shuffle_and_deal, sort_cards, parse_card
from .pattern import Pattern, PatternKind, Wings, ROCKET_ORDER
from .classifier import classify, beats
from .move_finder import find_plays
