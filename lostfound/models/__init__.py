from lostfound.models.item import Item, ItemStatus, ItemType
from lostfound.models.match import ConfidenceTier, Match, MatchStatus, MatchType

__all__ = [
    "Item",
    "ItemStatus",
    "ItemType",
    "ConfidenceTier",
    "Match",
    "MatchStatus",
    "MatchType",
]
