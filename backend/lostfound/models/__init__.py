from .user import User
from .item import Item
from .claim import Claim

__all__ = ["User", "Item", "Claim"]
