from .rpde_feed import RpdeFeedRule, is_rpde_feed
from .valid_input import ValidInputRule

__all__ = ["RpdeFeedRule", "ValidInputRule", "is_rpde_feed"]
