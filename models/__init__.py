from models.account import Account
from models.submission import Submission

__all__ = ["Account", "Submission"]
