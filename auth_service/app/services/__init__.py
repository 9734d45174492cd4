from .accounts import AccountService

__all__ = ["AccountService"]
