"""Services module"""
from memo_store.services.auth_service import AuthService

__all__ = ["AuthService"]
