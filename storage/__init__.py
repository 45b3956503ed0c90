"""Signup store backends."""

from .abstract_store import AbstractSignupStore
from .sql_store import SQLSignupStore

__all__ = ["AbstractSignupStore", "SQLSignupStore"]
