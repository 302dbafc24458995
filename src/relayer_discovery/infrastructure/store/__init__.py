"""Shared membership store for the active relayer set."""

from .base import BaseMembershipStore, MembershipStore
from .factory import create_membership_store
from .memory import InMemoryMembershipStore
from .redis import RedisMembershipStore

__all__ = [
    "MembershipStore",
    "BaseMembershipStore",
    "InMemoryMembershipStore",
    "RedisMembershipStore",
    "create_membership_store",
]
