"""
Account storage.

AccountStore ABC: create, load, save, exists. save takes the version the
caller loaded; a store must refuse the write if someone else saved in
between (ConcurrentModification) rather than overwrite their changes.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

from stocksim_core.account import Account
from stocksim_core.errors import AccountExists, AccountNotFound, ConcurrentModification

logger = logging.getLogger(__name__)


class AccountStore(ABC):
    """Persistence for Account aggregates, keyed by user id."""

    @abstractmethod
    def create(self, account: Account) -> Account:
        """Store a new account at version 0. Raises AccountExists."""
        ...

    @abstractmethod
    def load(self, user_id: str) -> Account:
        """Return a private copy of the stored account. Raises AccountNotFound."""
        ...

    @abstractmethod
    def save(self, account: Account, expected_version: int) -> Account:
        """
        Replace the stored account if its version is still expected_version.
        Returns the saved account with its new version.
        Raises ConcurrentModification on a stale version, AccountNotFound if missing.
        """
        ...

    @abstractmethod
    def exists(self, user_id: str) -> bool:
        ...


class InMemoryAccountStore(AccountStore):
    """Keeps account documents in a dict. Thread-safe; versions bump on every save."""

    def __init__(self) -> None:
        self._docs: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def create(self, account: Account) -> Account:
        with self._lock:
            if account.user_id in self._docs:
                raise AccountExists(f"Account already exists for user {account.user_id}")
            doc = account.to_document()
            doc["version"] = 0
            self._docs[account.user_id] = doc
        return Account.from_document(doc)

    def load(self, user_id: str) -> Account:
        with self._lock:
            doc = self._docs.get(user_id)
            if doc is None:
                raise AccountNotFound(f"User not found: {user_id}")
            return Account.from_document(doc)

    def save(self, account: Account, expected_version: int) -> Account:
        with self._lock:
            current = self._docs.get(account.user_id)
            if current is None:
                raise AccountNotFound(f"User not found: {account.user_id}")
            if current["version"] != expected_version:
                logger.warning(
                    "Stale write refused: user=%s expected_version=%s stored_version=%s",
                    account.user_id,
                    expected_version,
                    current["version"],
                )
                raise ConcurrentModification(
                    f"Account {account.user_id} changed (version {current['version']}, expected {expected_version})"
                )
            doc = account.to_document()
            doc["version"] = expected_version + 1
            self._docs[account.user_id] = doc
        return Account.from_document(doc)

    def exists(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._docs

    def document(self, user_id: str) -> dict[str, Any]:
        """Raw stored document (copy), as it would sit in a database."""
        with self._lock:
            doc = self._docs.get(user_id)
            if doc is None:
                raise AccountNotFound(f"User not found: {user_id}")
            return Account.from_document(doc).to_document()
