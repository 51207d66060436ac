"""A thread-safe bank holding cash in circulation and account balances."""

from __future__ import annotations

import threading

AccountId = int
Money = int


class BankOperationError(RuntimeError):
    """Raised when a bank operation cannot be carried out."""


class Bank:
    """Accounts with integer balances plus a pool of cash outside the accounts.

    Every operation that changes state is counted, including ones that end
    in an error after the amount has been validated.
    """

    def __init__(self, initial_cash: Money) -> None:
        if initial_cash < 0:
            raise BankOperationError("Initial cash cannot be negative")
        self._cash: Money = initial_cash
        self._accounts: dict[AccountId, Money] = {}
        self._operations = 0
        self._next_account_id: AccountId = 1
        self._lock = threading.Lock()

    @property
    def operations_count(self) -> int:
        """Number of operations performed so far."""
        with self._lock:
            return self._operations

    @property
    def cash(self) -> Money:
        """Cash in circulation outside the accounts."""
        with self._lock:
            return self._cash

    @property
    def accounts_balance(self) -> Money:
        """Sum of the balances of all open accounts."""
        with self._lock:
            return sum(self._accounts.values())

    def account_balance(self, account_id: AccountId) -> Money:
        """Return the balance of one account."""
        with self._lock:
            try:
                return self._accounts[account_id]
            except KeyError:
                raise BankOperationError("Account not found") from None

    def send_money(self, src_account_id: AccountId, dst_account_id: AccountId, amount: Money) -> None:
        """Transfer money between accounts, raising if funds are insufficient."""
        if not self.try_send_money(src_account_id, dst_account_id, amount):
            raise BankOperationError("Insufficient funds")

    def try_send_money(self, src_account_id: AccountId, dst_account_id: AccountId, amount: Money) -> bool:
        """Transfer money between accounts; return False if funds are insufficient."""
        _check_amount(amount)
        with self._lock:
            self._operations += 1
            if src_account_id not in self._accounts or dst_account_id not in self._accounts:
                raise BankOperationError("Invalid account ID")
            if self._accounts[src_account_id] < amount:
                return False
            self._accounts[src_account_id] -= amount
            self._accounts[dst_account_id] += amount
            return True

    def withdraw_money(self, account_id: AccountId, amount: Money) -> None:
        """Move money from an account to cash, raising if funds are insufficient."""
        if not self.try_withdraw_money(account_id, amount):
            raise BankOperationError("Insufficient funds")

    def try_withdraw_money(self, account_id: AccountId, amount: Money) -> bool:
        """Move money from an account to cash; return False if funds are insufficient."""
        _check_amount(amount)
        with self._lock:
            self._operations += 1
            balance = self._require_account(account_id)
            if balance < amount:
                return False
            self._accounts[account_id] = balance - amount
            self._cash += amount
            return True

    def deposit_money(self, account_id: AccountId, amount: Money) -> None:
        """Move cash into an account."""
        _check_amount(amount)
        with self._lock:
            self._operations += 1
            balance = self._require_account(account_id)
            if self._cash < amount:
                raise BankOperationError(
                    f"Insufficient cash. Available cash: {self._cash}, required: {amount}"
                )
            self._accounts[account_id] = balance + amount
            self._cash -= amount

    def open_account(self) -> AccountId:
        """Open a new empty account and return its id."""
        with self._lock:
            self._operations += 1
            account_id = self._next_account_id
            self._next_account_id += 1
            self._accounts[account_id] = 0
            return account_id

    def close_account(self, account_id: AccountId) -> Money:
        """Close an account, returning its balance to cash; return the balance."""
        with self._lock:
            self._operations += 1
            balance = self._require_account(account_id)
            del self._accounts[account_id]
            self._cash += balance
            return balance

    def _require_account(self, account_id: AccountId) -> Money:
        try:
            return self._accounts[account_id]
        except KeyError:
            raise BankOperationError("Account not found") from None


def _check_amount(amount: Money) -> None:
    if amount < 0:
        raise ValueError("Amount cannot be negative")