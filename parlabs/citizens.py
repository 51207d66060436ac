"""Citizens of the bank simulation, each performing a round of money moves."""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod

from parlabs.bank import AccountId, Bank, BankOperationError, Money

HOMER_SEND_TO_MARGE_AMOUNT: Money = 100
HOMER_PAY_ELECTRICITY_AMOUNT: Money = 50
HOMER_WITHDRAW_AMOUNT: Money = 30
APU_PAY_ELECTRICITY_AMOUNT: Money = 50
BURNS_PAY_HOMER_AMOUNT: Money = 200
BART_LISA_SPEND_AT_APU_AMOUNT: Money = 20
MARGE_PAY_APU_AMOUNT: Money = 20
NELSON_STEAL_AMOUNT: Money = 10
SMITHERS_SALARY_AMOUNT: Money = 100
SMITHERS_SPEND_AMOUNT: Money = 20
SNAKE_HACK_AMOUNT: Money = 30
SNAKE_SPEND_AMOUNT: Money = 20

_output_lock = threading.Lock()


class Citizen(ABC):
    """A participant that performs one round of actions per call to run()."""

    @abstractmethod
    def run(self) -> None:
        """Perform one round of actions."""

    @staticmethod
    def _say(message: str) -> None:
        with _output_lock:
            sys.stdout.write(message)
            sys.stdout.flush()

    @staticmethod
    def _complain(message: str) -> None:
        with _output_lock:
            sys.stderr.write(message)
            sys.stderr.flush()


class Apu(Citizen):
    """Shopkeeper who pays Burns for electricity and banks cash he receives."""

    def __init__(self, bank: Bank, apu_account: AccountId, burns_account: AccountId) -> None:
        self._bank = bank
        self._apu_account = apu_account
        self._burns_account = burns_account

    def run(self) -> None:
        self._say(f"Start Apu: {self._bank.account_balance(self._apu_account)}\n")
        if not self._bank.try_send_money(
            self._apu_account, self._burns_account, APU_PAY_ELECTRICITY_AMOUNT
        ):
            self._complain(
                "Apu: Failed to pay for electricity (insufficient funds or invalid account)\n"
            )
        self._say(f"End Apu: {self._bank.account_balance(self._apu_account)}\n\n")

    def add_cash(self, amount: Money) -> None:
        """Deposit cash into Apu's account; failures are reported, not raised."""
        if amount <= 0:
            return
        try:
            self._bank.deposit_money(self._apu_account, amount)
            self._say("Apu deposited cash to bank account.\n")
        except BankOperationError as error:
            self._complain(f"Apu: Failed to deposit cash: {error}\n")


class BartLisa(Citizen):
    """The kids, who spend cash at Apu's.

    With keep_cash false, cash they get goes to Apu at once. With keep_cash
    true, they hold it and hand their holding to Apu on each run; the holding
    itself is only reduced by theft.
    """

    def __init__(self, apu: Apu, keep_cash: bool = False) -> None:
        self._apu = apu
        self._keep_cash = keep_cash
        self._cash: Money = 0
        self._lock = threading.Lock()

    def run(self) -> None:
        if not self._keep_cash:
            return
        held = self.cash
        if held > 0:
            try:
                self._apu.add_cash(held)
                self._say("BartLisa give cash to Apu.\n")
            except BankOperationError as error:
                self._complain(f"BartLisa: Failed to deposit cash: {error}\n")

    def add_cash(self, amount: Money) -> None:
        """Receive cash."""
        if amount <= 0:
            return
        if self._keep_cash:
            with self._lock:
                self._cash += amount
            return
        try:
            self._apu.add_cash(amount)
            self._say("BartLisa give cash to Apu.\n")
        except BankOperationError as error:
            self._complain(f"BartLisa: Failed to deposit cash: {error}\n")

    @property
    def cash(self) -> Money:
        """Cash currently held."""
        with self._lock:
            return self._cash

    def steal_cash(self, amount: Money) -> bool:
        """Take amount from the held cash; return False if it is not there."""
        with self._lock:
            if amount > 0 and self._cash >= amount:
                self._cash -= amount
                return True
            return False


class Burns(Citizen):
    """Plant owner who pays Homer's salary."""

    def __init__(self, bank: Bank, burns_account: AccountId, homer_account: AccountId) -> None:
        self._bank = bank
        self._burns_account = burns_account
        self._homer_account = homer_account

    def run(self) -> None:
        self._say(f"Start Burns: {self._bank.account_balance(self._burns_account)}\n")
        if not self._bank.try_send_money(
            self._burns_account, self._homer_account, BURNS_PAY_HOMER_AMOUNT
        ):
            self._complain(
                "Burns: Failed to pay Homer's salary (insufficient funds or invalid account)\n"
            )
        self._say(f"End Burns: {self._bank.account_balance(self._burns_account)}\n\n")


class Homer(Citizen):
    """Sends money to Marge, pays for electricity and gives cash to the kids."""

    def __init__(
        self,
        bank: Bank,
        homer_account: AccountId,
        marge_account: AccountId,
        burns_account: AccountId,
        bart_lisa: BartLisa,
    ) -> None:
        self._bank = bank
        self._homer_account = homer_account
        self._marge_account = marge_account
        self._burns_account = burns_account
        self._bart_lisa = bart_lisa

    def run(self) -> None:
        self._say(f"Start Homer: {self._bank.account_balance(self._homer_account)}\n")
        if not self._bank.try_send_money(
            self._homer_account, self._marge_account, HOMER_SEND_TO_MARGE_AMOUNT
        ):
            self._complain(
                "Homer: Failed to send money to Marge (insufficient funds or invalid account)\n"
            )
        if not self._bank.try_send_money(
            self._homer_account, self._burns_account, HOMER_PAY_ELECTRICITY_AMOUNT
        ):
            self._complain(
                "Homer: Failed to pay for electricity (insufficient funds or invalid account)\n"
            )
        if self._bank.try_withdraw_money(self._homer_account, HOMER_WITHDRAW_AMOUNT):
            self._bart_lisa.add_cash(HOMER_WITHDRAW_AMOUNT)
        else:
            self._complain(
                "Homer: Failed to withdraw cash (insufficient funds or invalid account)\n"
            )
        self._say(f"End Homer: {self._bank.account_balance(self._homer_account)}\n\n")


class Marge(Citizen):
    """Buys groceries from Apu."""

    def __init__(self, bank: Bank, marge_account: AccountId, apu_account: AccountId) -> None:
        self._bank = bank
        self._marge_account = marge_account
        self._apu_account = apu_account

    def run(self) -> None:
        self._say(f"Start Marge: {self._bank.account_balance(self._marge_account)}\n")
        if not self._bank.try_send_money(
            self._marge_account, self._apu_account, MARGE_PAY_APU_AMOUNT
        ):
            self._complain(
                "Marge: Failed to buy groceries from Apu (insufficient funds or invalid account)\n"
            )
        self._say(f"End Marge: {self._bank.account_balance(self._marge_account)}\n\n")


class Nelson(Citizen):
    """Steals cash from the kids and spends it at Apu's."""

    def __init__(self, bart_lisa: BartLisa, apu: Apu) -> None:
        self._bart_lisa = bart_lisa
        self._apu = apu

    def run(self) -> None:
        self._say(f"Start Nelson: {self._bart_lisa.cash}\n")
        if self._bart_lisa.steal_cash(NELSON_STEAL_AMOUNT):
            self._apu.add_cash(NELSON_STEAL_AMOUNT)
            self._say("Nelson stole cash from BartLisa and gave it to Apu.\n")
        else:
            self._complain("Nelson: Failed to steal cash from BartLisa (insufficient cash)\n")
        self._say(f"End Nelson: {self._bart_lisa.cash}\n\n")


class Smithers(Citizen):
    """Gets paid by Burns, shops at Apu's and reopens his account each round."""

    def __init__(
        self,
        bank: Bank,
        smithers_account: AccountId,
        burns_account: AccountId,
        apu_account: AccountId,
    ) -> None:
        self._bank = bank
        self.account = smithers_account
        self._burns_account = burns_account
        self._apu_account = apu_account

    def run(self) -> None:
        self._say(f"Start Smithers: {self._bank.account_balance(self.account)}\n")
        if not self._bank.try_send_money(
            self._burns_account, self.account, SMITHERS_SALARY_AMOUNT
        ):
            self._complain(
                "Smithers: Failed to receive salary from Burns "
                "(insufficient funds or invalid account)\n"
            )
        if not self._bank.try_send_money(self.account, self._apu_account, SMITHERS_SPEND_AMOUNT):
            self._complain(
                "Smithers: Failed to buy groceries from Apu "
                "(insufficient funds or invalid account)\n"
            )
        balance = self._bank.close_account(self.account)
        self.account = self._bank.open_account()
        self._bank.deposit_money(self.account, balance)
        self._say(f"End Smithers: {self._bank.account_balance(self.account)}\n\n")


class Snake(Citizen):
    """Hacks Homer's account and spends the proceeds at Apu's."""

    def __init__(
        self,
        bank: Bank,
        homer_account: AccountId,
        snake_account: AccountId,
        apu_account: AccountId,
    ) -> None:
        self._bank = bank
        self._homer_account = homer_account
        self._snake_account = snake_account
        self._apu_account = apu_account

    def run(self) -> None:
        self._say(f"Start Snake: {self._bank.account_balance(self._snake_account)}\n")
        if not self._bank.try_send_money(
            self._homer_account, self._snake_account, SNAKE_HACK_AMOUNT
        ):
            self._complain(
                "Snake: Failed to hack Homer's account (insufficient funds or invalid account)\n"
            )
        if not self._bank.try_send_money(
            self._snake_account, self._apu_account, SNAKE_SPEND_AMOUNT
        ):
            self._complain(
                "Snake: Failed to buy groceries from Apu (insufficient funds or invalid account)\n"
            )
        self._say(f"End Snake: {self._bank.account_balance(self._snake_account)}\n\n")