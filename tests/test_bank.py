import threading

import pytest

from parlabs.bank import Bank, BankOperationError


@pytest.fixture
def bank():
    return Bank(1000)


def test_initial_cash_cannot_be_negative():
    with pytest.raises(BankOperationError):
        Bank(-100)


def test_open_account(bank):
    account = bank.open_account()
    assert bank.account_balance(account) == 0


def test_account_ids_are_unique(bank):
    ids = [bank.open_account() for _ in range(5)]
    assert ids == [1, 2, 3, 4, 5]


def test_deposit_edge_cases(bank):
    account = bank.open_account()
    bank.deposit_money(account, 1000)
    assert bank.account_balance(account) == 1000
    assert bank.cash == 0
    with pytest.raises(BankOperationError):
        bank.deposit_money(account, 1)

    other = Bank(1000)
    other_account = other.open_account()
    with pytest.raises(BankOperationError):
        other.deposit_money(other_account, 1001)


def test_deposit_zero_and_negative(bank):
    account = bank.open_account()
    bank.deposit_money(account, 0)
    assert bank.account_balance(account) == 0
    with pytest.raises(ValueError):
        bank.deposit_money(account, -1)
    with pytest.raises(ValueError):
        bank.deposit_money(account, -100)


def test_deposit_unknown_account(bank):
    with pytest.raises(BankOperationError):
        bank.deposit_money(42, 10)


def test_insufficient_cash_message(bank):
    account = bank.open_account()
    with pytest.raises(BankOperationError, match="Available cash: 1000, required: 1001"):
        bank.deposit_money(account, 1001)


def test_withdraw_edge_cases(bank):
    account = bank.open_account()
    bank.deposit_money(account, 500)
    bank.withdraw_money(account, 500)
    assert bank.account_balance(account) == 0
    assert bank.cash == 1000
    with pytest.raises(BankOperationError):
        bank.withdraw_money(account, 1)
    bank.deposit_money(account, 499)
    with pytest.raises(BankOperationError):
        bank.withdraw_money(account, 500)


def test_withdraw_zero_and_negative(bank):
    account = bank.open_account()
    bank.deposit_money(account, 500)
    bank.withdraw_money(account, 0)
    assert bank.account_balance(account) == 500
    with pytest.raises(ValueError):
        bank.withdraw_money(account, -1)
    with pytest.raises(ValueError):
        bank.withdraw_money(account, -100)


def test_try_withdraw_returns_false(bank):
    account = bank.open_account()
    assert bank.try_withdraw_money(account, 1) is False
    assert bank.cash == 1000


def test_send_money_edge_cases(bank):
    first = bank.open_account()
    second = bank.open_account()
    bank.deposit_money(first, 500)
    bank.send_money(first, second, 500)
    assert bank.account_balance(first) == 0
    assert bank.account_balance(second) == 500
    with pytest.raises(BankOperationError):
        bank.send_money(first, second, 1)
    bank.deposit_money(first, 499)
    with pytest.raises(BankOperationError):
        bank.send_money(first, second, 500)


def test_send_money_zero_and_negative(bank):
    first = bank.open_account()
    second = bank.open_account()
    bank.deposit_money(first, 500)
    bank.send_money(first, second, 0)
    assert bank.account_balance(first) == 500
    assert bank.account_balance(second) == 0
    with pytest.raises(ValueError):
        bank.send_money(first, second, -1)


def test_send_to_invalid_account(bank):
    first = bank.open_account()
    with pytest.raises(BankOperationError, match="Invalid account ID"):
        bank.try_send_money(first, 99, 0)


def test_close_account(bank):
    account = bank.open_account()
    bank.deposit_money(account, 500)
    assert bank.close_account(account) == 500
    assert bank.cash == 1000
    with pytest.raises(BankOperationError):
        bank.close_account(999)
    with pytest.raises(BankOperationError):
        bank.account_balance(account)


def test_operations_count(bank):
    account = bank.open_account()
    bank.deposit_money(account, 500)
    bank.withdraw_money(account, 200)
    assert bank.operations_count == 3


def test_accounts_balance(bank):
    first = bank.open_account()
    second = bank.open_account()
    bank.deposit_money(first, 300)
    bank.deposit_money(second, 200)
    assert bank.accounts_balance == 500
    assert bank.accounts_balance + bank.cash == 1000


def test_concurrent_transfers_preserve_total():
    bank = Bank(1000)
    first = bank.open_account()
    second = bank.open_account()
    bank.deposit_money(first, 500)
    bank.deposit_money(second, 500)

    def shuffle(src, dst):
        for _ in range(500):
            bank.try_send_money(src, dst, 7)
            if bank.try_withdraw_money(src, 3):
                bank.deposit_money(dst, 3)

    threads = [
        threading.Thread(target=shuffle, args=(first, second)),
        threading.Thread(target=shuffle, args=(second, first)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert bank.accounts_balance + bank.cash == 1000
    assert bank.account_balance(first) >= 0
    assert bank.account_balance(second) >= 0