import threading

import pytest

from parlabs.warehouse import (
    Args,
    Tally,
    Warehouse,
    auditor,
    client,
    main,
    parse_args,
    supplier,
)


def _join_all(threads):
    for thread in threads:
        thread.join(timeout=5)
    return [thread for thread in threads if thread.is_alive()]


def test_tally_concurrent_adds():
    tally = Tally()

    def work():
        for _ in range(1000):
            tally.add(1)

    threads = [threading.Thread(target=work) for _ in range(4)]
    for thread in threads:
        thread.start()
    assert _join_all(threads) == []
    assert tally.value == 4000


def test_add_and_take_within_limits():
    warehouse = Warehouse(10, threading.Event())
    assert warehouse.add_goods(4) is True
    assert warehouse.stock == 4
    assert warehouse.take_goods(3) is True
    assert warehouse.stock == 1


def test_fill_to_exact_capacity():
    warehouse = Warehouse(10, threading.Event())
    assert warehouse.add_goods(10) is True
    assert warehouse.stock == warehouse.capacity


def test_add_beyond_capacity_fails_once_stopped():
    stop = threading.Event()
    warehouse = Warehouse(10, stop)
    warehouse.add_goods(8)
    timer = threading.Timer(0.1, stop.set)
    timer.start()
    assert warehouse.add_goods(5) is False
    assert warehouse.stock == 8


def test_take_from_empty_fails_once_stopped():
    stop = threading.Event()
    warehouse = Warehouse(10, stop)
    timer = threading.Timer(0.1, stop.set)
    timer.start()
    assert warehouse.take_goods(1) is False
    assert warehouse.stock == 0


def test_stopped_warehouse_refuses_even_when_possible():
    stop = threading.Event()
    stop.set()
    warehouse = Warehouse(10, stop)
    assert warehouse.add_goods(1) is False
    assert warehouse.stock == 0


def test_take_waits_for_supply():
    warehouse = Warehouse(10, threading.Event())
    results = []
    taker = threading.Thread(target=lambda: results.append(warehouse.take_goods(5)))
    taker.start()
    assert warehouse.add_goods(5) is True
    assert _join_all([taker]) == []
    assert results == [True]
    assert warehouse.stock == 0


def test_supplier_fills_warehouse_until_stopped():
    stop = threading.Event()
    warehouse = Warehouse(100, stop)
    supplied = Tally()
    thread = threading.Thread(target=supplier, args=(warehouse, supplied, stop))
    thread.start()
    threading.Timer(0.2, stop.set).start()
    assert _join_all([thread]) == []
    assert supplied.value == warehouse.stock
    assert 0 < warehouse.stock <= 100


def test_all_roles_keep_stock_consistent():
    stop = threading.Event()
    warehouse = Warehouse(100, stop)
    supplied = Tally()
    purchased = Tally()
    threads = [
        threading.Thread(target=supplier, args=(warehouse, supplied, stop)),
        threading.Thread(target=supplier, args=(warehouse, supplied, stop)),
        threading.Thread(target=client, args=(warehouse, purchased, stop)),
        threading.Thread(target=auditor, args=(warehouse, stop)),
    ]
    for thread in threads:
        thread.start()
    threading.Timer(0.2, stop.set).start()
    assert _join_all(threads) == []
    assert supplied.value - purchased.value == warehouse.stock
    assert 0 <= warehouse.stock <= 100


def test_parse_args_numbers():
    assert parse_args(["1", "2", "3"]) == Args(1, 2, 3)


def test_parse_args_wrong_count():
    with pytest.raises(ValueError, match="Usage"):
        parse_args(["1", "2"])


def test_parse_args_not_numbers():
    with pytest.raises(ValueError, match="valid numbers"):
        parse_args(["a", "1", "1"])


def test_parse_args_out_of_range():
    with pytest.raises(ValueError, match="out of range"):
        parse_args(["99999999999", "1", "1"])


def test_main_without_threads(capsys):
    assert main(["0", "0", "0"]) == 0
    out = capsys.readouterr().out
    assert "Total supplied: 0" in out
    assert "Total purchased: 0" in out
    assert "Remaining stock: 0" in out


def test_main_bad_arguments(capsys):
    assert main(["1"]) == 1
    assert capsys.readouterr().err.startswith("Error: Usage")