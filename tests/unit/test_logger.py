import logging
from utils.logger import log_request, log_database_query


def test_log_request_level_follows_status(caplog):
    logger = logging.getLogger("tests.requests")

    with caplog.at_level(logging.DEBUG, logger="tests.requests"):
        log_request(logger, "GET", "/users/1/cart", 200, 1.234)
        log_request(logger, "PUT", "/users/1/cart", 404, 2.0)
        log_request(logger, "POST", "/users/1/cart", 500, 3.0, client_ip="127.0.0.1")

    levels = [record.levelno for record in caplog.records]
    assert levels == [logging.INFO, logging.WARNING, logging.ERROR]

    last = caplog.records[-1]
    assert last.status_code == 500
    assert last.client_ip == "127.0.0.1"
    assert caplog.records[0].duration_ms == 1.23


def test_log_database_query_warns_on_slow_query(caplog):
    logger = logging.getLogger("tests.db")

    with caplog.at_level(logging.DEBUG, logger="tests.db"):
        log_database_query(logger, "UPDATE", "carts", 5.0, rows_affected=1)
        log_database_query(logger, "DELETE", "cart_items", 1500.0)

    fast, slow = caplog.records
    assert fast.levelno == logging.DEBUG
    assert fast.rows_affected == 1
    assert slow.levelno == logging.WARNING
    assert "Slow DELETE query on cart_items" in slow.getMessage()
