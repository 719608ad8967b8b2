"""
Logging helpers shared by the app, routers and repositories.
"""

import logging
from typing import Any, Dict, Optional


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Usage:
        from utils.logger import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def log_request(
    logger: logging.Logger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    client_ip: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
):
    """
    Log an HTTP request in a structured format.

    5xx is logged as ERROR, 4xx as WARNING, everything else as INFO.

    Usage:
        log_request(logger, "POST", "/users/42/cart", 200, 12.3, client_ip="127.0.0.1")
    """
    log_data = {
        "http_method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }

    if client_ip:
        log_data["client_ip"] = client_ip

    if extra:
        log_data.update(extra)

    message = f'{client_ip or "unknown"} - "{method} {path}" {status_code}'

    if status_code >= 500:
        logger.error(message, extra=log_data)
    elif status_code >= 400:
        logger.warning(message, extra=log_data)
    else:
        logger.info(message, extra=log_data)


def log_database_query(
    logger: logging.Logger,
    query_type: str,
    table: str,
    duration_ms: float,
    rows_affected: Optional[int] = None
):
    """
    Log a database statement at DEBUG, or WARNING when it took over a second.

    Usage:
        log_database_query(logger, "UPDATE", "carts", 3.1, rows_affected=1)
    """
    log_data = {
        "query_type": query_type,
        "table": table,
        "duration_ms": round(duration_ms, 2)
    }

    if rows_affected is not None:
        log_data["rows_affected"] = rows_affected

    if duration_ms > 1000:
        logger.warning(
            f"Slow {query_type} query on {table}",
            extra=log_data
        )
    else:
        logger.debug(
            f"{query_type} query on {table}",
            extra=log_data
        )
