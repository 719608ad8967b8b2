import asyncio
import logging
import uuid
import pytest
from core.logging_config import RequestIDFilter, request_id_ctx


class RecordCollector(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []
        self.addFilter(RequestIDFilter())

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def app_records():
    """Records of the app logger (request lines), stamped with their request id."""
    handler = RecordCollector()
    app_logger = logging.getLogger("main")
    app_logger.addHandler(handler)
    yield handler.records
    app_logger.removeHandler(handler)


async def test_concurrent_requests_keep_their_own_id(client, app_records):
    """Test overlapping requests each log with their own id and leave nothing behind."""
    factory = logging.getLogRecordFactory()
    users = [str(uuid.uuid4()) for _ in range(5)]

    responses = await asyncio.gather(*(
        client.get(f"/users/{user}/cart", headers={"X-Request-ID": f"req-{i}"})
        for i, user in enumerate(users)
    ))

    assert [r.headers["X-Request-ID"] for r in responses] == [f"req-{i}" for i in range(5)]

    logged = {r.path: r.request_id for r in app_records if hasattr(r, "path")}
    assert logged == {f"/users/{user}/cart": f"req-{i}" for i, user in enumerate(users)}

    # Nothing leaks past the requests
    assert logging.getLogRecordFactory() is factory
    assert request_id_ctx.get() is None

    outside = logging.getLogger("main").makeRecord("main", logging.INFO, __file__, 0, "outside", None, None)
    RequestIDFilter().filter(outside)
    assert outside.request_id is None
