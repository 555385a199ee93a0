"""Structured Logging — JSON rendering of request fields and domain faults.

Tests cover:
    - base fields and known extras land in the JSON line
    - a ShopfrontError passed as fault renders code, category, context
    - non-JSON values (UUID, Enum) are encoded instead of raising
    - handled API errors log the fault with the request coordinates
"""

import json
import logging
import uuid

from shopfront.core.domain_types import ConnectionPhase
from shopfront.core.errors import StorageFault, ValidationRejection
from shopfront.infrastructure.observability import (
    ConsoleFormatter, JSONFormatter, describe_fault,
)


def _record(msg="hello", **extra):
    record = logging.LogRecord(
        "shopfront.test", logging.WARNING, __file__, 1, msg, None, None,
    )
    record.__dict__.update(extra)
    return record


def test_base_fields_and_extras():
    line = json.loads(JSONFormatter().format(
        _record(method="GET", path="/api/products", status_code=200),
    ))
    assert line["level"] == "WARNING"
    assert line["logger"] == "shopfront.test"
    assert line["message"] == "hello"
    assert line["method"] == "GET"
    assert line["status_code"] == 200
    assert "error" not in line


def test_fault_rendered_with_context():
    exc = ValidationRejection("name too short", "name")
    exc.context.method = "POST"
    exc.context.path = "/api/products"

    line = json.loads(JSONFormatter().format(_record(fault=exc)))
    assert line["error"]["code"] == "VALIDATION_ERROR"
    assert line["error"]["category"] == "validation"
    assert line["error"]["severity"] == "warning"
    assert line["error"]["http_status"] == 400
    assert line["error"]["field"] == "name"
    assert line["error"]["context"]["method"] == "POST"
    assert line["error"]["context"]["path"] == "/api/products"
    assert line["error"]["context"]["timestamp"]


def test_fault_context_omits_unset_coordinates():
    fault = describe_fault(StorageFault("commit"))
    assert fault["http_status"] == 500
    assert set(fault["context"]) == {"timestamp"}
    assert "field" not in fault


def test_unencodable_extras_do_not_raise():
    product_id = uuid.uuid4()
    line = json.loads(JSONFormatter().format(
        _record(product_id=product_id, phase=ConnectionPhase.CONNECTING),
    ))
    assert line["product_id"] == str(product_id)
    assert line["phase"] == "connecting"


def test_console_format_appends_code():
    line = ConsoleFormatter().format(_record(fault=StorageFault("commit")))
    assert line.endswith("hello [STORAGE_FAULT]")


async def test_rejection_is_logged_with_fault(client, caplog):
    caplog.set_level(logging.WARNING, logger="shopfront")
    res = await client.post("/api/products", json={"name": "AB", "price": 1})
    assert res.status_code == 400

    faults = [r for r in caplog.records if hasattr(r, "fault")]
    assert len(faults) == 1
    line = json.loads(JSONFormatter().format(faults[0]))
    assert line["error"]["context"]["path"] == "/api/products"
    assert line["error"]["context"]["method"] == "POST"
