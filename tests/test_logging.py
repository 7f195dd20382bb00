import json
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from device_manager.core.logging import JsonLogFormatter
from device_manager.middlewares import request_id_ctx_var


def _record(**extra):
    record = logging.LogRecord("device_manager.test", logging.WARNING, __file__, 1, "device %s", ("abc",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_request_id_and_extra_data():
    token = request_id_ctx_var.set("req-123")
    try:
        line = JsonLogFormatter().format(_record(extra_data={"serial_number": "abc"}))
    finally:
        request_id_ctx_var.reset(token)

    payload = json.loads(line)
    assert payload["message"] == "device abc"
    assert payload["level"] == "WARNING"
    assert payload["request_id"] == "req-123"
    assert payload["serial_number"] == "abc"
    assert payload["timestamp"].endswith("Z")


def test_json_formatter_omits_request_id_outside_requests():
    payload = json.loads(JsonLogFormatter().format(_record()))
    assert "request_id" not in payload
