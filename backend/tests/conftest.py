import os
import struct
import tempfile
import zlib

_tmp = tempfile.mkdtemp(prefix="printmaster-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp, "uploads")
os.environ["CHECKOUT_DELAY_SECONDS"] = "0"
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("ORDER_WEBHOOK_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from printmaster.db.session import make_engine  # noqa: E402
from printmaster.db.store import StateStore, get_store  # noqa: E402
from printmaster.main import app  # noqa: E402
from printmaster.models.line import ManualLine  # noqa: E402
from printmaster.state import get_state, seeded_state  # noqa: E402


@pytest.fixture
def state():
    return seeded_state()


@pytest.fixture
def store():
    return StateStore(make_engine("sqlite://"))


@pytest.fixture
def client(state, store):
    app.dependency_overrides[get_state] = lambda: state
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def manual_line(price, quantity=1, cost=0, category="Custom", key="m1"):
    return ManualLine(line_id=key, name=f"item {key}", category=category,
                      unit_price=price, unit_cost=cost, quantity=quantity)


def png_header(width, height):
    """A PNG that declares its size but carries no pixel data."""
    def chunk(tag, data):
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", zlib.crc32(tag + data) & 0xFFFFFFFF)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")
