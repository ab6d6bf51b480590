import asyncio
import threading

import pytest

from printmaster.errors import ValidationError
from printmaster.services.cart import Cart
from printmaster.services.configurator import ConfiguratorState, PrintConfigurator, SourceFile
from printmaster.utils.page_counter import PageCountError


def fixed_counter(pages):
    return lambda content, content_type: pages


def failing_counter(content, content_type):
    raise PageCountError("unreadable PDF")


def source(name="notes.pdf", content=b"%PDF-1.4"):
    return SourceFile(name=name, url=f"uploads/{name}", content=content, content_type="application/pdf")


def test_upload_counts_pages():
    cfg = PrintConfigurator(fixed_counter(50))
    assert cfg.state == ConfiguratorState.IDLE
    result = asyncio.run(cfg.upload(source()))
    assert result.ok and result.page_count == 50
    assert cfg.state == ConfiguratorState.COUNTED
    assert cfg.page_count == 50


def test_commit_builds_priced_custom_line():
    cfg = PrintConfigurator(fixed_counter(50))
    cart = Cart()
    asyncio.run(cfg.upload(source()))
    cfg.configure(print_type="BW", side_type="Single", binding="Spiral")
    assert cfg.state == ConfiguratorState.CONFIGURED

    line = cfg.commit(cart)
    assert line.unit_price == 140
    assert line.quantity == 1
    assert line.total_price == 140
    assert line.unit_cost == 25
    assert line.file_details.page_count == 50
    assert line.file_details.side_type == "Single"
    assert cart.get(line.key) == line
    # form resets, options stay
    assert cfg.state == ConfiguratorState.IDLE
    assert cfg.page_count == 0
    assert cfg.options.side_type == "Single"


def test_identical_configurations_are_separate_lines():
    cfg = PrintConfigurator(fixed_counter(10))
    cart = Cart()
    for _ in range(2):
        asyncio.run(cfg.upload(source()))
        cfg.commit(cart)
    assert len(cart) == 2
    assert len({line.key for line in cart}) == 2


def test_sides_do_not_change_price():
    cfg = PrintConfigurator(fixed_counter(20))
    asyncio.run(cfg.upload(source()))
    cfg.configure(print_type="Color", binding="Hard", side_type="Single")
    single = cfg.estimate()
    cfg.configure(side_type="Double")
    assert cfg.estimate() == single == 20 * 10 + 200


def test_commit_without_page_count_is_blocked():
    cfg = PrintConfigurator(fixed_counter(5))
    cart = Cart()
    with pytest.raises(ValidationError):
        cfg.commit(cart)
    assert len(cart) == 0


def test_failed_detection_returns_to_idle_and_blocks_commit():
    cfg = PrintConfigurator(failing_counter)
    cart = Cart()
    result = asyncio.run(cfg.upload(source()))
    assert not result.ok
    assert "unreadable" in result.error
    assert cfg.state == ConfiguratorState.IDLE
    with pytest.raises(ValidationError):
        cfg.commit(cart)
    assert len(cart) == 0


def test_stale_detection_is_discarded():
    gate = threading.Event()

    def counter(content, content_type):
        if content == b"slow":
            gate.wait(5)
            return 90
        return 3

    cfg = PrintConfigurator(counter)

    async def scenario():
        first = asyncio.create_task(cfg.upload(source("big.pdf", b"slow")))
        await asyncio.sleep(0.05)
        second = await cfg.upload(source("small.pdf", b"fast"))
        gate.set()
        return await first, second

    first, second = asyncio.run(scenario())
    assert second.ok and second.page_count == 3
    assert first.stale and not first.ok
    assert cfg.file_name == "small.pdf"
    assert cfg.page_count == 3


def test_reset_discards_in_flight_detection():
    gate = threading.Event()

    def counter(content, content_type):
        gate.wait(5)
        return 12

    cfg = PrintConfigurator(counter)

    async def scenario():
        task = asyncio.create_task(cfg.upload(source()))
        await asyncio.sleep(0.05)
        cfg.reset()
        gate.set()
        return await task

    result = asyncio.run(scenario())
    assert result.stale
    assert cfg.state == ConfiguratorState.IDLE
    assert cfg.page_count == 0


def test_unexpected_counter_error_returns_to_idle():
    def broken_counter(content, content_type):
        raise RuntimeError("decoder crashed")

    cfg = PrintConfigurator(broken_counter)
    result = asyncio.run(cfg.upload(source("scan.png", b"\x89PNG")))
    assert not result.ok and not result.stale
    assert "decoder crashed" in result.error
    assert cfg.state == ConfiguratorState.IDLE
    assert cfg.file_name is None
    assert cfg.error == result.error
