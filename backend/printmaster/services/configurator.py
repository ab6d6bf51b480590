import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel

from printmaster import config
from printmaster.errors import ValidationError
from printmaster.models.catalog import CUSTOM_PRINT_CATEGORY
from printmaster.models.line import CustomPrintLine, FileDetails
from printmaster.services.cart import Cart
from printmaster.services.pricing import price_engine
from printmaster.utils.page_counter import PageCountError, count_pages

logger = logging.getLogger(__name__)


class ConfiguratorState(str, Enum):
    IDLE = "Idle"
    UPLOADING = "Uploading"
    COUNTED = "Counted"
    CONFIGURED = "Configured"


class PrintOptions(BaseModel):
    print_type: Literal["BW", "Color"] = "BW"
    side_type: Literal["Single", "Double"] = "Double"
    binding: Literal["None", "Spiral", "Wire", "Hard"] = "Spiral"


@dataclass
class SourceFile:
    name: str
    url: str
    content: bytes
    content_type: str = ""


@dataclass
class PageCountResult:
    ok: bool
    page_count: int = 0
    error: Optional[str] = None
    # True when a newer upload or a reset superseded this detection
    stale: bool = False


class PrintConfigurator:
    """Turns an uploaded document plus print options into a priced cart line.

    Idle -> Uploading -> Counted -> Configured. Page counting runs off the event
    loop; every upload or reset bumps ``generation`` so a detection that finishes
    after it was superseded is dropped instead of overwriting newer state.
    """

    def __init__(self, counter: Callable[[bytes, str], int] = count_pages):
        self._counter = counter
        self.state = ConfiguratorState.IDLE
        self.generation = 0
        self.file_name: Optional[str] = None
        self.file_url: Optional[str] = None
        self.page_count = 0
        self.error: Optional[str] = None
        self.options = PrintOptions()

    def _clear_file(self) -> None:
        self.file_name = None
        self.file_url = None
        self.page_count = 0

    def _fail(self, error: str) -> PageCountResult:
        self._clear_file()
        self.error = error
        self.state = ConfiguratorState.IDLE
        return PageCountResult(ok=False, error=error)

    async def upload(self, source: SourceFile) -> PageCountResult:
        self.generation += 1
        token = self.generation
        self._clear_file()
        self.file_name = source.name
        self.file_url = source.url
        self.error = None
        self.state = ConfiguratorState.UPLOADING
        logger.info("Counting pages file=%s generation=%s", source.name, token)

        try:
            pages = await asyncio.to_thread(self._counter, source.content, source.content_type)
        except PageCountError as e:
            if token != self.generation:
                return PageCountResult(ok=False, error=str(e), stale=True)
            logger.warning("Page count failed file=%s: %s", source.name, e)
            return self._fail(str(e))
        except Exception as e:
            if token != self.generation:
                return PageCountResult(ok=False, error=str(e), stale=True)
            logger.exception("Unexpected page count error file=%s: %s", source.name, e)
            return self._fail(f"could not read file: {e}")

        if token != self.generation:
            logger.warning("Discarding stale page count file=%s generation=%s current=%s",
                           source.name, token, self.generation)
            return PageCountResult(ok=False, page_count=pages, error="superseded", stale=True)

        self.page_count = pages
        self.state = ConfiguratorState.COUNTED
        logger.info("Detected %s pages in file=%s", pages, source.name)
        return PageCountResult(ok=True, page_count=pages)

    def configure(self, print_type: Optional[str] = None, side_type: Optional[str] = None,
                  binding: Optional[str] = None) -> PrintOptions:
        changes = {k: v for k, v in
                   (("print_type", print_type), ("side_type", side_type), ("binding", binding))
                   if v is not None}
        self.options = PrintOptions(**{**self.options.model_dump(), **changes})
        if self.state == ConfiguratorState.COUNTED:
            self.state = ConfiguratorState.CONFIGURED
        return self.options

    def estimate(self) -> float:
        return price_engine.custom_print_price(self.page_count, self.options.print_type, self.options.binding)

    @property
    def ready(self) -> bool:
        return (
            self.state in (ConfiguratorState.COUNTED, ConfiguratorState.CONFIGURED)
            and bool(self.file_name)
            and self.page_count > 0
        )

    def commit(self, cart: Cart) -> CustomPrintLine:
        if not self.ready:
            raise ValidationError("Upload a document and wait for the page count before adding it to the cart")

        price = self.estimate()
        line = CustomPrintLine(
            line_id=f"custom-{uuid4().hex[:12]}",
            name=f"Print: {self.file_name}",
            category=CUSTOM_PRINT_CATEGORY,
            unit_price=price,
            unit_cost=self.page_count * config.CUSTOM_PRINT_PAGE_COST,
            quantity=1,
            file_details=FileDetails(
                file_name=self.file_name,
                file_url=self.file_url,
                page_count=self.page_count,
                **self.options.model_dump(),
            ),
        )
        cart.add_or_increment(line)
        logger.info("Custom print added to cart key=%s pages=%s price=%s", line.key, self.page_count, price)
        self.reset()
        return line

    def reset(self) -> None:
        """Drop the current file; print options are kept for the next upload."""
        self.generation += 1
        self._clear_file()
        self.error = None
        self.state = ConfiguratorState.IDLE

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "file_name": self.file_name,
            "page_count": self.page_count,
            "options": self.options.model_dump(),
            "estimated_price": self.estimate(),
            "error": self.error,
        }
