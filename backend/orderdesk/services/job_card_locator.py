"""Job Card Locator.

A job card number is "{sales_order_id}/{item_serial_no}", e.g. "SO-0001/2".
Looking one up yields exactly one of three results:

    JobCardFound        the sales order and its line item
    JobCardNotFound     well-formed number, but no such order or item
    InvalidJobCardNumber  the input is not a job card number at all

Malformed input never raises. Errors from the fetch function propagate.
"""

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from orderdesk.models.sales_order import SalesOrder, SalesOrderItem, format_job_card_number

logger = logging.getLogger(__name__)

JOB_CARD_NUMBER_PATTERN = re.compile(r"^([^/]+)/([0-9]+)$")


@dataclass(frozen=True)
class JobCardFound:
    sales_order: SalesOrder
    item: SalesOrderItem

    @property
    def job_card_number(self) -> str:
        return format_job_card_number(self.sales_order.sales_order_id, self.item.item_serial_no)


@dataclass(frozen=True)
class JobCardNotFound:
    sales_order_id: str
    item_serial_no: int
    sales_order_exists: bool = False

    @property
    def message(self) -> str:
        if self.sales_order_exists:
            return f"Sales order {self.sales_order_id} has no item {self.item_serial_no}"
        return f"Sales order {self.sales_order_id} not found"


@dataclass(frozen=True)
class InvalidJobCardNumber:
    value: str
    message: str = "Job card number must look like SO-0001/1"


JobCardLookup = Union[JobCardFound, JobCardNotFound, InvalidJobCardNumber]
SalesOrderFetcher = Callable[[str], Awaitable[Optional[SalesOrder]]]


def parse_job_card_number(value: str) -> Optional[tuple[str, int]]:
    """Split a job card number into (sales_order_id, item_serial_no).

    Returns None when the value does not have the expected shape.
    """
    if not isinstance(value, str):
        return None
    # fullmatch so a trailing newline is rejected too
    match = JOB_CARD_NUMBER_PATTERN.fullmatch(value)
    if not match:
        return None
    return match.group(1), int(match.group(2))


async def locate_job_card(value: str, fetch_sales_order: SalesOrderFetcher) -> JobCardLookup:
    """Resolve a job card number to its sales order and line item.

    Args:
        value: Job card number as entered (already trimmed by the caller)
        fetch_sales_order: Async lookup of a sales order by business key

    Returns:
        JobCardFound, JobCardNotFound or InvalidJobCardNumber
    """
    parsed = parse_job_card_number(value)
    if parsed is None:
        return InvalidJobCardNumber(value=value if isinstance(value, str) else repr(value))

    sales_order_id, item_serial_no = parsed
    sales_order = await fetch_sales_order(sales_order_id)
    if sales_order is None:
        logger.info(f"Job card lookup {value}: sales order not found")
        return JobCardNotFound(sales_order_id, item_serial_no)

    item = sales_order.get_item(item_serial_no)
    if item is None:
        logger.info(f"Job card lookup {value}: item not found")
        return JobCardNotFound(sales_order_id, item_serial_no, sales_order_exists=True)

    return JobCardFound(sales_order=sales_order, item=item)
