"""Human-readable order numbers: ``CMD-YY-NNNNN``, restarting every year.

The running counter for a year is a small aggregate. Saving it goes through
the version check, so two orders placed at the same moment cannot take the
same number.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace


@marketplace.aggregate
class OrderNumberSequence:
    year = String(identifier=True, max_length=4)
    last_value = Integer(default=0, min_value=0)

    def next_value(self) -> int:
        self.last_value += 1
        return self.last_value


def format_order_number(year: int, value: int) -> str:
    return f"CMD-{year % 100:02d}-{value:05d}"


def next_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    repo = current_domain.repository_for(OrderNumberSequence)
    try:
        sequence = repo.get(str(now.year))
    except ObjectNotFoundError:
        sequence = OrderNumberSequence(year=str(now.year))

    value = sequence.next_value()
    repo.add(sequence)
    return format_order_number(now.year, value)
