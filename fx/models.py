"""Rate observation record."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RateObservation:
    """One stored USD to INR quote. ``rate`` is INR per 1 USD."""

    id: int
    date: str
    rate: float

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "RateObservation":
        return cls(id=int(row["id"]), date=str(row["date"]), rate=float(row["rate"]))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
