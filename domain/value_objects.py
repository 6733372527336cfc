"""Domain Value Objects"""
from pydantic import BaseModel, Field, field_validator, ValidationInfo
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from domain.errors import InvalidRange
from domain.intervals import DateLike, to_day, nights, overlaps, contains

CENT = Decimal("0.01")


class DateRange(BaseModel):
    """Value Object for a half-open stay [check_in, check_out)"""
    check_in: date
    check_out: date

    @field_validator('check_out')
    @classmethod
    def check_out_after_check_in(cls, v: date, info: ValidationInfo) -> date:
        if 'check_in' in info.data and v <= info.data['check_in']:
            raise ValueError('Check-out must be after check-in')
        return v

    @classmethod
    def between(cls, check_in: DateLike, check_out: DateLike) -> "DateRange":
        """Build a range from raw dates, raising InvalidRange instead of a validation error"""
        start, end = to_day(check_in), to_day(check_out)
        if end <= start:
            raise InvalidRange(start, end)
        return cls(check_in=start, check_out=end)

    def nights(self) -> int:
        """Calculate number of nights"""
        return nights(self.check_in, self.check_out)

    def overlaps(self, other: "DateRange") -> bool:
        return overlaps(self.check_in, self.check_out, other.check_in, other.check_out)

    def contains(self, day: DateLike) -> bool:
        return contains(self.check_in, self.check_out, day)

    class Config:
        frozen = True


class Money(BaseModel):
    """Value Object for monetary amounts"""
    amount: Decimal = Field(gt=0, decimal_places=2)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @classmethod
    def of(cls, amount, currency: str = "USD") -> "Money":
        """Quantize to cents; floats go through str() so 0.1 stays 0.1"""
        if isinstance(amount, float):
            amount = str(amount)
        return cls(amount=Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP), currency=currency)

    def times(self, count: int) -> "Money":
        return Money(amount=(self.amount * count).quantize(CENT, rounding=ROUND_HALF_UP), currency=self.currency)

    class Config:
        frozen = True
