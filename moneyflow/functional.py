from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Generic, Iterable, TypeVar

from moneyflow.domain import Expense
from moneyflow.ledger import Amount, parse_masked_amount, to_money

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Right has no error")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def find_expense(expenses: Iterable[Expense], expense_id: str) -> Maybe[Expense]:
    for e in expenses:
        if e.id == expense_id:
            return Some(e)
    return Nothing()


def check_amount(amount: Amount) -> Either[dict, Decimal]:
    value = parse_masked_amount(amount) if isinstance(amount, str) else to_money(amount)
    if value is None:
        return Left({
            "error": "invalid_amount",
            "message": f"Amount is not a usable number: {amount!r}",
            "amount": amount,
        })
    if value <= 0:
        return Left({
            "error": "non_positive_amount",
            "message": f"Amount must be greater than zero, got {value}",
            "amount": value,
        })
    return Right(value)


def check_description(description: str) -> Either[dict, str]:
    text = (description or "").strip()
    if not text:
        return Left({
            "error": "empty_description",
            "message": "Description must not be empty",
        })
    return Right(text)


def validate_expense_input(amount: Amount, description: str) -> Either[dict, tuple[Decimal, str]]:
    """Gate for the add action: a positive amount and a non-blank description."""
    return check_amount(amount).bind(
        lambda value: check_description(description).map(lambda text: (value, text))
    )
