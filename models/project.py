from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

# Fixed-point scale used by every hours/cost column
TWO_PLACES = Decimal("0.01")
# DECIMAL(7, 2) holds at most five integer digits
FIXED_POINT_LIMIT = Decimal("100000")


class RowLike(Protocol):
    """Anything readable by column name (sqlite3.Row, dict)."""

    def __getitem__(self, key: str) -> Any: ...


def to_fixed_point(value: Decimal | float | int | str | None) -> Decimal | None:
    """Normalize a numeric value to a two-place Decimal, keeping None as None.

    Raises:
        decimal.InvalidOperation: if a string is not a number, or the value is
            NaN, infinite or does not fit DECIMAL(7, 2).
    """
    if value is None:
        return None
    amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    if not amount.is_finite():
        raise InvalidOperation(f"{value} is not a finite number")
    amount = amount.quantize(TWO_PLACES)
    if abs(amount) >= FIXED_POINT_LIMIT:
        raise InvalidOperation(f"{value} is out of range for two-place storage")
    return amount


def fixed_point_to_db(value: Decimal | None) -> str | None:
    """Bind a Decimal as its canonical string so no float rounding happens.

    Raises:
        decimal.InvalidOperation: for any value to_fixed_point rejects.
    """
    amount = to_fixed_point(value)
    return None if amount is None else str(amount)


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


@dataclass
class Category:
    """A shared project category (read-only)."""

    category_id: int
    category_name: str

    @classmethod
    def from_row(cls, row: RowLike) -> Category:
        return cls(category_id=int(row["category_id"]), category_name=str(row["category_name"]))

    def __str__(self) -> str:
        return self.category_name


@dataclass
class Material:
    """A material required by a project."""

    material_id: int
    project_id: int
    material_name: str
    num_required: int | None = None
    cost: Decimal | None = None

    def __post_init__(self) -> None:
        self.cost = to_fixed_point(self.cost)

    @classmethod
    def from_row(cls, row: RowLike) -> Material:
        return cls(
            material_id=int(row["material_id"]),
            project_id=int(row["project_id"]),
            material_name=str(row["material_name"]),
            num_required=_optional_int(row["num_required"]),
            cost=to_fixed_point(row["cost"]),
        )

    def __str__(self) -> str:
        qty = f"{self.num_required} x " if self.num_required is not None else ""
        cost = f" @ {self.cost}" if self.cost is not None else ""
        return f"{qty}{self.material_name}{cost}"


@dataclass
class Step:
    """An ordered instruction belonging to a project."""

    step_id: int
    project_id: int
    step_text: str
    step_order: int

    @classmethod
    def from_row(cls, row: RowLike) -> Step:
        return cls(
            step_id=int(row["step_id"]),
            project_id=int(row["project_id"]),
            step_text=str(row["step_text"]),
            step_order=int(row["step_order"]),
        )

    def __str__(self) -> str:
        return f"{self.step_order}. {self.step_text}"


@dataclass
class Project:
    """Project record with eagerly loaded child collections.

    project_id is None until the store assigns one on insert.
    Hours are kept as two-place Decimals regardless of the input type.
    """

    project_name: str
    estimated_hours: Decimal | None = None
    actual_hours: Decimal | None = None
    difficulty: int | None = None
    notes: str | None = None
    project_id: int | None = None
    materials: list[Material] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.estimated_hours = to_fixed_point(self.estimated_hours)
        self.actual_hours = to_fixed_point(self.actual_hours)

    @classmethod
    def from_row(cls, row: RowLike) -> Project:
        """Decode a project row; child collections start empty."""
        return cls(
            project_id=int(row["project_id"]),
            project_name=str(row["project_name"]),
            estimated_hours=to_fixed_point(row["estimated_hours"]),
            actual_hours=to_fixed_point(row["actual_hours"]),
            difficulty=_optional_int(row["difficulty"]),
            notes=row["notes"],
        )

    def to_db_dict(self) -> dict[str, Any]:
        """Named bind parameters for INSERT/UPDATE statements."""
        return {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "estimated_hours": fixed_point_to_db(self.estimated_hours),
            "actual_hours": fixed_point_to_db(self.actual_hours),
            "difficulty": self.difficulty,
            "notes": self.notes,
        }

    def __str__(self) -> str:
        """Human-readable multi-line representation used by the menu."""
        lines = [
            f"ID={self.project_id}",
            f"   name: {self.project_name}",
            f"   estimated hours: {self.estimated_hours}",
            f"   actual hours: {self.actual_hours}",
            f"   difficulty: {self.difficulty}",
            f"   notes: {self.notes}",
        ]
        for title, items in (
            ("Materials", self.materials),
            ("Steps", self.steps),
            ("Categories", self.categories),
        ):
            lines.append(f"   {title}:")
            lines.extend(f"      {item}" for item in items)
        return "\n".join(lines)
