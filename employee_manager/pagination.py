"""
Paginated employee search.

A request is turned into a normalized query plan (filters, ordering, window),
run as one count query plus one page query against the employee store, and
assembled into a page of results with its position in the whole collection.
"""
import logging
import math
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Generic, List, Optional, TypeVar

from .db import decimal_text
from .models import Department, Employee
from .store import EmployeeStore
from .utils.types import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SORT_FIELDS
from .utils.validators import try_parse_date

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class PageRequest:
    """Requested page (1-based) and page size; sizes above 50 are clamped to 50."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.page < 1:
            raise ValueError("Page number must be greater than 0")
        if self.page_size < 1:
            raise ValueError("Page size must be between 1 and 50")
        if self.page_size > MAX_PAGE_SIZE:
            object.__setattr__(self, "page_size", MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class SearchCriteria:
    department: Optional[str] = None
    full_name: Optional[str] = None
    birth_date: Optional[str] = None
    hire_date: Optional[str] = None
    salary: Optional[str] = None

    def normalized(self) -> "SearchCriteria":
        # Trim every field, blank means "no filter"
        cleaned = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                value = str(value).strip() or None
            cleaned[f.name] = value
        return replace(self, **cleaned)

    def has_criteria(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True)
class SortSpec:
    field: Optional[str] = None
    direction: Optional[str] = None

    @property
    def key(self) -> Optional[str]:
        """Normalized sort key, or None when the field is not sortable."""
        if not self.field:
            return None
        key = self.field.strip().replace("_", "").lower()
        return key if key in SORT_FIELDS else None

    @property
    def descending(self) -> bool:
        return (self.direction or "").strip().lower() == "desc"


@dataclass
class PaginatedResult(Generic[T]):
    data: List[T] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    total_items: int = 0
    total_pages: int = 0
    has_next: bool = False
    has_previous: bool = False

    def map(self, fn: Callable[[T], U]) -> "PaginatedResult[U]":
        return PaginatedResult(
            data=[fn(item) for item in self.data],
            page=self.page,
            page_size=self.page_size,
            total_items=self.total_items,
            total_pages=self.total_pages,
            has_next=self.has_next,
            has_previous=self.has_previous,
        )


# ----------------------------
# Query plan
# ----------------------------
def build_filters(criteria: SearchCriteria) -> list:
    """Conjunction of the active search conditions, as SQL clauses."""
    clauses = []

    if criteria.department:
        clauses.append(Department.name.icontains(criteria.department, autoescape=True))
        logger.info("Applied department filter: %s", criteria.department)

    if criteria.full_name:
        clauses.append(Employee.full_name.icontains(criteria.full_name, autoescape=True))
        logger.info("Applied full name filter: %s", criteria.full_name)

    if criteria.birth_date:
        birth_date = try_parse_date(criteria.birth_date)
        if birth_date is None:
            logger.warning("Invalid birth date format: %s", criteria.birth_date)
        else:
            clauses.append(Employee.birth_date == birth_date)
            logger.info("Applied birth date filter: %s", birth_date)

    if criteria.hire_date:
        hire_date = try_parse_date(criteria.hire_date)
        if hire_date is None:
            logger.warning("Invalid hire date format: %s", criteria.hire_date)
        else:
            clauses.append(Employee.hire_date == hire_date)
            logger.info("Applied hire date filter: %s", hire_date)

    if criteria.salary:
        clauses.append(decimal_text(Employee.salary).startswith(criteria.salary, autoescape=True))
        logger.info("Applied salary filter: %s", criteria.salary)

    return clauses


def build_ordering(sort: SortSpec) -> list:
    """ORDER BY clauses; identifier ascending always breaks ties."""
    key = sort.key
    if key is None:
        logger.info("Sorting by id asc (default)")
        return [Employee.id.asc()]

    path = SORT_FIELDS[key]
    column = Department.name if path == "department.name" else getattr(Employee, path)
    logger.info("Sorting by %s %s", path, "desc" if sort.descending else "asc")
    primary = column.desc() if sort.descending else column.asc()
    return [primary, Employee.id.asc()]


def count_pages(total_items: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total_items / page_size)


class EmployeeSearchPaginator:
    """Read-only, stateless: every call runs against the current store contents."""

    def __init__(self, store: EmployeeStore):
        self.store = store

    def paginate(
        self,
        pagination: PageRequest,
        search: Optional[SearchCriteria] = None,
        sort: Optional[SortSpec] = None,
    ) -> PaginatedResult[Employee]:
        if pagination is None:
            raise ValueError("Pagination parameters cannot be null")

        criteria = (search or SearchCriteria()).normalized()
        sort = sort or SortSpec()
        logger.info(
            "Retrieving employees with pagination: page=%s page_size=%s sort_field=%s sort_direction=%s",
            pagination.page, pagination.page_size, sort.field, sort.direction,
        )

        filters = build_filters(criteria)
        total_items = self.store.count_matching(filters)
        total_pages = count_pages(total_items, pagination.page_size)
        logger.info("Total employees matching criteria: %s", total_items)

        if pagination.skip >= total_items:
            # Past the last match; nothing to fetch
            employees = []
        else:
            employees = self.store.fetch_page(
                filters, build_ordering(sort), pagination.skip, pagination.page_size
            )

        logger.info(
            "Retrieved %s %semployees for page %s of %s",
            len(employees), "filtered " if criteria.has_criteria() else "", pagination.page, total_pages,
        )
        return PaginatedResult(
            data=employees,
            page=pagination.page,
            page_size=pagination.page_size,
            total_items=total_items,
            total_pages=total_pages,
            has_next=pagination.page < total_pages,
            has_previous=pagination.page > 1,
        )
