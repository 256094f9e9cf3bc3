from datetime import date
from decimal import Decimal

import pytest

from employee_manager.pagination import (
    EmployeeSearchPaginator,
    PageRequest,
    SearchCriteria,
    SortSpec,
    count_pages,
)
from employee_manager.models import Department, Employee
from employee_manager.store import EmployeeStore


@pytest.fixture
def paginator(db_session):
    return EmployeeSearchPaginator(EmployeeStore(db_session))

@pytest.fixture
def three_employees(make_employee):
    return [
        make_employee("Alice Smith", salary="50000"),
        make_employee("Bob Jones", salary="60000", department="HR Department"),
        make_employee("Carol Smith", salary="70000", department="Finance Department"),
    ]

def names(result):
    return [e.full_name for e in result.data]


def test_search_sort_scenario(paginator, three_employees):
    result = paginator.paginate(
        PageRequest(page=1, page_size=2),
        SearchCriteria(full_name="smith"),
        SortSpec("salary", "desc"),
    )
    assert names(result) == ["Carol Smith", "Alice Smith"]
    assert result.total_items == 2
    assert result.total_pages == 1
    assert result.has_next is False
    assert result.has_previous is False

def test_empty_store(paginator, departments):
    result = paginator.paginate(PageRequest(page=1, page_size=10))
    assert result.data == []
    assert result.total_items == 0
    assert result.total_pages == 0
    assert result.has_next is False
    assert result.has_previous is False

def test_last_partial_page(paginator, make_employee):
    for i in range(25):
        make_employee(f"Employee {i:02d}")

    result = paginator.paginate(PageRequest(page=3, page_size=10))
    assert len(result.data) == 5
    assert result.total_items == 25
    assert result.total_pages == 3
    assert result.has_next is False
    assert result.has_previous is True
    # Default order is id ascending
    assert names(result) == [f"Employee {i:02d}" for i in range(20, 25)]

@pytest.mark.parametrize("page_size", [1, 2, 3, 7, 50])
def test_page_metadata_is_consistent(paginator, make_employee, page_size):
    for i in range(7):
        make_employee(f"Employee {i}")

    for page in (1, 2, 3):
        result = paginator.paginate(PageRequest(page=page, page_size=page_size))
        expected_pages = -(-7 // page_size)
        assert result.total_pages == expected_pages
        assert result.has_next == (page < expected_pages)
        assert result.has_previous == (page > 1)

def test_page_size_is_clamped_to_fifty(paginator, make_employee):
    make_employee("Only One")
    result = paginator.paginate(PageRequest(page=1, page_size=1000))
    assert result.page_size == 50
    assert result.total_pages == 1

def test_page_below_one_is_rejected():
    with pytest.raises(ValueError):
        PageRequest(page=0, page_size=10)

def test_page_size_below_one_is_rejected():
    with pytest.raises(ValueError):
        PageRequest(page=1, page_size=0)

def test_count_pages_guards_zero_page_size():
    assert count_pages(10, 0) == 0
    assert count_pages(0, 10) == 0
    assert count_pages(11, 10) == 2

def test_missing_pagination_is_rejected(paginator):
    with pytest.raises(ValueError):
        paginator.paginate(None)

def test_unknown_sort_field_falls_back_to_id(paginator, three_employees):
    result = paginator.paginate(PageRequest(), sort=SortSpec("nonsense", "desc"))
    assert [e.id for e in result.data] == sorted(e.id for e in three_employees)

def test_sort_field_is_case_insensitive(paginator, three_employees):
    for field in ("FullName", "fullname", "full_name", " FULLNAME "):
        result = paginator.paginate(PageRequest(), sort=SortSpec(field, "DESC"))
        assert names(result) == ["Carol Smith", "Bob Jones", "Alice Smith"], field

def test_unknown_direction_sorts_ascending(paginator, three_employees):
    result = paginator.paginate(PageRequest(), sort=SortSpec("salary", "sideways"))
    assert names(result) == ["Alice Smith", "Bob Jones", "Carol Smith"]

def test_sort_by_department_name(paginator, three_employees):
    result = paginator.paginate(PageRequest(), sort=SortSpec("departmentName", "asc"))
    # Finance, HR, IT
    assert names(result) == ["Carol Smith", "Bob Jones", "Alice Smith"]

def test_equal_sort_keys_break_ties_by_id(paginator, make_employee):
    first = make_employee("Same Pay A", salary="40000")
    second = make_employee("Same Pay B", salary="40000")
    richer = make_employee("Richer", salary="90000")

    result = paginator.paginate(PageRequest(), sort=SortSpec("salary", "desc"))
    assert [e.id for e in result.data] == [richer.id, first.id, second.id]

def test_calls_are_idempotent(paginator, three_employees):
    request = (PageRequest(page=1, page_size=2), SearchCriteria(full_name="o"), SortSpec("hireDate", "desc"))
    first = paginator.paginate(*request)
    second = paginator.paginate(*request)
    assert [e.id for e in first.data] == [e.id for e in second.data]
    assert first.total_items == second.total_items
    assert first.total_pages == second.total_pages

def test_filters_are_conjunctive(paginator, three_employees):
    smiths = paginator.paginate(PageRequest(), SearchCriteria(full_name="smith"))
    smiths_in_hr = paginator.paginate(PageRequest(), SearchCriteria(full_name="smith", department="hr"))
    assert smiths.total_items == 2
    assert smiths_in_hr.total_items == 0
    assert set(names(smiths_in_hr)) <= set(names(smiths))

def test_department_filter_is_case_insensitive_substring(paginator, three_employees):
    result = paginator.paginate(PageRequest(), SearchCriteria(department="fINANCE"))
    assert names(result) == ["Carol Smith"]
    assert result.data[0].department.name == "Finance Department"

def test_blank_fields_mean_no_filter(paginator, three_employees):
    result = paginator.paginate(
        PageRequest(),
        SearchCriteria(department="   ", full_name="", birth_date=" ", hire_date=None, salary="\t"),
    )
    assert result.total_items == 3

def test_search_values_are_trimmed(paginator, three_employees):
    result = paginator.paginate(PageRequest(), SearchCriteria(full_name="  bob  "))
    assert names(result) == ["Bob Jones"]

def test_birth_date_exact_match(paginator, make_employee):
    make_employee("Born 1985", birth_date=date(1985, 3, 15))
    make_employee("Born 1990", birth_date=date(1990, 7, 22))

    result = paginator.paginate(PageRequest(), SearchCriteria(birth_date="1990-07-22"))
    assert names(result) == ["Born 1990"]

    # Timestamps from the client still match on the calendar date
    result = paginator.paginate(PageRequest(), SearchCriteria(birth_date="1990-07-22T00:00:00Z"))
    assert names(result) == ["Born 1990"]

def test_hire_date_exact_match(paginator, make_employee):
    make_employee("Hired 2020", hire_date=date(2020, 1, 15))
    make_employee("Hired 2021", hire_date=date(2021, 3, 10))

    result = paginator.paginate(PageRequest(), SearchCriteria(hire_date="2021-03-10"))
    assert names(result) == ["Hired 2021"]

def test_unparsable_date_is_ignored(paginator, three_employees):
    result = paginator.paginate(PageRequest(), SearchCriteria(birth_date="not-a-date"))
    assert result.total_items == 3

def test_salary_prefix_match(paginator, three_employees):
    result = paginator.paginate(PageRequest(), SearchCriteria(salary="6"))
    assert names(result) == ["Bob Jones"]

    result = paginator.paginate(PageRequest(), SearchCriteria(salary="700"))
    assert names(result) == ["Carol Smith"]

def test_like_wildcards_match_literally(paginator, three_employees):
    assert paginator.paginate(PageRequest(), SearchCriteria(full_name="%")).total_items == 0
    assert paginator.paginate(PageRequest(), SearchCriteria(full_name="_")).total_items == 0

def test_page_beyond_the_end_is_empty(paginator, three_employees):
    result = paginator.paginate(PageRequest(page=5, page_size=2))
    assert result.data == []
    assert result.total_pages == 2
    assert result.has_next is False
    assert result.has_previous is True

def test_result_map_keeps_metadata(paginator, three_employees):
    result = paginator.paginate(PageRequest(page=1, page_size=2)).map(lambda e: e.full_name)
    assert result.data == ["Alice Smith", "Bob Jones"]
    assert result.total_items == 3
    assert result.has_next is True

def test_huge_page_returns_empty_page(paginator, three_employees):
    result = paginator.paginate(PageRequest(page=10**18, page_size=10))
    assert result.data == []
    assert result.total_items == 3
    assert result.total_pages == 1
    assert result.has_next is False
    assert result.has_previous is True

def test_salary_prefix_uses_two_decimals(paginator, make_employee):
    make_employee("Half", salary="50000.50")
    make_employee("Round", salary="50000")

    assert names(paginator.paginate(PageRequest(), SearchCriteria(salary="50000.50"))) == ["Half"]
    assert names(paginator.paginate(PageRequest(), SearchCriteria(salary="50000.00"))) == ["Round"]
    assert names(paginator.paginate(PageRequest(), SearchCriteria(salary="50000."))) == ["Half", "Round"]

def test_cyrillic_search_is_case_insensitive(paginator, db_session, company):
    department = Department(company_id=company.id, name="Отдел кадров")
    db_session.add(department)
    db_session.commit()
    db_session.add(Employee(
        department_id=department.id,
        full_name="Иван Петров",
        birth_date=date(1985, 3, 15),
        hire_date=date(2020, 1, 15),
        salary=Decimal("50000"),
    ))
    db_session.commit()

    assert names(paginator.paginate(PageRequest(), SearchCriteria(department="отдел"))) == ["Иван Петров"]
    assert names(paginator.paginate(PageRequest(), SearchCriteria(full_name="ИВАН"))) == ["Иван Петров"]
