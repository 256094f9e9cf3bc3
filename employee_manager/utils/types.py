from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Pagination bounds
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

# Sortable fields: normalized request key -> employee attribute path
SORT_FIELDS = {
    "departmentname": "department.name",
    "fullname": "full_name",
    "birthdate": "birth_date",
    "hiredate": "hire_date",
    "salary": "salary",
}

# Validation limits
MAX_FULL_NAME_LENGTH = 200
MAX_DEPARTMENT_NAME_LENGTH = 100
MAX_AGE_YEARS = 100
MAX_SALARY = Decimal("1000000")

# Decimal that travels over JSON as a number with two decimals
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v.quantize(Decimal("0.01"))), return_type=float, when_used="json"),
]
