from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class CurrencyCode(str, Enum):
    AED = "AED"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    SAR = "SAR"


@dataclass
class Nurse:
    id: str
    name: str
    default_salary: float = 0.0
    default_transportation: float = 0.0
    created_at: Optional[datetime] = None


@dataclass
class StaffMember:
    id: str
    name: str
    designation: str
    monthly_salary: float
    created_at: Optional[datetime] = None


@dataclass
class ClientCompany:
    id: str
    name: str
    trn: Optional[str] = None  # tax registration number
    created_at: Optional[datetime] = None


@dataclass
class CompanySettings:
    company_name: str = "Safe Heaven Health"
    company_trn: str = ""
    currency: CurrencyCode = CurrencyCode.AED
    vat_rate: float = 5.0  # percent
    bank_name: str = ""
    bank_account_number: str = ""
    iban: str = ""
    bank_company_trn: str = ""
    contact_note: str = "For queries, please contact finance@safeheavenhealth.com"


@dataclass(frozen=True)
class PayrollRecord:
    id: str
    nurse_id: str
    client_id: str
    contract_amount: float
    salary: float
    transportation: float
    overtime_days: float
    fines: float
    start_date: date
    end_date: date
    full_month: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MonthBounds:
    start: date
    end: date


@dataclass(frozen=True)
class RangeClamp:
    range_start: date
    range_end: date
    days_worked: int


@dataclass(frozen=True)
class CalculatedPayrollRecord:
    record: PayrollRecord
    month: str
    days_worked: int
    total_working_days: int
    proration: float
    billed_amount: float
    base_salary_amount: float
    transportation_amount: float
    overtime_amount: float
    payable_amount: float
    profit: float

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def nurse_id(self) -> str:
        return self.record.nurse_id

    @property
    def client_id(self) -> str:
        return self.record.client_id

    @property
    def contract_amount(self) -> float:
        return self.record.contract_amount

    @property
    def salary(self) -> float:
        return self.record.salary

    @property
    def transportation(self) -> float:
        return self.record.transportation

    @property
    def overtime_days(self) -> float:
        return self.record.overtime_days

    @property
    def fines(self) -> float:
        return self.record.fines

    @property
    def start_date(self) -> date:
        return self.record.start_date

    @property
    def end_date(self) -> date:
        return self.record.end_date

    @property
    def full_month(self) -> bool:
        return self.record.full_month

    @property
    def created_at(self) -> Optional[datetime]:
        return self.record.created_at


@dataclass(frozen=True)
class MonthlyFinancials:
    month: str
    billed_income: float
    nurse_expenses: float
    gross_profit: float
    staff_cost: float
    net_profit: float
    profit_margin: float
    calculated: List[CalculatedPayrollRecord] = field(default_factory=list)


@dataclass
class ClientBreakdownEntry:
    client: ClientCompany
    income: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0
    margin: float = 0.0
