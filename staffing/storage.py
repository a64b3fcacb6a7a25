from __future__ import annotations

import json
from dataclasses import asdict, fields, replace
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import structlog

from billing.aggregation import aggregate_month, breakdown_by_client
from billing.calculator import overlaps_month, validate_record
from billing.models import (
    ClientBreakdownEntry,
    ClientCompany,
    CompanySettings,
    CurrencyCode,
    MonthlyFinancials,
    Nurse,
    PayrollRecord,
    StaffMember,
)
from billing.months import month_bounds

logger = structlog.get_logger(__name__)

UNKNOWN_NURSE = "Unknown Nurse"
UNKNOWN_CLIENT = "Unknown Client"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class DataStore:
    """Single-user JSON datastore for rosters, payroll records and company settings."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.nurses: Dict[str, Nurse] = {}
        self.staff: Dict[str, StaffMember] = {}
        self.clients: Dict[str, ClientCompany] = {}
        self.payroll_records: Dict[str, PayrollRecord] = {}
        self.settings = CompanySettings()
        if path.exists():
            self.load()

    def load(self) -> None:
        try:
            content = json.loads(self.path.read_text(encoding="utf-8"))
            nurses = {n["id"]: self._deserialize_nurse(n) for n in content.get("nurses", [])}
            staff = {s["id"]: self._deserialize_staff(s) for s in content.get("staff", [])}
            clients = {c["id"]: self._deserialize_client(c) for c in content.get("clients", [])}
            records = {r["id"]: self._deserialize_record(r) for r in content.get("payroll_records", [])}
            settings = self._deserialize_settings(content.get("settings") or {})
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("store_payload_unreadable", path=str(self.path), error=str(exc))
            self.reset()
            return
        self.nurses, self.staff, self.clients = nurses, staff, clients
        self.payroll_records = records
        self.settings = settings

    def save(self) -> None:
        payload = {
            "nurses": [asdict(n) for n in self.nurses.values()],
            "staff": [asdict(s) for s in self.staff.values()],
            "clients": [asdict(c) for c in self.clients.values()],
            "payroll_records": [asdict(r) for r in self.payroll_records.values()],
            "settings": asdict(self.settings),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, default=self._serializer, indent=2), encoding="utf-8")
        logger.debug("store_saved", path=str(self.path), records=len(self.payroll_records))

    def reset(self) -> None:
        self.nurses = {}
        self.staff = {}
        self.clients = {}
        self.payroll_records = {}
        self.settings = CompanySettings()

    def upsert_nurse(
        self,
        name: str,
        default_salary: float,
        default_transportation: float,
        nurse_id: Optional[str] = None,
    ) -> Nurse:
        existing = self.nurses.get(nurse_id) if nurse_id else None
        nurse = Nurse(
            id=nurse_id or _new_id(),
            name=name.strip(),
            default_salary=float(default_salary),
            default_transportation=float(default_transportation),
            created_at=existing.created_at if existing else _now(),
        )
        self.nurses[nurse.id] = nurse
        return nurse

    def upsert_staff(
        self,
        name: str,
        designation: str,
        monthly_salary: float,
        staff_id: Optional[str] = None,
    ) -> StaffMember:
        existing = self.staff.get(staff_id) if staff_id else None
        member = StaffMember(
            id=staff_id or _new_id(),
            name=name.strip(),
            designation=designation.strip(),
            monthly_salary=float(monthly_salary),
            created_at=existing.created_at if existing else _now(),
        )
        self.staff[member.id] = member
        return member

    def upsert_client(self, name: str, trn: Optional[str] = None, client_id: Optional[str] = None) -> ClientCompany:
        existing = self.clients.get(client_id) if client_id else None
        client = ClientCompany(
            id=client_id or _new_id(),
            name=name.strip(),
            trn=(trn or "").strip() or None,
            created_at=existing.created_at if existing else _now(),
        )
        self.clients[client.id] = client
        return client

    def upsert_payroll(
        self,
        *,
        nurse_id: str,
        client_id: str,
        contract_amount: float,
        salary: float,
        transportation: float,
        overtime_days: float,
        fines: float,
        start_date: date,
        end_date: date,
        full_month: bool = False,
        record_id: Optional[str] = None,
    ) -> PayrollRecord:
        existing = self.payroll_records.get(record_id) if record_id else None
        record = validate_record(
            PayrollRecord(
                id=record_id or _new_id(),
                nurse_id=nurse_id,
                client_id=client_id,
                contract_amount=float(contract_amount),
                salary=float(salary),
                transportation=float(transportation),
                overtime_days=float(overtime_days),
                fines=float(fines),
                start_date=start_date,
                end_date=end_date,
                full_month=bool(full_month),
                created_at=existing.created_at if existing else _now(),
            )
        )
        self.payroll_records[record.id] = record
        return record

    def delete_nurse(self, nurse_id: str) -> None:
        del self.nurses[nurse_id]
        self.payroll_records = {k: r for k, r in self.payroll_records.items() if r.nurse_id != nurse_id}

    def delete_staff(self, staff_id: str) -> None:
        del self.staff[staff_id]

    def delete_client(self, client_id: str) -> None:
        del self.clients[client_id]
        self.payroll_records = {k: r for k, r in self.payroll_records.items() if r.client_id != client_id}

    def delete_payroll(self, record_id: str) -> None:
        del self.payroll_records[record_id]

    def update_settings(self, **changes: Any) -> CompanySettings:
        known = {f.name for f in fields(CompanySettings)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        if "currency" in changes:
            changes["currency"] = CurrencyCode(changes["currency"])
        if "vat_rate" in changes:
            changes["vat_rate"] = float(changes["vat_rate"])
        self.settings = replace(self.settings, **changes)
        return self.settings

    def list_nurses(self) -> List[Nurse]:
        return sorted(self.nurses.values(), key=lambda n: n.name.lower())

    def list_staff(self) -> List[StaffMember]:
        return sorted(self.staff.values(), key=lambda s: s.name.lower())

    def list_clients(self) -> List[ClientCompany]:
        return sorted(self.clients.values(), key=lambda c: c.name.lower())

    def list_payroll(self) -> List[PayrollRecord]:
        return list(self.payroll_records.values())

    def records_for_month(self, month: str, client_id: Optional[str] = None) -> List[PayrollRecord]:
        month_bounds(month)
        return [
            record
            for record in self.payroll_records.values()
            if overlaps_month(record, month) and (client_id is None or record.client_id == client_id)
        ]

    def nurse_name(self, nurse_id: str) -> str:
        nurse = self.nurses.get(nurse_id)
        return nurse.name if nurse else UNKNOWN_NURSE

    def client_name(self, client_id: str) -> str:
        client = self.clients.get(client_id)
        return client.name if client else UNKNOWN_CLIENT

    def monthly_financials(self, month: str) -> MonthlyFinancials:
        return aggregate_month(self.records_for_month(month), self.staff.values(), month)

    def client_breakdown(self, month: str) -> List[ClientBreakdownEntry]:
        return breakdown_by_client(self.monthly_financials(month).calculated, self.clients.values())

    @staticmethod
    def _serializer(value):
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        raise TypeError(f"Type {type(value)} not serializable")

    @staticmethod
    def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    def _deserialize_nurse(self, data: dict) -> Nurse:
        data["created_at"] = self._parse_timestamp(data.get("created_at"))
        return Nurse(**data)

    def _deserialize_staff(self, data: dict) -> StaffMember:
        data["created_at"] = self._parse_timestamp(data.get("created_at"))
        return StaffMember(**data)

    def _deserialize_client(self, data: dict) -> ClientCompany:
        data["created_at"] = self._parse_timestamp(data.get("created_at"))
        return ClientCompany(**data)

    def _deserialize_record(self, data: dict) -> PayrollRecord:
        data["start_date"] = date.fromisoformat(data["start_date"])
        data["end_date"] = date.fromisoformat(data["end_date"])
        data["created_at"] = self._parse_timestamp(data.get("created_at"))
        return PayrollRecord(**data)

    def _deserialize_settings(self, data: dict) -> CompanySettings:
        known = {f.name for f in fields(CompanySettings)}
        settings = CompanySettings(**{k: v for k, v in data.items() if k in known})
        return replace(settings, currency=CurrencyCode(settings.currency), vat_rate=float(settings.vat_rate))
