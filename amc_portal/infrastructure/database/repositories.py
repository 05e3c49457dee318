"""Data access layer for AMC entities"""

import uuid
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
from amc_portal.infrastructure.database.models import Admin, Client, ClientAdmin, HourRequest, Payment, WorkLog
from amc_portal.domain import models as domain
from amc_portal.domain.workflow import parse_work_status

ROLE_PRIMARY = "Primary"
ROLE_SECONDARY = "Secondary"
ROLE_ASSIGNED = "Assigned"


def client_to_domain(row: Client) -> domain.Client:
    """Map a client row to the engine's input snapshot"""
    return domain.Client(
        id=row.id,
        cost_for_year=row.cost_for_year or 0.0,
        hours_assigned_year=row.hours_assigned_year,
        payment_term=row.payment_term,
        amc_start_date=row.amc_start_date,
        amc_end_date=row.amc_end_date,
        project_name=row.project_name,
        client_name=row.client_name,
    )


def work_log_to_domain(row: WorkLog) -> domain.WorkLogEntry:
    return domain.WorkLogEntry(
        client_id=row.client_id,
        hours_consumed=row.hours_consumed or 0.0,
        date=row.date,
        work_description=row.work_description,
        start_date=row.start_date,
        end_date=row.end_date,
        status=parse_work_status(row.status),
    )


def payment_to_domain(row: Payment) -> domain.PaymentRecord:
    return domain.PaymentRecord(
        client_id=row.client_id,
        amount_paid=row.amount_paid or 0.0,
        payment_date=row.payment_date,
    )


class AdminRepository:
    """Repository for staff members"""

    def __init__(self, db: Session):
        self.db = db

    def create_admin(self, name: str, email: str, contact_number: Optional[str] = None) -> Admin:
        db_admin = Admin(name=name, email=email, contact_number=contact_number)
        self.db.add(db_admin)
        self.db.flush()
        return db_admin

    def get_admin(self, admin_id: uuid.UUID) -> Optional[Admin]:
        return self.db.get(Admin, admin_id)

    def list_admins(self) -> List[Admin]:
        return self.db.query(Admin).order_by(Admin.name).all()

    def update_admin(self, db_admin: Admin, **fields) -> Admin:
        for name, value in fields.items():
            setattr(db_admin, name, value)
        self.db.flush()
        return db_admin

    def delete_admin(self, db_admin: Admin) -> None:
        """Remove an admin; clients it fronted keep no point of contact in its place"""
        for column in (Client.ting_poc_primary, Client.ting_poc_secondary):
            self.db.query(Client).filter(column == db_admin.id).update(
                {column: None}, synchronize_session="fetch"
            )
        self.db.delete(db_admin)
        self.db.flush()

    def clients_with_roles(self, db_admin: Admin) -> List[Tuple[Client, str]]:
        """
        Clients an admin looks after, one entry per client.

        Role precedence is Primary, then Secondary, then Assigned (a plain
        client_admins row). Ordered by project name.
        """
        roles: Dict[uuid.UUID, Tuple[Client, str]] = {}
        for db_client in db_admin.primary_clients:
            roles[db_client.id] = (db_client, ROLE_PRIMARY)
        for db_client in db_admin.secondary_clients:
            roles.setdefault(db_client.id, (db_client, ROLE_SECONDARY))
        for assignment in db_admin.assignments:
            roles.setdefault(assignment.client_id, (assignment.client, ROLE_ASSIGNED))
        return sorted(roles.values(), key=lambda pair: (pair[0].project_name or "", pair[0].project_slug))


class ClientRepository:
    """Repository for clients and their staff assignments"""

    def __init__(self, db: Session):
        self.db = db

    def create_client(self, admin_ids: Iterable[uuid.UUID] = (), **fields) -> Client:
        """Persist a client and assign the given admins to it"""
        db_client = Client(**fields)
        self.db.add(db_client)
        self.db.flush()  # Get ID without committing

        for admin_id in admin_ids:
            self.db.add(ClientAdmin(client_id=db_client.id, admin_id=admin_id))

        return db_client

    def get_client(self, client_id: uuid.UUID) -> Optional[Client]:
        return self.db.get(Client, client_id)

    def list_clients(self) -> List[Client]:
        return self.db.query(Client).order_by(Client.created_at.desc()).all()

    def update_client(
        self, db_client: Client, admin_ids: Optional[Iterable[uuid.UUID]] = None, **fields
    ) -> Client:
        """
        Apply changed fields to a client.

        When admin_ids is given it replaces the assignment set: rows for
        admins still listed are kept, the rest are removed.
        """
        for name, value in fields.items():
            setattr(db_client, name, value)

        if admin_ids is not None:
            wanted = set(admin_ids)
            db_client.assignments = [a for a in db_client.assignments if a.admin_id in wanted]
            kept = {a.admin_id for a in db_client.assignments}
            for admin_id in wanted - kept:
                db_client.assignments.append(ClientAdmin(admin_id=admin_id))

        self.db.flush()
        return db_client

    def delete_client(self, db_client: Client) -> None:
        """Remove a client with its work logs, payments, hour requests and assignments"""
        self.db.delete(db_client)
        self.db.flush()


class WorkLogRepository:
    """Repository for work logs"""

    def __init__(self, db: Session):
        self.db = db

    def create_work_log(
        self,
        client_id: uuid.UUID,
        log_date: date,
        work_description: str,
        hours_consumed: float,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: domain.WorkStatus = domain.WorkStatus.PENDING,
    ) -> WorkLog:
        db_log = WorkLog(
            client_id=client_id,
            date=log_date,
            work_description=work_description,
            hours_consumed=hours_consumed,
            start_date=start_date,
            end_date=end_date,
            status=domain.WorkStatus(status).value,
        )
        self.db.add(db_log)
        self.db.flush()
        return db_log

    def get_work_log(self, work_log_id: uuid.UUID) -> Optional[WorkLog]:
        return self.db.get(WorkLog, work_log_id)

    def list_for_client(self, client_id: uuid.UUID) -> List[WorkLog]:
        """Work logs for a client, most recent first"""
        return (
            self.db.query(WorkLog)
            .filter(WorkLog.client_id == client_id)
            .order_by(WorkLog.date.desc(), WorkLog.created_at.desc())
            .all()
        )

    def list_work_logs(
        self,
        status: Optional[domain.WorkStatus] = None,
        client_id: Optional[uuid.UUID] = None,
    ) -> List[WorkLog]:
        """Work logs across clients, most recent first, optionally filtered"""
        query = self.db.query(WorkLog)
        if status is not None:
            query = query.filter(WorkLog.status == domain.WorkStatus(status).value)
        if client_id is not None:
            query = query.filter(WorkLog.client_id == client_id)
        return query.order_by(WorkLog.date.desc(), WorkLog.created_at.desc()).all()

    def update_work_log(self, db_log: WorkLog, **fields) -> WorkLog:
        for name, value in fields.items():
            setattr(db_log, name, value)
        self.db.flush()
        return db_log

    def delete_work_log(self, db_log: WorkLog) -> None:
        self.db.delete(db_log)
        self.db.flush()

    def entries_for_client(self, client_id: uuid.UUID) -> List[domain.WorkLogEntry]:
        return [work_log_to_domain(row) for row in self.list_for_client(client_id)]

    def entries_by_client(self) -> Dict[uuid.UUID, List[domain.WorkLogEntry]]:
        """All work logs grouped by client, in a single query"""
        grouped: Dict[uuid.UUID, List[domain.WorkLogEntry]] = defaultdict(list)
        for row in self.db.query(WorkLog).all():
            grouped[row.client_id].append(work_log_to_domain(row))
        return grouped

    def set_status(self, db_log: WorkLog, status: domain.WorkStatus) -> WorkLog:
        db_log.status = domain.WorkStatus(status).value
        self.db.flush()
        return db_log


class PaymentRepository:
    """Repository for client payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, client_id: uuid.UUID, amount_paid: float, payment_date: date) -> Payment:
        db_payment = Payment(client_id=client_id, amount_paid=amount_paid, payment_date=payment_date)
        self.db.add(db_payment)
        self.db.flush()
        return db_payment

    def list_for_client(self, client_id: uuid.UUID) -> List[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.client_id == client_id)
            .order_by(Payment.payment_date.desc())
            .all()
        )

    def records_for_client(self, client_id: uuid.UUID) -> List[domain.PaymentRecord]:
        return [payment_to_domain(row) for row in self.list_for_client(client_id)]

    def records_by_client(self) -> Dict[uuid.UUID, List[domain.PaymentRecord]]:
        """All payments grouped by client, in a single query"""
        grouped: Dict[uuid.UUID, List[domain.PaymentRecord]] = defaultdict(list)
        for row in self.db.query(Payment).all():
            grouped[row.client_id].append(payment_to_domain(row))
        return grouped


class HourRequestRepository:
    """Repository for hour top-up requests"""

    def __init__(self, db: Session):
        self.db = db

    def create_request(self, client_id: uuid.UUID, requested_hours: float) -> HourRequest:
        db_request = HourRequest(
            client_id=client_id,
            requested_hours=requested_hours,
            status=domain.RequestStatus.PENDING.value,
        )
        self.db.add(db_request)
        self.db.flush()
        return db_request

    def get_request(self, request_id: uuid.UUID) -> Optional[HourRequest]:
        return self.db.get(HourRequest, request_id)

    def list_requests(self, status: Optional[domain.RequestStatus] = None) -> List[HourRequest]:
        """Requests newest first, optionally filtered by status"""
        query = self.db.query(HourRequest)
        if status is not None:
            query = query.filter(HourRequest.status == domain.RequestStatus(status).value)
        return query.order_by(HourRequest.created_at.desc()).all()

    def set_status(self, db_request: HourRequest, status: domain.RequestStatus) -> HourRequest:
        db_request.status = domain.RequestStatus(status).value
        self.db.flush()
        return db_request
