from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .analytics.service import AnalyticsService
from .database.connection import DBConfig, DatabaseConnection
from .expenses.mysql_summary_repository import MySQLDailySummaryRepository
from .expenses.service import ExpenseService
from .ocr.client import AzureReadClient
from .payroll.mysql_payroll_repository import MySQLConfirmedAdvanceRepository, MySQLSalaryPaymentRepository
from .payroll.service import PayrollService
from .proofs.mysql_proof_repository import MySQLProofRepository
from .proofs.service import ProofService
from .proofs.storage import LocalProofStorage
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.service import StaffService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    user_service: UserService
    staff_service: StaffService
    attendance_service: AttendanceService
    expense_service: ExpenseService
    payroll_service: PayrollService
    proof_service: ProofService
    analytics_service: AnalyticsService
    ocr_client: AzureReadClient


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    staff_repo = MySQLStaffRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    summaries_repo = MySQLDailySummaryRepository(conn)
    payments_repo = MySQLSalaryPaymentRepository(conn)
    confirmed_repo = MySQLConfirmedAdvanceRepository(conn)
    proofs_repo = MySQLProofRepository(conn)

    storage = LocalProofStorage(
        getattr(settings, "UPLOAD_FOLDER"),
        max_bytes=int(getattr(settings, "MAX_UPLOAD_BYTES", 5 * 1024 * 1024)),
    )

    return Container(
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        staff_service=StaffService(staff_repo),
        attendance_service=AttendanceService(attendance_repo, staff_repo),
        expense_service=ExpenseService(summaries_repo),
        payroll_service=PayrollService(
            staff=staff_repo,
            attendance=attendance_repo,
            summaries=summaries_repo,
            payments=payments_repo,
            confirmed=confirmed_repo,
        ),
        proof_service=ProofService(
            proofs_repo, storage, max_files=int(getattr(settings, "MAX_UPLOAD_FILES", 20))
        ),
        analytics_service=AnalyticsService(summaries_repo, payments_repo),
        ocr_client=AzureReadClient(
            endpoint=getattr(settings, "AZURE_ENDPOINT", ""),
            key=getattr(settings, "AZURE_KEY", ""),
            poll_attempts=int(getattr(settings, "OCR_POLL_ATTEMPTS", 10)),
            poll_interval=float(getattr(settings, "OCR_POLL_INTERVAL", 1.5)),
        ),
    )
