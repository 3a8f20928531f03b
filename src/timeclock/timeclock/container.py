from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from .common.datetime_utils import get_zone, parse_clock_time
from .core.constants import (
    DEFAULT_AUTO_CLOCK_OUT_TIME,
    DEFAULT_EMPLOYEE_TAGS,
    DEFAULT_SESSION_TTL_MINUTES,
    DEFAULT_TIMEZONE,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_user_repository import MySQLUserRepository
from .employees.repository import UserRepository
from .employees.service import AuthService, EmployeeService
from .jobs.auto_clock_out import AutoClockOutJob
from .notifications.notifier import DiscordNotifier, Notifier
from .payroll.service import PayrollReportService
from .records.mysql_record_repository import MySQLEventLogStore
from .records.repository import EventLogStore
from .records.service import RecordService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .status.service import StatusService


@dataclass(frozen=True)
class AppOptions:
    """Runtime knobs read from the settings module."""

    timezone: str = DEFAULT_TIMEZONE
    discord_webhook_url: Optional[str] = None
    discord_timeout_seconds: float = 5.0
    session_ttl_minutes: int = DEFAULT_SESSION_TTL_MINUTES
    enforce_transitions: bool = True
    employee_tags: Sequence[str] = field(default=DEFAULT_EMPLOYEE_TAGS)
    auto_clock_out_time: str = DEFAULT_AUTO_CLOCK_OUT_TIME

    @classmethod
    def from_settings(cls, settings) -> "AppOptions":
        return cls(
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            discord_webhook_url=getattr(settings, "DISCORD_WEBHOOK_URL", None),
            discord_timeout_seconds=float(getattr(settings, "DISCORD_TIMEOUT_SECONDS", 5)),
            session_ttl_minutes=int(getattr(settings, "SESSION_TTL_MINUTES", DEFAULT_SESSION_TTL_MINUTES)),
            enforce_transitions=bool(getattr(settings, "ENFORCE_TRANSITIONS", True)),
            employee_tags=tuple(getattr(settings, "EMPLOYEE_TAGS", DEFAULT_EMPLOYEE_TAGS)),
            auto_clock_out_time=getattr(settings, "AUTO_CLOCK_OUT_TIME", DEFAULT_AUTO_CLOCK_OUT_TIME),
        )


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    tz: ZoneInfo

    users_repo: UserRepository
    records_repo: EventLogStore
    sessions_repo: SessionRepository
    notifier: Notifier

    session_service: SessionService
    auth_service: AuthService
    employee_service: EmployeeService
    record_service: RecordService
    status_service: StatusService
    payroll_report_service: PayrollReportService
    auto_clock_out_job: AutoClockOutJob


def build_services(
    *,
    users_repo: UserRepository,
    records_repo: EventLogStore,
    sessions_repo: SessionRepository,
    options: AppOptions,
    notifier: Optional[Notifier] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    tz = get_zone(options.timezone)
    trigger: time = parse_clock_time(options.auto_clock_out_time)
    notifier = notifier or DiscordNotifier(
        options.discord_webhook_url, tz=tz, timeout=options.discord_timeout_seconds
    )

    session_service = SessionService(sessions_repo, ttl_minutes=options.session_ttl_minutes)
    auth_service = AuthService(users_repo, session_service)
    employee_service = EmployeeService(users_repo, allowed_tags=options.employee_tags)
    record_service = RecordService(
        records_repo,
        users_repo,
        notifier,
        tz=tz,
        enforce_transitions=options.enforce_transitions,
    )
    status_service = StatusService(records_repo, users_repo, tz=tz)
    payroll_report_service = PayrollReportService(records_repo, users_repo, tz=tz)
    auto_clock_out_job = AutoClockOutJob(record_service, tz=tz, trigger_time=trigger)

    return Container(
        conn=conn,
        tz=tz,
        users_repo=users_repo,
        records_repo=records_repo,
        sessions_repo=sessions_repo,
        notifier=notifier,
        session_service=session_service,
        auth_service=auth_service,
        employee_service=employee_service,
        record_service=record_service,
        status_service=status_service,
        payroll_report_service=payroll_report_service,
        auto_clock_out_job=auto_clock_out_job,
    )


def build_container(*, db_config: dict, options: Optional[AppOptions] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        records_repo=MySQLEventLogStore(conn),
        sessions_repo=MySQLSessionRepository(conn),
        options=options or AppOptions(),
        conn=conn,
    )
