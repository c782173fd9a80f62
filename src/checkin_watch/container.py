from __future__ import annotations

from dataclasses import dataclass

from .checkins.mysql_checkin_repository import MySQLCheckInRepository
from .core.constants import LOOKBACK_DAYS, WINDOW_BUFFER_MINUTES
from .database.connection import DatabaseConnection, DBConfig
from .events.emitter import EventEmitter
from .events.mysql_event_repository import MySQLEventRepository
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayOracle
from .missed_checkins.detector import MissedCheckInDetector
from .missed_checkins.locking import InProcessRunLock, RunLock
from .missed_checkins.mysql_missed_checkin_repository import MySQLMissedCheckInRepository
from .missed_checkins.service import MissedCheckInService
from .missed_checkins.snapshot import SnapshotCalculator
from .notifications.batcher import NotificationBatcher
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .organization.mysql_organization_repository import MySQLOrganizationRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    organization_repo: MySQLOrganizationRepository
    checkins_repo: MySQLCheckInRepository
    holidays_repo: MySQLHolidayRepository
    missed_repo: MySQLMissedCheckInRepository
    notifications_repo: MySQLNotificationRepository
    events_repo: MySQLEventRepository

    holiday_oracle: HolidayOracle
    missed_checkin_service: MissedCheckInService
    detector: MissedCheckInDetector


def build_container(
    *,
    db_config: dict,
    window_buffer_minutes: int = WINDOW_BUFFER_MINUTES,
    lookback_days: int = LOOKBACK_DAYS,
    run_lock: RunLock | None = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    organization_repo = MySQLOrganizationRepository(conn)
    checkins_repo = MySQLCheckInRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    missed_repo = MySQLMissedCheckInRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    events_repo = MySQLEventRepository(conn)

    holiday_oracle = HolidayOracle(holidays_repo)
    missed_checkin_service = MissedCheckInService(missed_repo)
    detector = MissedCheckInDetector(
        organization_repo,
        checkins_repo,
        missed_repo,
        holiday_oracle,
        NotificationBatcher(notifications_repo),
        snapshots=SnapshotCalculator(lookback_days=lookback_days),
        run_lock=run_lock or InProcessRunLock(),
        events=EventEmitter(events_repo),
        window_buffer_minutes=window_buffer_minutes,
    )

    return Container(
        conn=conn,
        organization_repo=organization_repo,
        checkins_repo=checkins_repo,
        holidays_repo=holidays_repo,
        missed_repo=missed_repo,
        notifications_repo=notifications_repo,
        events_repo=events_repo,
        holiday_oracle=holiday_oracle,
        missed_checkin_service=missed_checkin_service,
        detector=detector,
    )
