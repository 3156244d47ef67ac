"""
WhatsApp birthday greetings.

Today's birthdays come from the master staff table (day and month of the
normalized date of birth). Messages go out one at a time with a fixed pause
between them; failures are recorded per person and never retried.
"""
import logging
import time
from datetime import date
from typing import Callable, Iterator

import httpx
from sqlalchemy import select
from sqlalchemy.orm import Session

from personnel_directory.core.audit import log_event
from personnel_directory.core.config import settings
from personnel_directory.models.master_staff import MasterStaff
from personnel_directory.schemas.birthday import BirthdayCandidate, BirthdayResult, BirthdaySummary
from personnel_directory.services.master_sync import normalize_pending
from personnel_directory.services.query_builder import born_on

logger = logging.getLogger(__name__)

SKIPPED_NO_MOBILE = "no_mobile"

MESSAGE_TEMPLATE = (
    "Dear {name},\n"
    "On behalf of the Commissioner & Director of Municipal Administration (CDMA), "
    "we wish you a very Happy Birthday! \U0001F382\n"
    "May this year bring you continued health, happiness, and success in your professional journey. "
    "We appreciate your dedicated efforts and commitment toward the growth and excellence of the Department.\n"
    "Warm Regards,\n"
    "Director,\n"
    "CDMA, MA&UD Department."
)


def todays_birthdays(db: Session, today: date) -> list[MasterStaff]:
    """Master records born on today's day and month, any year."""
    normalize_pending(db)
    return list(
        db.execute(
            select(MasterStaff)
            .where(born_on(MasterStaff.dob_date, today))
            .order_by(MasterStaff.name, MasterStaff.employeeid)
        )
        .scalars()
        .all()
    )


def to_candidate(staff: MasterStaff) -> BirthdayCandidate:
    return BirthdayCandidate(
        employeeid=staff.employeeid,
        cfms_id=staff.cfms_id,
        name=staff.name,
        surname=staff.surname,
        mobileno=staff.mobileno,
        designation=staff.designation,
        dob=staff.dob,
    )


def greeting_for(name: str) -> str:
    return MESSAGE_TEMPLATE.format(name=name)


class BirthdayNotifier:
    def __init__(
        self,
        client: httpx.Client,
        *,
        url: str = settings.WHATSAPP_API_URL,
        department: str = settings.WHATSAPP_DEPARTMENT,
        timeout: float = settings.WHATSAPP_TIMEOUT_SECONDS,
        delay: float = settings.BIRTHDAY_MESSAGE_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.url = url
        self.department = department
        self.timeout = timeout
        self.delay = delay
        self._sleep = sleep

    def send_one(self, candidate: BirthdayCandidate) -> BirthdayResult:
        full_name = " ".join(p for p in (candidate.name, candidate.surname) if p).strip()
        mobile = (candidate.mobileno or "").strip()

        if not mobile:
            logger.warning("Skipping %s (%s): no mobile number", full_name, candidate.employeeid)
            return BirthdayResult(
                success=False,
                reason=SKIPPED_NO_MOBILE,
                employeeid=candidate.employeeid,
                name=full_name,
            )

        payload = {
            "content": greeting_for(full_name),
            "department": self.department,
            "reciever": mobile,  # gateway's spelling
        }
        try:
            response = self.client.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text or str(e)
            logger.error("Birthday message to %s (%s) rejected: %s", full_name, mobile, detail)
            return BirthdayResult(
                success=False,
                reason=detail,
                employeeid=candidate.employeeid,
                name=full_name,
                mobile=mobile,
                status_code=e.response.status_code,
            )
        except httpx.HTTPError as e:
            logger.error("Birthday message to %s (%s) failed: %s", full_name, mobile, e)
            return BirthdayResult(
                success=False,
                reason=str(e) or type(e).__name__,
                employeeid=candidate.employeeid,
                name=full_name,
                mobile=mobile,
            )

        logger.info("Birthday message sent to %s (%s), status %s", full_name, mobile, response.status_code)
        return BirthdayResult(
            success=True,
            employeeid=candidate.employeeid,
            name=full_name,
            mobile=mobile,
            status_code=response.status_code,
        )

    def run(self, candidates: list[BirthdayCandidate]) -> BirthdaySummary:
        results: list[BirthdayResult] = []
        for i, candidate in enumerate(candidates):
            if i > 0 and self.delay > 0:
                self._sleep(self.delay)
            results.append(self.send_one(candidate))

        summary = BirthdaySummary(
            sent=sum(1 for r in results if r.success),
            skipped=sum(1 for r in results if not r.success and r.reason == SKIPPED_NO_MOBILE),
            failed=sum(1 for r in results if not r.success and r.reason != SKIPPED_NO_MOBILE),
            results=results,
        )
        logger.info(
            "Birthday job complete: sent=%s failed=%s skipped=%s",
            summary.sent,
            summary.failed,
            summary.skipped,
        )
        return summary


def get_notifier() -> Iterator[BirthdayNotifier]:
    """FastAPI dependency: a notifier with its own HTTP client for one request."""
    with httpx.Client() as client:
        yield BirthdayNotifier(client)


def run_birthday_job(
    db: Session,
    notifier: BirthdayNotifier,
    today: date,
    *,
    actor: str = "api",
) -> BirthdaySummary:
    """
    Greet everyone born today. Both the manual endpoint and the daily trigger
    call this; runs are audited but not deduplicated.
    """
    logger.info("Starting birthday message job for %s (actor=%s)", today.isoformat(), actor)
    candidates = [to_candidate(s) for s in todays_birthdays(db, today)]
    logger.info("Found %s employee(s) with birthdays today", len(candidates))

    summary = notifier.run(candidates)

    log_event(
        db=db,
        actor=actor,
        action="BIRTHDAY_JOB_RUN",
        entity_type="birthday_job",
        entity_id=today.isoformat(),
        metadata={"sent": summary.sent, "failed": summary.failed, "skipped": summary.skipped},
    )
    return summary
