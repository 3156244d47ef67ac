from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from personnel_directory.core.clock import get_today
from personnel_directory.db.session import get_db
from personnel_directory.schemas.birthday import BirthdaySendOut, BirthdayTodayOut
from personnel_directory.services.birthday import (
    BirthdayNotifier,
    get_notifier,
    run_birthday_job,
    to_candidate,
    todays_birthdays,
)

router = APIRouter(prefix="/birthday", tags=["birthday"])


@router.get("/today", response_model=BirthdayTodayOut)
def birthdays_today(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Master staff whose date of birth falls on today's day and month."""
    staff = todays_birthdays(db, today)
    return BirthdayTodayOut(count=len(staff), employees=[to_candidate(s) for s in staff])


@router.post("/send", response_model=BirthdaySendOut)
def send_birthday_messages(
    db: Session = Depends(get_db),
    notifier: BirthdayNotifier = Depends(get_notifier),
    today: date = Depends(get_today),
):
    """
    Send today's greetings now. Same job as the daily trigger; calling it
    after the scheduled run sends the messages a second time.
    """
    summary = run_birthday_job(db, notifier, today)
    return BirthdaySendOut(**summary.model_dump())
