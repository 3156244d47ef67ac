from pydantic import BaseModel


class StatsSnapshot(BaseModel):
    """Summary cards for the directory; computed fresh on every request"""
    total: int = 0
    regular: int = 0
    incharge: int = 0
    suspended: int = 0
    birthdaysThisMonth: int = 0
    birthdaysNextMonth: int = 0
    retiringThisYear: int = 0
    # No leave data source exists yet; always zero
    onLeaveToday: int = 0
    leaveTomorrow: int = 0
    upcomingLeaves: int = 0
