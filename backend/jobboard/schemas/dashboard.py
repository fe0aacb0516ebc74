from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_jobs: int
    active_jobs: int
    total_applications: int
    new_applications: int
    total_views: int
    average_time_to_hire: int


class ActivityMetadata(BaseModel):
    job_title: str | None = None
    applicant_name: str | None = None
    job_id: str | None = None


class ActivityItem(BaseModel):
    id: str
    type: str  # application | job_posted | job_expired | interview_scheduled
    title: str
    description: str
    timestamp: str
    metadata: ActivityMetadata | None = None


class JobPerformance(BaseModel):
    job_id: str
    title: str
    views: int
    applications: int
    conversion_rate: float


class TrendPoint(BaseModel):
    date: str
    count: int


class DashboardResponse(BaseModel):
    stats: DashboardStats
    activity: list[ActivityItem]
    top_jobs: list[JobPerformance]
    trends: list[TrendPoint]
    degraded: bool = False
    degraded_sections: list[str] = []
