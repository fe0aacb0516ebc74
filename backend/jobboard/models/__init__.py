from jobboard.models.company import Company, CompanyLocation
from jobboard.models.category import Category
from jobboard.models.job import Job
from jobboard.models.application import Application
from jobboard.models.user import User, Follow

__all__ = ["Company", "CompanyLocation", "Category", "Job", "Application", "User", "Follow"]
