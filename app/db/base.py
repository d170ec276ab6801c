from app.db.base_class import Base  # noqa: F401

# import models so Base.metadata knows every table
from app.models import assignment, calculated_penalty, late_policy, submission, user  # noqa: F401
