# fpams/models/__init__.py
from fpams.models.department import Department  # noqa
from fpams.models.user import User  # noqa
from fpams.models.subject import Subject  # noqa
from fpams.models.activity import Activity  # noqa
from fpams.models.teaching_score import TeachingScore  # noqa
from fpams.models.audit_log import AuditLog  # noqa
from fpams.models.feedback import Feedback  # noqa
from fpams.models.notification import Notification  # noqa
