from dutydesk.core.config import settings
from dutydesk.core.rbac import Role
from dutydesk.repositories.document_store import DocumentRepository
from dutydesk.services.activity_service import ActivityService
from dutydesk.services.application_service import ApplicationService
from dutydesk.services.audit_service import EventLogger
from dutydesk.services.auth_service import AuthService
from dutydesk.services.duty_service import DutyService
from dutydesk.services.submission_service import SubmissionService
from dutydesk.services.ticket_service import TicketService


repository = DocumentRepository(settings.document_path)
event_logger = EventLogger(settings.event_log_path)

application_service = ApplicationService(repository=repository, event_logger=event_logger)
ticket_service = TicketService(repository=repository, event_logger=event_logger)
duty_service = DutyService(repository=repository, event_logger=event_logger)
activity_service = ActivityService(
    duty_service=duty_service,
    leaderboard_size=settings.leaderboard_size,
)
submission_service = SubmissionService(repository=repository, event_logger=event_logger)

auth_service = AuthService(event_logger=event_logger)
auth_service.register(
    account_id=settings.admin_user_id,
    username=settings.admin_username,
    password=settings.admin_password,
    role=Role.ADMIN,
)
