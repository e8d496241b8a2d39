"""
Schemas Pydantic da aplicação.
"""

from library_portal.schemas.base import (
    BaseSchema,
    ErrorResponse,
    PaginatedResponse,
    SuccessResponse,
    TimestampSchema,
)
from library_portal.schemas.health import HealthResponse
from library_portal.schemas.auth import (
    LoginRequest,
    Principal,
    ProfileRead,
    ProfileWithToken,
    RolesUpdate,
    SignupRequest,
    TokenResponse,
)
from library_portal.schemas.book import (
    BookAvailability,
    BookCreate,
    BookDetail,
    BookRead,
    BookUpdate,
    CategoryCreate,
    CategoryRead,
)
from library_portal.schemas.membership import (
    MemberDetail,
    MembershipPeriod,
    PlanAssignment,
    PlanCreate,
    PlanRead,
    PlanUpdate,
)
from library_portal.schemas.borrow import (
    BorrowRecordDetail,
    IssueRequest,
    RenewResponse,
    ReturnResponse,
)
from library_portal.schemas.request import (
    DecisionRequest,
    DecisionResponse,
    ExtensionSubmit,
    RenewalSubmit,
    RequestDetail,
    SubmitResponse,
)
from library_portal.schemas.notification import (
    MarkReadResponse,
    NotificationInbox,
    NotificationRead,
    SweepResult,
)
from library_portal.schemas.system import DashboardStats

__all__ = [
    "BaseSchema",
    "ErrorResponse",
    "PaginatedResponse",
    "SuccessResponse",
    "TimestampSchema",
    "HealthResponse",
    "LoginRequest",
    "Principal",
    "ProfileRead",
    "ProfileWithToken",
    "RolesUpdate",
    "SignupRequest",
    "TokenResponse",
    "BookAvailability",
    "BookCreate",
    "BookDetail",
    "BookRead",
    "BookUpdate",
    "CategoryCreate",
    "CategoryRead",
    "MemberDetail",
    "MembershipPeriod",
    "PlanAssignment",
    "PlanCreate",
    "PlanRead",
    "PlanUpdate",
    "BorrowRecordDetail",
    "IssueRequest",
    "RenewResponse",
    "ReturnResponse",
    "DecisionRequest",
    "DecisionResponse",
    "ExtensionSubmit",
    "RenewalSubmit",
    "RequestDetail",
    "SubmitResponse",
    "MarkReadResponse",
    "NotificationInbox",
    "NotificationRead",
    "SweepResult",
    "DashboardStats",
]
