from enum import Enum

# ==================== ENUMS ====================

class UserRole(str, Enum):
    USER = "user"
    TUTOR = "tutor"
    ADMIN = "admin"

class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class SessionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class PaidStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    FREE = "free"


# Role the applicant ends up with once an application is decided
ROLE_FOR_DECISION = {
    ApplicationStatus.APPROVED: UserRole.TUTOR,
    ApplicationStatus.REJECTED: UserRole.USER,
}
