"""Перечисления для статусов и ролей."""
from enum import Enum


class PrincipalType(str, Enum):
    """Тип аутентифицированного субъекта."""
    CLIENT = "client"
    ADMIN = "admin"


class ClientRole(str, Enum):
    CLIENT = "client"
    ADMIN = "admin"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"
    PENDING = "pending"


class AdminRole(str, Enum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    MODERATOR = "moderator"
    CLIENT = "client"


class BlogStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ServiceCategory(str, Enum):
    """Категории услуг и клиентских заявок."""
    E_COMMERCE = "e-commerce"
    RESTAURANT = "restaurant"
    HOTEL = "hotel"
    PORTFOLIO = "portfolio"
    CUSTOM = "custom"
    BUSINESS = "business"
    AGENCY = "agency"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    FINANCE = "finance"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"


class CatalogStatus(str, Enum):
    """Статус услуги или прайса."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class ServiceRequestStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under-review"
    APPROVED = "approved"
    DECLINED = "declined"
    COMPLETED = "completed"


EDITABLE_REQUEST_STATUSES = (ServiceRequestStatus.PENDING, ServiceRequestStatus.UNDER_REVIEW)


class ContactStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"
    CLOSED = "closed"


class CareerStatus(str, Enum):
    APPLIED = "Applied"
    UNDER_REVIEW = "Under Review"
    INTERVIEW = "Interview"
    HIRED = "Hired"
    REJECTED = "Rejected"


class CareerSource(str, Enum):
    WEBSITE = "Website"
    LINKEDIN = "LinkedIn"
    REFERRAL = "Referral"
    JOB_FAIR = "Job Fair"
    OTHER = "Other"


class ResourceKind(str, Enum):
    """Тип ресурса в объектном хранилище."""
    IMAGE = "image"
    VIDEO = "video"
    RAW = "raw"
