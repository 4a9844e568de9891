"""Матрица прав администраторов."""
from enum import Enum
from typing import Dict, Iterable

from pydantic import BaseModel, ConfigDict

from codix.utils.enums import AdminRole


class Permission(str, Enum):
    MANAGE_SERVICES = "manageServices"
    MANAGE_PORTFOLIO = "managePortfolio"
    MANAGE_CLIENTS = "manageClients"
    MANAGE_PROJECTS = "manageProjects"
    MANAGE_TEAM = "manageTeam"
    MANAGE_TESTIMONIALS = "manageTestimonials"
    MANAGE_BLOG = "manageBlog"
    MANAGE_LEADS = "manageLeads"
    MANAGE_CONTACTS = "manageContacts"
    SEND_BULK_EMAILS = "sendBulkEmails"
    MANAGE_INVOICES = "manageInvoices"
    MANAGE_PAYMENTS = "managePayments"
    MANAGE_PLANS = "managePlans"
    MANAGE_PRICING = "managePricing"
    MANAGE_ADMINS = "manageAdmins"
    ASSIGN_ROLES = "assignRoles"
    MANAGE_SETTINGS = "manageSettings"
    MANAGE_SEO = "manageSEO"
    MANAGE_INTEGRATIONS = "manageIntegrations"
    VIEW_ACTIVITY_LOGS = "viewActivityLogs"
    MANAGE_BACKUPS = "manageBackups"
    MANAGE_API_KEYS = "manageAPIKeys"
    MANAGE_SUBSCRIPTIONS = "manageSubscriptions"


class PermissionSet(BaseModel):
    """Набор флагов. Неизвестные имена отклоняются."""

    model_config = ConfigDict(extra="forbid")

    manageServices: bool = False
    managePortfolio: bool = False
    manageClients: bool = False
    manageProjects: bool = False
    manageTeam: bool = False
    manageTestimonials: bool = False
    manageBlog: bool = False
    manageLeads: bool = False
    manageContacts: bool = False
    sendBulkEmails: bool = False
    manageInvoices: bool = False
    managePayments: bool = False
    managePlans: bool = False
    managePricing: bool = False
    manageAdmins: bool = False
    assignRoles: bool = False
    manageSettings: bool = False
    manageSEO: bool = False
    manageIntegrations: bool = False
    viewActivityLogs: bool = False
    manageBackups: bool = False
    manageAPIKeys: bool = False
    manageSubscriptions: bool = False


def _flags(granted: Iterable[Permission]) -> Dict[str, bool]:
    return PermissionSet(**{p.value: True for p in granted}).model_dump()


ROLE_DEFAULT_PERMISSIONS: Dict[str, Dict[str, bool]] = {
    AdminRole.SUPERADMIN.value: _flags(Permission),
    AdminRole.ADMIN.value: _flags([
        Permission.MANAGE_SERVICES,
        Permission.MANAGE_PORTFOLIO,
        Permission.MANAGE_CLIENTS,
        Permission.MANAGE_PROJECTS,
        Permission.MANAGE_TEAM,
        Permission.MANAGE_TESTIMONIALS,
        Permission.MANAGE_BLOG,
        Permission.MANAGE_LEADS,
        Permission.MANAGE_CONTACTS,
        Permission.SEND_BULK_EMAILS,
        Permission.MANAGE_INVOICES,
        Permission.MANAGE_PAYMENTS,
        Permission.MANAGE_PLANS,
        Permission.MANAGE_PRICING,
        Permission.VIEW_ACTIVITY_LOGS,
    ]),
    AdminRole.MODERATOR.value: _flags([
        Permission.MANAGE_BLOG,
        Permission.MANAGE_TESTIMONIALS,
        Permission.MANAGE_LEADS,
        Permission.MANAGE_CONTACTS,
    ]),
    AdminRole.CLIENT.value: _flags([]),
}


def default_permissions(role: str) -> Dict[str, bool]:
    """Права по умолчанию для роли (копия)."""
    return dict(ROLE_DEFAULT_PERMISSIONS.get(role, ROLE_DEFAULT_PERMISSIONS[AdminRole.CLIENT.value]))


def has_permission(admin, permission) -> bool:
    """
    Проверить право администратора.

    Суперадмин проходит всегда, остальные по сохранённому флагу
    (отсутствующий флаг означает False).

    Raises:
        ValueError: Неизвестное имя права
    """
    permission = Permission(permission)
    if admin.role == AdminRole.SUPERADMIN.value:
        return True
    flags = admin.permissions or {}
    return bool(flags.get(permission.value, False))
