"""Default permission catalog, role grants, and navigation pages."""

from .roles import Role

VIEW_MEMBERS = "view_members"
CREATE_MEMBER = "create_member"
EDIT_MEMBER = "edit_member"
DELETE_MEMBER = "delete_member"
SEND_BULK_EMAIL = "send_bulk_email"
SEND_BULK_SMS = "send_bulk_sms"
VIEW_DUES = "view_dues"
MANAGE_DUES = "manage_dues"
EDIT_FINANCIAL_TRANSACTION = "edit_financial_transaction"
VIEW_FINANCIAL_REPORTS = "view_financial_reports"
CREATE_ANNOUNCEMENT = "create_announcement"
EDIT_ANNOUNCEMENT = "edit_announcement"
DELETE_ANNOUNCEMENT = "delete_announcement"
MANAGE_EVENTS = "manage_events"
MANAGE_GALLERY = "manage_gallery"
MANAGE_PAGE_SETTINGS = "manage_page_settings"
MANAGE_ROLES = "manage_roles"

# (code, name, category, description)
DEFAULT_PERMISSIONS: list[tuple[str, str, str, str]] = [
    (VIEW_MEMBERS, "View member directory", "member_management", "List and open member records."),
    (CREATE_MEMBER, "Add members", "member_management", "Create new member records."),
    (EDIT_MEMBER, "Edit members", "member_management", "Change member contact details."),
    (DELETE_MEMBER, "Delete members", "member_management", "Remove member records."),
    (SEND_BULK_EMAIL, "Send bulk email", "member_management", "Email many members at once."),
    (SEND_BULK_SMS, "Send bulk SMS", "member_management", "Text many members at once."),
    (VIEW_DUES, "View dues", "financial_management", "See dues and payment status."),
    (MANAGE_DUES, "Manage dues", "financial_management", "Create dues and record payments."),
    (
        EDIT_FINANCIAL_TRANSACTION,
        "Edit financial transactions",
        "financial_management",
        "Change treasury entries.",
    ),
    (VIEW_FINANCIAL_REPORTS, "View financial reports", "financial_management", "Open treasury reports."),
    (CREATE_ANNOUNCEMENT, "Publish announcements", "content_management", "Create announcements."),
    (EDIT_ANNOUNCEMENT, "Edit announcements", "content_management", "Change published announcements."),
    (DELETE_ANNOUNCEMENT, "Delete announcements", "content_management", "Remove announcements."),
    (MANAGE_EVENTS, "Manage events", "content_management", "Create and edit events."),
    (MANAGE_GALLERY, "Manage gallery", "content_management", "Upload and arrange gallery items."),
    (MANAGE_PAGE_SETTINGS, "Manage page settings", "settings_management", "Change navigation visibility."),
    (
        MANAGE_ROLES,
        "Manage roles",
        "user_management",
        "Informational only: role and matrix edits always require root.",
    ),
]

_ADMIN_GRANTS = {
    VIEW_MEMBERS,
    CREATE_MEMBER,
    EDIT_MEMBER,
    DELETE_MEMBER,
    SEND_BULK_EMAIL,
    SEND_BULK_SMS,
    VIEW_DUES,
    MANAGE_DUES,
    EDIT_FINANCIAL_TRANSACTION,
    VIEW_FINANCIAL_REPORTS,
    CREATE_ANNOUNCEMENT,
    EDIT_ANNOUNCEMENT,
    DELETE_ANNOUNCEMENT,
    MANAGE_EVENTS,
    MANAGE_GALLERY,
    MANAGE_PAGE_SETTINGS,
}

# Only enabled grants are seeded; every other (role, code) pair has no row.
DEFAULT_ROLE_GRANTS: dict[str, set[str]] = {
    Role.ROOT.value: {code for code, *_ in DEFAULT_PERMISSIONS},
    Role.ADMIN.value: _ADMIN_GRANTS,
    Role.MEMBER.value: {VIEW_DUES},
}

# (page_key, page_name, visible_to_admin, visible_to_members, display_order)
DEFAULT_PAGES: list[tuple[str, str, bool, bool, int]] = [
    ("home", "Home", True, True, 1),
    ("members", "Members", True, True, 2),
    ("announcements", "Announcements", True, True, 3),
    ("events", "Events", True, True, 4),
    ("dues", "Dues", True, True, 5),
    ("gallery", "Gallery", True, True, 6),
    ("contact", "Contact", True, True, 7),
    ("bulk", "Bulk Operations", True, False, 8),
    ("admin", "Administration", True, False, 9),
    ("settings", "Page Settings", True, False, 10),
]
