"""Seed the permission catalog, default role grants, page settings, and a root member."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from access_control.catalog import DEFAULT_PAGES, DEFAULT_PERMISSIONS, DEFAULT_ROLE_GRANTS
from access_control.models import PageSetting, Permission, RolePermission
from authentication.managers import UserManager
from members.models import Member


def create_permission_catalog() -> dict[str, Permission]:
    """Create or refresh catalog entries and return a code->Permission map."""
    permissions = {}
    for code, name, category, description in DEFAULT_PERMISSIONS:
        permission, _ = Permission.objects.update_or_create(
            code=code,
            defaults={"name": name, "category": category, "description": description},
        )
        permissions[code] = permission
    return permissions


def create_role_grants(restore: bool = False) -> int:
    """Insert the default enabled grants.

    Existing rows keep their current value unless ``restore`` is set, in which
    case every default grant is switched back on.
    """
    created_count = 0
    for role, codes in DEFAULT_ROLE_GRANTS.items():
        for code in sorted(codes):
            lookup = RolePermission.objects.update_or_create if restore else RolePermission.objects.get_or_create
            _, created = lookup(role=role, permission_code=code, defaults={"enabled": True})
            created_count += int(created)
    return created_count


def create_page_settings() -> dict[str, PageSetting]:
    """Create navigation pages if missing and return a page_key->PageSetting map."""
    pages = {}
    for page_key, page_name, visible_to_admin, visible_to_members, order in DEFAULT_PAGES:
        page, _ = PageSetting.objects.get_or_create(
            page_key=page_key,
            defaults={
                "page_name": page_name,
                "visible_to_admin": visible_to_admin,
                "visible_to_members": visible_to_members,
                "display_order": order,
            },
        )
        pages[page_key] = page
    return pages


def create_root_member(email: str, password: str, full_name: str = "Root") -> Member:
    """Create the root account and member, or promote an existing member to root."""
    User = get_user_model()
    account, _ = User.objects.get_or_create(
        email=email,
        defaults={"password_hash": UserManager.hash_password(password)},
    )
    member, _ = Member.objects.get_or_create(
        auth=account,
        defaults={"full_name": full_name, "email": email},
    )
    if not (member.is_root and member.is_admin):
        member.is_root = True
        member.is_admin = True
        member.save(update_fields=["is_root", "is_admin", "updated_at"])
    return member


class Command(BaseCommand):
    """Management command to seed the authorization tables."""

    help = (
        "Seed the permission catalog, default role grants, and page settings. "
        "Use --root-email/--root-password to create the root member and --reset "
        "to clear previously seeded rows first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Clear seeded catalog entries and page settings and disable role grants before seeding.",
        )
        parser.add_argument("--root-email", help="Email of the root account to create or promote.")
        parser.add_argument("--root-password", help="Password for a newly created root account.")

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        root_email = options.get("root_email")
        if root_email and not options.get("root_password"):
            raise CommandError("--root-password is required with --root-email")

        with transaction.atomic():
            if options.get("reset"):
                self._reset_seeded_data()

            self.stdout.write("Seeding access control data...")
            catalog = create_permission_catalog()
            created = create_role_grants(restore=bool(options.get("reset")))
            pages = create_page_settings()
            self.stdout.write(
                f"{len(catalog)} permissions, {created} new role grants, {len(pages)} pages."
            )

            if root_email:
                member = create_root_member(root_email, options["root_password"])
                self.stdout.write(f"Root member: {member.email}")

        self.stdout.write(self.style.SUCCESS("Access control seed completed."))

    def _reset_seeded_data(self) -> None:
        """Clear the seeded catalog and pages and switch every grant off.

        Role permission rows are only toggled, never deleted. Members are left
        alone.
        """
        self.stdout.write("Resetting previously seeded access control data...")
        codes = [code for code, *_ in DEFAULT_PERMISSIONS]
        RolePermission.objects.filter(permission_code__in=codes).update(enabled=False, updated_at=timezone.now())
        Permission.objects.filter(code__in=codes).delete()
        PageSetting.objects.filter(page_key__in=[key for key, *_ in DEFAULT_PAGES]).delete()
        self.stdout.write(self.style.WARNING("Seeded access control data cleared."))
