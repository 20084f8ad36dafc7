"""
inventory/management/commands/check_expiring_units.py

Daily inventory check for the blood bank.

Reports AVAILABLE units that will expire soon and blood types whose available
stock is below the low-stock threshold. Unit statuses are left alone unless
--mark-expired is given, in which case AVAILABLE units already past their
expiry date are moved to EXPIRED.

Usage:
    python manage.py check_expiring_units                 # report only
    python manage.py check_expiring_units --days 3        # tighter warning window
    python manage.py check_expiring_units --mark-expired  # also flip past-expiry units to EXPIRED
    python manage.py check_expiring_units --mark-expired --dry-run
"""

import logging

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db.models import Count
from django.utils import timezone

from core.enums import BloodType
from inventory.enums import BloodUnitStatus
from inventory.models import BloodUnit

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Report blood units nearing expiry and low stock; optionally mark past-expiry units EXPIRED"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=getattr(settings, "EXPIRY_WARNING_DAYS", 7),
            help="Warn about units expiring within this many days",
        )
        parser.add_argument(
            "--threshold",
            type=int,
            default=getattr(settings, "LOW_STOCK_THRESHOLD", 10),
            help="Available units per blood type below which stock is reported as low",
        )
        parser.add_argument(
            "--mark-expired",
            action="store_true",
            help="Set status EXPIRED on AVAILABLE units already past their expiry date",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="With --mark-expired, show what would change without saving",
        )

    def handle(self, *args, **options):
        now = timezone.now()
        days = options["days"]
        threshold = options["threshold"]
        dry_run = options["dry_run"]

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN - No unit statuses will be changed"))

        expiring = BloodUnit.objects.expiring_within(days, at=now).order_by("expiry_date")
        self.stdout.write(f"Units expiring within {days} day(s): {expiring.count()}")
        for unit in expiring:
            self.stdout.write(
                self.style.WARNING(
                    f"  {unit.unit_number} {unit.get_blood_type_display()} {unit.get_component_type_display()} "
                    f"expires {timezone.localtime(unit.expiry_date):%Y-%m-%d %H:%M}"
                )
            )

        counts = dict(
            BloodUnit.objects.available().filter(expiry_date__gt=now)
            .values_list("blood_type")
            .annotate(n=Count("id"))
            .order_by()
        )
        low = [(bt, counts.get(bt, 0)) for bt in BloodType.values if counts.get(bt, 0) < threshold]
        if low:
            self.stdout.write(f"\nBlood types below {threshold} available unit(s):")
            for bt, n in low:
                style = self.style.ERROR if n == 0 else self.style.WARNING
                self.stdout.write(style(f"  {BloodType(bt).label}: {n}"))
        else:
            self.stdout.write(self.style.SUCCESS("\nAll blood types above the low-stock threshold"))

        if options["mark_expired"]:
            past = BloodUnit.objects.available().past_expiry(now)
            total = past.count()
            if dry_run:
                for unit in past:
                    self.stdout.write(f"  Would expire: {unit.unit_number}")
                self.stdout.write(f"\nWould mark {total} unit(s) EXPIRED")
                return
            updated = past.update(status=BloodUnitStatus.EXPIRED, updated_at=now)
            logger.info(f"Marked {updated} past-expiry blood unit(s) EXPIRED")
            self.stdout.write(self.style.SUCCESS(f"\nMarked {updated} unit(s) EXPIRED"))
