from django.core.management.base import BaseCommand
from settings.config import app_settings
from orders.services import AutoClearService


class Command(BaseCommand):
    help = "Cancel unpaid and unapproved orders whose deadline has passed"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be cleared without making changes",
        )

    def handle(self, *args, **options):
        service = AutoClearService(app_settings.get_order_policy())

        if options["dry_run"]:
            self.stdout.write(
                self.style.WARNING("DRY RUN MODE - No changes will be made")
            )
            for rule, count in service.preview().items():
                self.stdout.write(f"Rule {rule}: would clear {count} orders")
            return

        counts = service.sweep()
        for rule, count in counts.items():
            if count is None:
                self.stdout.write(self.style.ERROR(f"Rule {rule}: failed, see logs"))
            else:
                self.stdout.write(f"Rule {rule}: cleared {count} orders")

        total = sum(count for count in counts.values() if count)
        self.stdout.write(self.style.SUCCESS(f"Successfully cleared {total} orders"))
