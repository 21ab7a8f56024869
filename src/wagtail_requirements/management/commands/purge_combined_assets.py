"""Management command to delete every generated combined file."""

from __future__ import annotations

import logging

from django.core.management.base import BaseCommand, CommandError, CommandParser

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Delete all combined CSS/JS files from the combined files folder."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--folder",
            help="Combined files folder to purge. Defaults to COMBINED_FILES_FOLDER.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show which folder would be purged without deleting anything.",
        )

    def handle(self, **options: object) -> None:
        from wagtail_requirements.backend import RequirementsBackend

        folder = options.get("folder")
        dry_run = options.get("dry_run")

        backend = RequirementsBackend(combined_files_folder=folder)  # type: ignore[arg-type]
        if not backend.combined_files_folder:
            self.stdout.write("No combined files folder configured, nothing to do.")
            return

        if dry_run:
            self.stdout.write(
                f"[DRY RUN] Would purge: {backend.combined_files_folder}"
            )
            return

        try:
            backend.purge_combined_assets()
        except Exception as e:
            logger.exception(
                "Failed to purge combined files in %s", backend.combined_files_folder
            )
            self.stderr.write(f"ERROR: {backend.combined_files_folder}")
            raise CommandError(str(e)) from e

        self.stdout.write(
            self.style.SUCCESS(f"Purged combined files in {backend.combined_files_folder}")
        )
