"""
Management command for a scanning station.

Usage:
    python manage.py scan_codes --user installer@example.com [--session KEY] [FILE]

Reads raw scanned codes, one per line, from FILE or stdin. Repeat
detections within the cooldown window and codes already accepted in the
session are skipped before reaching the server-side pipeline. Prints one
line per code.
"""

import sys

from django.core.management.base import BaseCommand, CommandError

from apps.accounts.models import User
from apps.scans.services import (
    ScanRejectedError,
    parse_scanned_code,
    submit_scan,
)
from apps.scans.tracker import (
    CacheProcessedCodeStore,
    MemoryProcessedCodeStore,
    ScanTracker,
)


class Command(BaseCommand):
    help = 'Submit scanned warranty codes for an installer'

    def add_arguments(self, parser):
        parser.add_argument(
            'file',
            nargs='?',
            help='File with one scanned code per line (default: stdin)',
        )
        parser.add_argument(
            '--user',
            required=True,
            help='Email of the installer claiming the units',
        )
        parser.add_argument(
            '--session',
            help='Session key; accepted codes are remembered in the cache under it',
        )
        parser.add_argument(
            '--cooldown',
            type=float,
            help='Seconds during which repeat detections are ignored',
        )

    def handle(self, *args, **options):
        try:
            user = User.objects.get(email__iexact=options['user'])
        except User.DoesNotExist:
            raise CommandError(f"User {options['user']} not found")

        if options['session']:
            store = CacheProcessedCodeStore(options['session'])
        else:
            store = MemoryProcessedCodeStore()
        tracker = ScanTracker(cooldown_seconds=options['cooldown'], store=store)

        if options['file']:
            try:
                with open(options['file'], encoding='utf-8') as handle:
                    lines = handle.read().splitlines()
            except OSError as e:
                raise CommandError(f"Cannot read {options['file']}: {e}")
        else:
            lines = sys.stdin.read().splitlines()

        counts = {'accepted': 0, 'rejected': 0, 'skipped': 0}
        for line in lines:
            raw = line.strip()
            if not raw:
                continue
            counts[self.process(raw, user=user, tracker=tracker)] += 1

        self.stdout.write(
            f"{counts['accepted']} accepted, {counts['rejected']} rejected, "
            f"{counts['skipped']} skipped"
        )

    def process(self, raw, *, user, tracker):
        try:
            unit_id = parse_scanned_code(raw).unit_id
        except ScanRejectedError as e:
            self.stdout.write(self.style.ERROR(f"REJECTED {e.reason} {raw[:80]}"))
            return 'rejected'

        if not tracker.should_submit(unit_id):
            self.stdout.write(f"SKIPPED {unit_id}")
            return 'skipped'

        try:
            result = submit_scan(raw_code=raw, user=user)
        except ScanRejectedError as e:
            suffix = ' (retry later)' if e.retryable else ''
            self.stdout.write(self.style.ERROR(f"REJECTED {e.reason} {unit_id}{suffix}"))
            return 'rejected'

        tracker.mark_processed(unit_id)
        self.stdout.write(self.style.SUCCESS(
            f"ACCEPTED {unit_id} {result.product_name or '-'} "
            f"+{result.points_awarded} balance {result.new_balance}"
        ))
        return 'accepted'
