# apps/core/management/commands/sync_ticket_status.py

from django.core.management.base import BaseCommand

from apps.core.models import Ticket
from apps.placement.status import StatusResolver


class Command(BaseCommand):
    help = 'Recalcula o status de todos os tickets vivos a partir do título da coluna atual'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Apenas lista o que mudaria')

    def handle(self, *args, **options):
        resolver = StatusResolver()
        changed = 0

        for ticket in Ticket.objects.live().select_related('column').iterator():
            new_status = resolver.resolve(ticket.column.title)
            if ticket.status == new_status:
                continue

            changed += 1
            self.stdout.write(f'  🔄 #{ticket.id} {ticket.title}: {ticket.status} -> {new_status}')
            if not options['dry_run']:
                Ticket.objects.filter(pk=ticket.pk).update(status=new_status)

        if options['dry_run']:
            self.stdout.write(self.style.WARNING(f'📝 {changed} ticket(s) seriam atualizados'))
        else:
            self.stdout.write(self.style.SUCCESS(f'✅ Sincronização concluída: {changed} ticket(s) atualizados'))
