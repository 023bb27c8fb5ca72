# apps/core/management/commands/check_positions.py

from django.core.management.base import BaseCommand, CommandError

from apps.core.models import Board
from apps.core.utils import find_gapped_columns
from apps.placement.store import TicketStore


class Command(BaseCommand):
    help = 'Verifica se as posições dos tickets vivos de cada coluna formam 0..N-1'

    def add_arguments(self, parser):
        parser.add_argument('--board', type=int, help='Verificar apenas um board')
        parser.add_argument(
            '--repair',
            action='store_true',
            help='Compacta as colunas com problema (uma transação por coluna)'
        )

    def handle(self, *args, **options):
        self.stdout.write('🔍 Verificando posições dos tickets...')

        boards = None
        if options['board']:
            if not Board.objects.filter(pk=options['board']).exists():
                raise CommandError(f"Board {options['board']} não encontrado")
            boards = [options['board']]

        problems = find_gapped_columns(boards)

        if not problems:
            self.stdout.write(self.style.SUCCESS('✅ Todas as colunas estão densas'))
            return

        for problem in problems:
            column = problem['column']
            self.stdout.write(
                self.style.WARNING(
                    f"  ⚠️  {column.board.title} / {column.title} (#{column.id}): "
                    f"posições {problem['positions']} (esperado {problem['expected']})"
                )
            )

        if not options['repair']:
            self.stdout.write(self.style.WARNING(f'📝 {len(problems)} coluna(s) com problema - use --repair'))
            return

        store = TicketStore()
        for problem in problems:
            column = problem['column']
            adjusted = store.compact_column(column.id)
            self.stdout.write(f'  🔧 {column.title} (#{column.id}): {adjusted} ticket(s) reposicionados')

        self.stdout.write(self.style.SUCCESS(f'✅ {len(problems)} coluna(s) reparadas'))
