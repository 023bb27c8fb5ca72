# apps/core/management/commands/seed.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import Board, Ticket
from apps.placement.engine import placement_engine

User = get_user_model()

DEMO_TICKETS = {
    'Backlog': [
        ('Configurar pipeline de CI', 'Medium'),
        ('Documentar API de tickets', 'Low'),
    ],
    'Todo': [
        ('Tela de login', 'High'),
        ('Filtro por prioridade', 'Medium'),
    ],
    'Doing': [
        ('Drag-and-drop entre colunas', 'High'),
    ],
    'Reviewing': [
        ('Notificações via WebSocket', 'Medium'),
    ],
    'Finished': [
        ('Modelo de dados do board', 'Low'),
    ],
}


class Command(BaseCommand):
    help = 'Cria usuário e board de demonstração com tickets posicionados pelo motor'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='demo', help='Usuário dono do board demo')
        parser.add_argument('--password', default='demo12345', help='Senha do usuário demo')
        parser.add_argument('--board', default='Board Demo', help='Título do board')

    def handle(self, *args, **options):
        self.stdout.write('🌱 Populando dados de demonstração...')

        user, created = User.objects.get_or_create(
            username=options['username'],
            defaults={'email': f"{options['username']}@ticketboard.app"}
        )
        if created:
            user.set_password(options['password'])
            user.save()
            self.stdout.write(f'  👤 Usuário criado: {user.username}')

        if Board.objects.filter(title=options['board'], owner=user).exists():
            self.stdout.write(self.style.WARNING(f"⚠️  Board '{options['board']}' já existe - nada a fazer"))
            return

        with transaction.atomic():
            # O sinal post_save cria as colunas padrão
            board = Board.objects.create(title=options['board'], owner=user)
            board.members.add(user)

        total = 0
        for column in board.columns.all():
            for title, priority in DEMO_TICKETS.get(column.title, []):
                draft = Ticket(title=title, priority=priority, board=board, created_by=user)
                placement_engine.insert(draft, column.id, actor=user)
                total += 1

        self.stdout.write(
            self.style.SUCCESS(f"✅ Board '{board.title}' criado com {board.columns.count()} colunas e {total} tickets")
        )
