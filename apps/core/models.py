# apps/core/models.py

from django.conf import settings
from django.db import models


class TicketStatus(models.TextChoices):
    """Estados de workflow derivados do título da coluna"""

    BACKLOG = 'backlog', 'Backlog'
    TODO = 'todo', 'Todo'
    IN_PROGRESS = 'in_progress', 'Em Progresso'
    REVIEW = 'review', 'Em Revisão'
    DONE = 'done', 'Concluído'


class Board(models.Model):
    """Quadro Kanban - agrupa colunas e tickets"""

    title = models.CharField(max_length=200)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='boards_owned'
    )
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name='boards_member',
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    DEFAULT_COLUMNS = ['Backlog', 'Todo', 'Doing', 'Reviewing', 'Finished']

    class Meta:
        db_table = 'board'
        ordering = ['title']

    def __str__(self):
        return self.title

    def create_default_columns(self):
        """Cria colunas padrão para novo board"""
        for idx, title in enumerate(self.DEFAULT_COLUMNS):
            Column.objects.create(
                title=title,
                board=self,
                position=idx
            )

    def is_member(self, user):
        """Dono ou membro do board"""
        if self.owner_id == user.pk:
            return True
        return self.members.filter(pk=user.pk).exists()


class Column(models.Model):
    """
    Coluna do board Kanban

    O título é texto livre editável; só é usado como entrada
    do resolvedor de status no momento em que um ticket é colocado.
    """

    title = models.CharField(max_length=100)
    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='columns'
    )
    position = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'board_column'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.title} - {self.board.title}"

    def live_tickets(self):
        """Tickets não deletados, na ordem de exibição"""
        return self.tickets.filter(deleted_at__isnull=True).order_by('position', 'id')


class TicketQuerySet(models.QuerySet):

    def live(self):
        return self.filter(deleted_at__isnull=True)


class Ticket(models.Model):
    """
    Item de trabalho do board

    Invariante: dentro de uma coluna, as posições dos tickets não
    deletados formam a sequência 0..N-1. Quem mantém isso é o
    PlacementEngine (apps.placement), nunca o save() do model.
    """

    PRIORITY_CHOICES = [
        ('Low', '🟢 Baixa'),
        ('Medium', '🟡 Média'),
        ('High', '🔴 Alta'),
    ]

    title = models.CharField(max_length=100)
    description = models.TextField(max_length=1000, blank=True)
    priority = models.CharField(
        max_length=10,
        choices=PRIORITY_CHOICES,
        default='Medium'
    )
    status = models.CharField(
        max_length=20,
        choices=TicketStatus.choices,
        default=TicketStatus.BACKLOG
    )
    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='tickets'
    )
    column = models.ForeignKey(
        Column,
        on_delete=models.CASCADE,
        related_name='tickets'
    )
    position = models.PositiveIntegerField(default=0)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tickets_created'
    )
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TicketQuerySet.as_manager()

    class Meta:
        db_table = 'ticket'
        ordering = ['position', 'id']
        indexes = [
            models.Index(fields=['column', 'position'], name='ticket_column_pos_idx'),
            models.Index(fields=['board', 'column', 'position'], name='ticket_board_col_pos_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.column_id}@{self.position})"

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def to_dict(self):
        """Serialização usada pela API JSON e pelo WebSocket"""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'priority': self.priority,
            'status': self.status,
            'board_id': self.board_id,
            'column_id': self.column_id,
            'position': self.position,
            'created_by': self.created_by_id,
            'deleted_at': self.deleted_at.isoformat() if self.deleted_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class ActivityLog(models.Model):
    """Registro de auditoria das ações no board"""

    ACTION_CHOICES = [
        ('ticket.create', 'Ticket criado'),
        ('ticket.move', 'Ticket movido'),
        ('ticket.delete', 'Ticket deletado'),
    ]

    ENTITY_CHOICES = [
        ('ticket', 'Ticket'),
    ]

    action = models.CharField(max_length=30, choices=ACTION_CHOICES)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='activity_logs'
    )
    entity_type = models.CharField(max_length=20, choices=ENTITY_CHOICES)
    entity_id = models.BigIntegerField()
    entity_name = models.CharField(max_length=200, blank=True)
    board = models.ForeignKey(
        Board,
        on_delete=models.CASCADE,
        related_name='activity_logs'
    )
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'activity_log'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['board', '-created_at'], name='activity_board_created_idx'),
            models.Index(fields=['user', '-created_at'], name='activity_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.action} #{self.entity_id} ({self.board_id})"
