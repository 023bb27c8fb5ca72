# apps/core/admin.py

from django.contrib import admin
from django.utils.html import format_html
from .models import Board, Column, Ticket, ActivityLog


class ColumnInline(admin.TabularInline):
    model = Column
    extra = 0
    fields = ['title', 'position']
    ordering = ['position']


@admin.register(Board)
class BoardAdmin(admin.ModelAdmin):
    """Admin para boards Kanban"""

    list_display = [
        'title', 'owner', 'members_count', 'columns_count',
        'tickets_count', 'created_at'
    ]
    list_filter = ['created_at']
    search_fields = ['title', 'owner__username']
    filter_horizontal = ['members']
    readonly_fields = ['created_at']
    inlines = [ColumnInline]

    def members_count(self, obj):
        """Conta quantidade de membros"""
        return obj.members.count()

    members_count.short_description = 'Membros'

    def columns_count(self, obj):
        """Conta colunas do board"""
        return obj.columns.count()

    columns_count.short_description = 'Colunas'

    def tickets_count(self, obj):
        """Conta tickets vivos do board"""
        return obj.tickets.live().count()

    tickets_count.short_description = 'Tickets'


@admin.register(Column)
class ColumnAdmin(admin.ModelAdmin):
    """Admin para colunas"""

    list_display = ['title', 'board', 'position', 'live_count']
    list_filter = ['board']
    search_fields = ['title', 'board__title']
    ordering = ['board', 'position']

    def live_count(self, obj):
        return obj.live_tickets().count()

    live_count.short_description = 'Tickets'


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    """
    Admin para tickets

    column e position são somente leitura: só o motor de
    posicionamento altera a ordem, para manter as posições densas.
    """

    list_display = [
        'title', 'board', 'column', 'position', 'status_badge',
        'priority', 'deleted_badge', 'updated_at'
    ]
    list_filter = ['status', 'priority', 'board']
    search_fields = ['title', 'description']
    readonly_fields = ['board', 'column', 'position', 'status', 'deleted_at', 'created_at', 'updated_at']

    fieldsets = (
        ('Informações Básicas', {
            'fields': ('title', 'description', 'priority', 'board', 'created_by')
        }),
        ('Posicionamento', {
            'fields': ('column', 'position', 'status', 'deleted_at')
        }),
        ('Datas', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def status_badge(self, obj):
        """Exibe o status com badge colorido"""
        cores = {
            'backlog': '#6B7280',  # cinza
            'todo': '#3B82F6',  # azul
            'in_progress': '#F59E0B',  # amarelo
            'review': '#8B5CF6',  # roxo
            'done': '#10B981',  # verde
        }
        cor = cores.get(obj.status, '#6B7280')
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">{}</span>',
            cor, obj.get_status_display()
        )

    status_badge.short_description = 'Status'

    def deleted_badge(self, obj):
        if obj.deleted_at:
            return format_html('<span style="color: #EF4444;">🗑️ {}</span>', obj.deleted_at.strftime('%d/%m/%Y'))
        return ''

    deleted_badge.short_description = 'Deletado'

    def has_add_permission(self, request):
        # Criação passa pelo motor (POST /board/<id>/tickets/ ou comando seed)
        return False


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    """Auditoria - somente leitura"""

    list_display = ['action', 'entity_name', 'entity_id', 'board', 'user', 'created_at']
    list_filter = ['action', 'entity_type', 'board']
    search_fields = ['entity_name']
    readonly_fields = [
        'action', 'user', 'entity_type', 'entity_id', 'entity_name',
        'board', 'metadata', 'created_at'
    ]

    def has_add_permission(self, request):
        return False
