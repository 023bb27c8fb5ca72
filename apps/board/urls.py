# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Estado do Kanban
    path('<int:board_id>/state/', views.board_state_view, name='state'),

    # Criação de tickets
    path('<int:board_id>/tickets/', views.create_ticket, name='create_ticket'),

    # AJAX - Movimentação de tickets (drag-and-drop)
    path('tickets/<int:ticket_id>/move/', views.move_ticket, name='move_ticket'),

    # Remoção
    path('tickets/<int:ticket_id>/', views.delete_ticket, name='delete_ticket'),
]
