# apps/core/__init__.py

"""
Core - Aplicação principal

Contém:
- Models persistentes (Board, Column, Ticket, ActivityLog)
- Sistema de permissões por board
- Sinais (colunas padrão)
- Comandos de manutenção (seed, sync_ticket_status, check_positions)
"""
