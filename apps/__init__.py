# apps/__init__.py

"""
Ticket Board - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models, permissões e comandos de manutenção
- placement: Motor de posicionamento de tickets (ordem densa por coluna)
- board: API JSON e WebSockets do Kanban
"""

__version__ = '0.1.0'
