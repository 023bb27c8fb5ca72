# apps/board/__init__.py

"""
Board - API do Kanban

Funcionalidades:
- Endpoints JSON para criar, mover e remover tickets
- WebSockets para atualizações em tempo real das colunas
"""
