# apps/placement/__init__.py

"""
Placement - Motor de posicionamento de tickets

Contém:
- position_index: cálculo puro das posições densas por coluna
- status: mapeamento título da coluna -> status de workflow
- store: adaptador do ORM (leitura, aplicação atômica ou degradada)
- engine: operações insert / move / remove
- activity: registro de auditoria e broadcast via WebSocket
"""
