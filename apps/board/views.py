# apps/board/views.py

import json
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.core.models import Board, Ticket
from apps.core.permissions import BoardPermissions, ajax_login_required
from apps.core.utils import board_state
from apps.placement.engine import placement_engine
from apps.placement.errors import (
    ConcurrencyConflict,
    DegradedConsistency,
    InvalidTarget,
    NotFound,
    PlacementError,
)

logger = logging.getLogger(__name__)

# Erro do motor -> status HTTP
ERROR_STATUS = {
    NotFound: 404,
    InvalidTarget: 400,
    ConcurrencyConflict: 409,
    DegradedConsistency: 503,
}


def _error_response(exc: PlacementError):
    status = next((code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)), 500)
    payload = {'ok': False, 'error': exc.to_dict()}

    # Ordenação conhecida pelo cliente não é mais confiável
    if isinstance(exc, (ConcurrencyConflict, DegradedConsistency)):
        payload['refresh'] = True

    return JsonResponse(payload, status=status)


def _forbidden():
    return JsonResponse({'ok': False, 'error': 'Sem permissão para modificar este board'}, status=403)


def _parse_body(request):
    try:
        return json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        return None


def _ticket_response(ticket, status=200):
    data = ticket.to_dict()
    data['consistency'] = getattr(ticket, 'placement_consistency', None)
    return JsonResponse({'ok': True, 'data': {'ticket': data}}, status=status)


@csrf_exempt
@ajax_login_required
@require_POST
def create_ticket(request, board_id):
    """
    Cria ticket no fim da coluna informada
    Body: {title, description?, priority?, column_id}
    """
    board = get_object_or_404(Board, id=board_id)

    if not BoardPermissions.can_modify(request.user, board):
        return _forbidden()

    data = _parse_body(request)
    if data is None:
        return JsonResponse({'ok': False, 'error': 'JSON inválido'}, status=400)

    title = (data.get('title') or '').strip()
    column_id = data.get('column_id')
    priority = data.get('priority') or 'Medium'

    # Validar parâmetros
    if not title or not column_id:
        return JsonResponse({'ok': False, 'error': 'title e column_id são obrigatórios'}, status=400)

    if len(title) > 100:
        return JsonResponse({'ok': False, 'error': 'Título não pode passar de 100 caracteres'}, status=400)

    if priority not in dict(Ticket.PRIORITY_CHOICES):
        return JsonResponse({'ok': False, 'error': 'Prioridade deve ser Low, Medium ou High'}, status=400)

    draft = Ticket(
        title=title,
        description=data.get('description') or '',
        priority=priority,
        board=board,
        created_by=request.user,
    )

    try:
        ticket = placement_engine.insert(draft, column_id, actor=request.user)
    except PlacementError as exc:
        return _error_response(exc)

    return _ticket_response(ticket, status=201)


@csrf_exempt
@ajax_login_required
@require_POST
def move_ticket(request, ticket_id):
    """
    Move ticket entre colunas ou dentro da mesma coluna
    Usado pelo drag-and-drop. Body: {column_id, index}
    """
    ticket = get_object_or_404(Ticket.objects.live().select_related('board'), id=ticket_id)

    # Verificar permissão
    if not BoardPermissions.can_modify(request.user, ticket.board):
        return _forbidden()

    data = _parse_body(request)
    if data is None:
        return JsonResponse({'ok': False, 'error': 'JSON inválido'}, status=400)

    column_id = data.get('column_id')
    index = data.get('index')

    if not column_id or isinstance(index, bool) or not isinstance(index, int):
        return JsonResponse({'ok': False, 'error': 'column_id e index são obrigatórios'}, status=400)

    try:
        moved = placement_engine.move(ticket.id, column_id, index, actor=request.user)
    except PlacementError as exc:
        logger.warning(f"❌ Movimentação do ticket {ticket.id} recusada: {exc}")
        return _error_response(exc)

    return _ticket_response(moved)


@csrf_exempt
@ajax_login_required
@require_http_methods(["DELETE"])
def delete_ticket(request, ticket_id):
    """
    Remove ticket (soft delete por padrão)
    ?hard=true apaga definitivamente - apenas administradores
    (inclusive tickets que já estão na lixeira)
    """
    hard = request.GET.get('hard') == 'true'
    queryset = Ticket.objects if hard else Ticket.objects.live()
    ticket = get_object_or_404(queryset.select_related('board'), id=ticket_id)

    if not BoardPermissions.can_modify(request.user, ticket.board):
        return _forbidden()

    if hard and not BoardPermissions.can_hard_delete(request.user, ticket.board):
        return JsonResponse({'ok': False, 'error': 'Apenas administradores podem apagar definitivamente'}, status=403)

    try:
        ack = placement_engine.remove(ticket.id, hard=hard, actor=request.user)
    except PlacementError as exc:
        return _error_response(exc)

    ack['message'] = 'Ticket apagado definitivamente' if hard else 'Ticket removido'
    return JsonResponse(ack)


@ajax_login_required
@require_GET
def board_state_view(request, board_id):
    """Colunas com os tickets vivos em ordem"""
    board = get_object_or_404(Board, id=board_id)

    if not BoardPermissions.can_view(request.user, board):
        return JsonResponse({'ok': False, 'error': 'Sem acesso ao board'}, status=403)

    return JsonResponse({'ok': True, 'data': board_state(board)})
