# apps/core/permissions.py

from functools import wraps
from django.http import JsonResponse


class BoardPermissions:
    """
    Permissões sobre boards e tickets

    O motor de posicionamento não verifica nada: quem chama (views,
    comandos) pergunta aqui antes de inserir, mover ou remover.
    """

    @staticmethod
    def is_admin(user):
        """Staff/superusuário"""
        return user.is_authenticated and (user.is_staff or user.is_superuser)

    @staticmethod
    def can_view(user, board):
        """Verifica se tem acesso ao board"""
        if not user.is_authenticated:
            return False

        # Admin tem acesso a todos os boards
        if BoardPermissions.is_admin(user):
            return True

        return board.is_member(user)

    @staticmethod
    def can_modify(user, board):
        """Verifica se pode criar, mover ou remover tickets no board"""
        if not user.is_authenticated:
            return False

        if BoardPermissions.is_admin(user):
            return True

        # Dono e membros do board podem modificar
        return board.is_member(user)

    @staticmethod
    def can_hard_delete(user, board):
        """Exclusão definitiva apenas para administradores"""
        return BoardPermissions.is_admin(user)


def ajax_login_required(view_func):
    """
    Decorador para views JSON
    Retorna 401 ao invés de redirecionar para o login
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'ok': False, 'error': 'Autenticação necessária'}, status=401)
        return view_func(request, *args, **kwargs)

    return wrapped_view
