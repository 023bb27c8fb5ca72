# apps/placement/errors.py

"""
Taxonomia de erros do motor de posicionamento

Todos propagam para quem chamou como falhas tipadas. O único erro
engolido (apenas logado) é o do ActivityRecorder, que fica fora daqui.
"""


class PlacementError(Exception):
    """Erro base do motor de posicionamento"""

    code = 'placement_error'
    retryable = False

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self):
        return {
            'code': self.code,
            'message': self.message,
            'retryable': self.retryable,
        }


class NotFound(PlacementError):
    """Ticket, coluna ou board inexistente - nada foi alterado"""

    code = 'not_found'


class InvalidTarget(PlacementError):
    """Coluna de destino de outro board ou índice inválido - nada foi alterado"""

    code = 'invalid_target'


class ConcurrencyConflict(PlacementError):
    """
    A unidade atômica não pôde ser confirmada (snapshot mudou, deadlock,
    falha de serialização). O cliente deve recarregar a coluna e repetir.
    """

    code = 'concurrency_conflict'
    retryable = True


class DegradedConsistency(PlacementError):
    """
    Modo degradado (sem transação) falhou no meio da aplicação ou a
    leitura final não confere. O estado do board pode estar inconsistente.
    """

    code = 'degraded_consistency'

    def __init__(self, message, applied=0, **context):
        super().__init__(message, **context)
        self.applied = applied

    def to_dict(self):
        data = super().to_dict()
        data['applied'] = self.applied
        return data
