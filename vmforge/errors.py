class ValidationFailed(Exception):
    """Payload rejeitado. Carrega a lista de erros por campo ({'field', 'message'})."""

    def __init__(self, errors, message='Dados da requisição inválidos'):
        super().__init__(message)
        self.message = message
        self.errors = list(errors)


class UnsupportedHypervisorError(Exception):
    """Tipo de hypervisor sem adapter registrado (drift do enum)."""
    pass


class InvalidStatusTransition(Exception):
    pass
