"""
Exceções de domínio do Nexus.
"""


class NexusError(Exception):
    """Erro base da aplicação."""
    status_code = 500


class ColunaNaoEncontradaError(NexusError, ValueError):
    """Coluna obrigatória ausente no arquivo importado."""
    status_code = 400

    def __init__(self, coluna):
        self.coluna = coluna
        super().__init__(f"Erro: Coluna '{coluna}' não encontrada.")


class ValidacaoError(NexusError, ValueError):
    """Dados de entrada inválidos (campos obrigatórios, conflitos de agenda)."""
    status_code = 400


class RegistroNaoEncontradoError(NexusError, LookupError):
    """Registro inexistente na coleção consultada."""
    status_code = 404

    def __init__(self, colecao, registro_id):
        self.colecao = colecao
        self.registro_id = registro_id
        super().__init__(f"{colecao} '{registro_id}' não encontrado")
