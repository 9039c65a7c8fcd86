from .constants import *
from .exceptions import NexusError, ColunaNaoEncontradaError, ValidacaoError, RegistroNaoEncontradoError

__all__ = [
    'NexusError',
    'ColunaNaoEncontradaError',
    'ValidacaoError',
    'RegistroNaoEncontradoError',
    'SLA_DIAS_ALERTA',
    'SLA_DIAS_CRITICO',
    'TOP_N_PADRAO',
    'CORES_SLA',
    'CORES_STATUS',
    'MAPA_COLUNAS_STATUS',
    'CAMPOS_STATUS',
    'COLUNAS_SLA',
    'COLUNAS_MULTIFASE',
    'BUS_VALIDAS',
]
