# nexus/utils/classificacao.py
"""Classificação de severidade (SLA) e de status dos projetos."""
import enum

from .constants import (
    SLA_DIAS_ALERTA,
    SLA_DIAS_CRITICO,
    CORES_SLA,
    ROTULOS_SLA,
    STATUS_FINALIZADO,
    STATUS_EM_ANDAMENTO,
    STATUS_PARALIZADO,
    STATUS_NAO_INICIADO,
    CORES_STATUS,
    CORES_BU_PALAVRA_CHAVE,
    COR_BU_PADRAO,
)


class SLAStatus(enum.Enum):
    OK = 'OK'
    WARNING = 'WARNING'
    CRITICAL = 'CRITICAL'


class CategoriaStatus(enum.Enum):
    FINALIZADO = STATUS_FINALIZADO
    EM_ANDAMENTO = STATUS_EM_ANDAMENTO
    PARALIZADO = STATUS_PARALIZADO
    NAO_INICIADO = STATUS_NAO_INICIADO
    DESCONHECIDO = 'DESCONHECIDO'


# Ordem de teste dos prefixos
_PREFIXOS_STATUS = [
    CategoriaStatus.FINALIZADO,
    CategoriaStatus.EM_ANDAMENTO,
    CategoriaStatus.PARALIZADO,
    CategoriaStatus.NAO_INICIADO,
]


def classificar_sla(dias_na_fase):
    """
    Classifica o tempo na fase atual.

    > 7 dias: CRITICAL; > 5 e <= 7: WARNING; demais: OK.
    """
    if dias_na_fase > SLA_DIAS_CRITICO:
        return SLAStatus.CRITICAL
    if dias_na_fase > SLA_DIAS_ALERTA:
        return SLAStatus.WARNING
    return SLAStatus.OK


def cor_sla(status):
    return CORES_SLA[status.value]


def rotulo_sla(status):
    return ROTULOS_SLA[status.value]


def classificar_status(status):
    """
    Categoria do status por prefixo, ignorando caixa.

    'Em Andamento - aguardando cliente' -> EM_ANDAMENTO; o que não casa com
    nenhum prefixo conhecido vai para DESCONHECIDO.
    """
    normalizado = (status or '').strip().upper()
    for categoria in _PREFIXOS_STATUS:
        if normalizado.startswith(categoria.value):
            return categoria
    return CategoriaStatus.DESCONHECIDO


def cor_status(status):
    return CORES_STATUS[classificar_status(status).value]


def cor_bu(bu):
    """Cor da unidade de negócio pela palavra-chave contida no nome."""
    normalizado = (bu or '').strip().upper()
    for palavra, cor in CORES_BU_PALAVRA_CHAVE:
        if palavra in normalizado:
            return cor
    return COR_BU_PADRAO
