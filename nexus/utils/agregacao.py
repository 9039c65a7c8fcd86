# nexus/utils/agregacao.py
"""
Agregações sobre as coleções de projetos (contagens, médias, rankings).

Tudo é recalculado a cada chamada a partir da lista recebida; nenhuma
função guarda estado.
"""
import logging

import pandas as pd

from .constants import TOP_N_PADRAO, ROTULO_VAZIO

logger = logging.getLogger(__name__)


def para_dataframe(registros, colunas=None):
    """Converte registros (modelos com to_dict() ou dicts) em DataFrame."""
    linhas = [r.to_dict() if hasattr(r, 'to_dict') else dict(r) for r in registros]
    return pd.DataFrame(linhas, columns=colunas)


def calcular_media(registros, campo, nulo_como_zero=True):
    """
    Média aritmética de `campo`. Lista vazia retorna 0.0 (nunca NaN).

    Com `nulo_como_zero`, valores ausentes entram na média como 0.
    """
    if not registros:
        return 0.0

    serie = pd.to_numeric(para_dataframe(registros)[campo], errors='coerce')
    if nulo_como_zero:
        serie = serie.fillna(0.0)

    media = serie.mean()
    return 0.0 if pd.isna(media) else float(media)


def contar_por(registros, campo, rotulo_vazio=ROTULO_VAZIO):
    """Contagem por valor de `campo`, na ordem em que os grupos aparecem."""
    if not registros:
        return {}

    grupos = para_dataframe(registros)[campo].fillna('').astype(str).str.strip()
    grupos = grupos.replace('', rotulo_vazio)
    contagem = grupos.groupby(grupos, sort=False).size()
    return {str(grupo): int(total) for grupo, total in contagem.items()}


def contar_por_classe(registros, classificador, classes):
    """Conta registros por classe; toda classe de `classes` aparece, mesmo com 0."""
    contagem = {classe: 0 for classe in classes}
    for registro in registros:
        classe = classificador(registro)
        if classe in contagem:
            contagem[classe] += 1
    return contagem


def top_n(registros, chave, n=TOP_N_PADRAO):
    """Os `n` registros de maior `chave`; empates preservam a ordem de entrada."""
    return sorted(registros, key=chave, reverse=True)[:n]


def truncar_titulo(titulo, limite):
    titulo = titulo or ''
    return titulo[:limite] + '...' if len(titulo) > limite else titulo
