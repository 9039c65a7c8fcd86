# nexus/utils/csv_parser.py
"""
Leitura dos arquivos delimitados importados pelos módulos (SLA, controle de
fases e relatório de status).

Os arquivos chegam exportados de planilhas: separador ';', quebras de linha
CRLF ou LF, às vezes com BOM, linhas de metadados antes do cabeçalho e
decimais com vírgula. A leitura é feita pelo pandas (células entre aspas podem
conter o separador). Valores numéricos inválidos nunca abortam a importação;
apenas a ausência da coluna marcadora e o texto malformado (aspas não fechadas)
são tratados como erro.
"""
import io
import logging
import math
import re
from datetime import date

import pandas as pd

from .constants import (
    SEPARADOR_CSV,
    ENCODINGS_UPLOAD,
    COLUNAS_SLA,
    MINIMO_COLUNAS_SLA,
    COLUNAS_MULTIFASE,
    MINIMO_COLUNAS_MULTIFASE,
    MAPA_COLUNAS_STATUS,
    CAMPOS_STATUS,
    COLUNA_MARCADORA_STATUS,
)
from .exceptions import ColunaNaoEncontradaError

logger = logging.getLogger(__name__)

BOM = '\ufeff'
_QUEBRA_LINHA = re.compile(r'\r\n|\r|\n')


def decodificar_upload(conteudo):
    """Decodifica o conteúdo de um upload tentando os encodings usuais."""
    if isinstance(conteudo, str):
        return conteudo

    for encoding in ENCODINGS_UPLOAD:
        try:
            texto = conteudo.decode(encoding)
            logger.info(f"Upload decodificado usando encoding {encoding}.")
            return texto
        except UnicodeDecodeError as e:
            logger.warning(f"Falha ao decodificar upload com encoding {encoding}: {e}")
            continue

    return conteudo.decode('utf-8', errors='replace')


def remover_bom(texto):
    return texto[1:] if texto.startswith(BOM) else texto


def linha_em_branco(celulas):
    """Linha vazia, só com espaços ou só com separadores."""
    return all(not celula.strip() for celula in celulas)


def largura_maxima(texto, separador=SEPARADOR_CSV):
    """Maior quantidade de células em uma linha física do texto."""
    return max(linha.count(separador) for linha in _QUEBRA_LINHA.split(texto)) + 1


def ler_tabela(texto, separador=SEPARADOR_CSV):
    """
    Lê o texto delimitado com pandas, sem cabeçalho e com todas as células como texto.

    Células entre aspas podem conter o separador. Linhas mais curtas que a
    maior linha do arquivo são completadas com vazio.

    Raises:
        pd.errors.ParserError: texto malformado (ex.: aspas não fechadas)
    """
    tabela = pd.read_csv(
        io.StringIO(texto),
        sep=separador,
        header=None,
        names=list(range(largura_maxima(texto, separador))),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    return tabela.fillna('')


def _celulas_preenchidas(celulas):
    """Células da linha até a última preenchida (o pandas completa as linhas curtas)."""
    fim = len(celulas)
    while fim and not celulas[fim - 1].strip():
        fim -= 1
    return celulas[:fim]


def localizar_cabecalho(linhas, coluna_marcadora, separador=SEPARADOR_CSV):
    """Índice da primeira linha que contém o nome da coluna marcadora."""
    marcador = coluna_marcadora.upper()
    for indice, celulas in enumerate(linhas):
        if marcador in separador.join(celulas).upper():
            return indice
    raise ColunaNaoEncontradaError(coluna_marcadora)


def ler_linhas(texto, coluna_marcadora=None, separador=SEPARADOR_CSV):
    """
    Divide o texto em cabeçalho e linhas de dados (listas de células).

    Com `coluna_marcadora`, tudo antes da linha que a contém é descartado;
    sem ela, a primeira linha não vazia é o cabeçalho. Cada linha traz as
    células até a última preenchida.

    Returns:
        tuple: (cabecalho: list[str], linhas: list[list[str]])
    """
    texto = remover_bom(texto or '')
    if texto.strip():
        tabela = ler_tabela(texto, separador)
        linhas = [list(celulas) for celulas in tabela.itertuples(index=False, name=None)]
    else:
        linhas = []

    if coluna_marcadora:
        inicio = localizar_cabecalho(linhas, coluna_marcadora, separador)
        if inicio:
            logger.info(f"Cabeçalho localizado na linha {inicio + 1}; {inicio} linha(s) anteriores descartadas")
        linhas = linhas[inicio:]

    linhas = [_celulas_preenchidas(celulas) for celulas in linhas if not linha_em_branco(celulas)]
    if not linhas:
        return [], []

    cabecalho = [celula.strip() for celula in linhas[0]]
    return cabecalho, linhas[1:]


def construir_indice_colunas(cabecalho, mapa):
    """
    Mapeia campo interno -> posição da coluna, a partir do mapa de cabeçalhos.

    A comparação ignora caixa e espaços nas bordas. Quando mais de um
    cabeçalho do mapa aponta para o mesmo campo, vale o primeiro do mapa
    presente no arquivo.
    """
    normalizado = [celula.strip().casefold() for celula in cabecalho]
    indice = {}
    for nome_externo, campo in mapa.items():
        if campo in indice:
            continue
        alvo = nome_externo.strip().casefold()
        if alvo in normalizado:
            indice[campo] = normalizado.index(alvo)
    return indice


def _celula(celulas, posicao):
    if posicao is None or posicao >= len(celulas):
        return ''
    return celulas[posicao].strip()


def tabela_posicional(texto, colunas, minimo_colunas, separador=SEPARADOR_CSV):
    """Lê um arquivo de layout fixo; a primeira linha é sempre ignorada."""
    _, linhas = ler_linhas(texto, separador=separador)

    registros = []
    descartadas = 0
    for celulas in linhas:
        if len(celulas) < minimo_colunas:
            descartadas += 1
            continue
        registros.append({coluna: _celula(celulas, i) for i, coluna in enumerate(colunas)})

    if descartadas:
        logger.warning(f"{descartadas} linha(s) com menos de {minimo_colunas} colunas ignoradas")

    return pd.DataFrame(registros, columns=colunas)


def tabela_por_cabecalho(texto, mapa, campos, coluna_marcadora, separador=SEPARADOR_CSV):
    """Lê um arquivo cujas colunas são identificadas pelo nome no cabeçalho."""
    cabecalho, linhas = ler_linhas(texto, coluna_marcadora, separador)
    indice = construir_indice_colunas(cabecalho, mapa)

    faltantes = [campo for campo in campos if campo not in indice]
    if faltantes:
        logger.warning(f"Colunas não encontradas no cabeçalho (preenchidas com vazio): {faltantes}")

    registros = [
        {campo: _celula(celulas, indice.get(campo)) for campo in campos}
        for celulas in linhas
    ]
    return pd.DataFrame(registros, columns=campos)


def converter_decimal(valor, padrao=0.0):
    """Converte texto com vírgula ou ponto decimal para float; `padrao` em caso de falha."""
    if valor is None:
        return padrao
    if isinstance(valor, (int, float)) and not isinstance(valor, bool):
        return padrao if math.isnan(valor) else float(valor)

    texto = str(valor).strip().replace(',', '.')
    if not texto:
        return padrao
    try:
        numero = float(texto)
    except ValueError:
        return padrao
    return padrao if math.isnan(numero) else numero


def converter_coluna_decimal(serie):
    """Versão vetorizada de `converter_decimal` (falhas viram 0.0)."""
    serie = serie.astype(str).str.strip().str.replace(',', '.', regex=False)
    return pd.to_numeric(serie, errors='coerce').fillna(0.0).astype(float)


def normalizar_percentual(valor):
    """'45%' -> 45.0, '7,5 %' -> 7.5; vazio ou inválido -> None."""
    if valor is None:
        return None
    texto = str(valor).replace('%', '').strip()
    if not texto:
        return None
    try:
        numero = float(texto.replace(',', '.'))
    except ValueError:
        return None
    return None if math.isnan(numero) else numero


def normalizar_status(status):
    if not status:
        return ''
    return str(status).strip().upper()


def parse_sla(texto):
    """
    Lê o CSV de monitoramento de SLA (Titulo; Numero; Inicio; Dias; Entrega).

    Returns:
        pd.DataFrame: colunas de COLUNAS_SLA, `dias_na_fase` numérico.
    """
    dados = tabela_posicional(texto, COLUNAS_SLA, MINIMO_COLUNAS_SLA)

    dados['titulo'] = dados['titulo'].replace('', 'Sem Título')
    dados['numero_projeto'] = dados['numero_projeto'].replace('', 'N/A')
    dados['inicio_fase'] = dados['inicio_fase'].replace('', date.today().isoformat())
    dados['dias_na_fase'] = converter_coluna_decimal(dados['dias_na_fase'])

    logger.info(f"CSV de SLA interpretado: {len(dados)} projetos")
    return dados


def parse_multifase(texto):
    """Lê o CSV de controle de fases (Titulo; Projeto; Triagem; Kickoff; Estoque)."""
    dados = tabela_posicional(texto, COLUNAS_MULTIFASE, MINIMO_COLUNAS_MULTIFASE)

    for coluna in ['dias_triagem', 'dias_kickoff', 'dias_estoque']:
        dados[coluna] = converter_coluna_decimal(dados[coluna])

    logger.info(f"CSV de controle de fases interpretado: {len(dados)} projetos")
    return dados


def parse_status(texto):
    """
    Lê o CSV do relatório de status, localizando o cabeçalho pela coluna CLIENTE.

    Linhas sem cliente e sem centro de custo são descartadas.

    Raises:
        ColunaNaoEncontradaError: nenhuma linha contém a coluna CLIENTE.
    """
    dados = tabela_por_cabecalho(texto, MAPA_COLUNAS_STATUS, CAMPOS_STATUS, COLUNA_MARCADORA_STATUS)

    mask_vazio = (dados['cliente'] == '') & (dados['centro_custo'] == '')
    if mask_vazio.any():
        logger.info(f"{int(mask_vazio.sum())} linha(s) sem cliente e centro de custo descartadas")
    dados = dados[~mask_vazio].reset_index(drop=True)

    dados['status'] = dados['status'].apply(normalizar_status)
    # dtype object para manter None (apply() converteria para NaN)
    dados['percentual'] = pd.Series(
        [normalizar_percentual(valor) for valor in dados['percentual']],
        index=dados.index,
        dtype=object,
    )

    logger.info(f"CSV de status interpretado: {len(dados)} projetos")
    return dados
