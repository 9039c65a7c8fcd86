import math

import pandas as pd
import pytest

from nexus.utils.csv_parser import (
    converter_decimal,
    decodificar_upload,
    ler_linhas,
    normalizar_percentual,
    parse_multifase,
    parse_sla,
    parse_status,
    construir_indice_colunas,
)
from nexus.utils.constants import MAPA_COLUNAS_STATUS
from nexus.utils.exceptions import ColunaNaoEncontradaError

STATUS_CSV = (
    "Relatorio;;;;\n"
    "CLIENTE;TIPO DE PROJETO;BUs;STATUS;%\n"
    "Acme;Implantação;BU TI;em andamento;45%\n"
    ";;;;\n"
)

SLA_CSV = (
    "Titulo;Numero;Inicio;Dias;Entrega\r\n"
    "Projeto X;PN-1;2024-01-01;8,5;2024-02-01\r\n"
    "Projeto Y;PN-2;2024-01-03;3.0;\r\n"
)


def test_status_end_to_end():
    dados = parse_status(STATUS_CSV)
    assert len(dados) == 1
    linha = dados.iloc[0]
    assert linha['cliente'] == 'Acme'
    assert linha['tipo_projeto'] == 'Implantação'
    assert linha['bu'] == 'BU TI'
    assert linha['status'] == 'EM ANDAMENTO'
    assert linha['percentual'] == 45.0
    # Colunas ausentes no arquivo ficam vazias
    assert linha['tipo_produto'] == ''
    assert linha['centro_custo'] == ''


def test_bom_nao_altera_resultado():
    sem_bom = parse_status(STATUS_CSV)
    com_bom = parse_status('\ufeff' + STATUS_CSV)
    assert sem_bom.to_dict(orient='records') == com_bom.to_dict(orient='records')

    sla = parse_sla(SLA_CSV)
    sla_bom = parse_sla('\ufeff' + SLA_CSV)
    assert sla.to_dict(orient='records') == sla_bom.to_dict(orient='records')


def test_status_sem_coluna_cliente():
    with pytest.raises(ColunaNaoEncontradaError) as exc:
        parse_status("NOME;STATUS\nAcme;FINALIZADO\n")
    assert str(exc.value) == "Erro: Coluna 'CLIENTE' não encontrada."


def test_status_descarta_linha_sem_cliente_e_centro_custo():
    texto = (
        "CLIENTE;C.Custo;STATUS;%\n"
        "Acme;100;FINALIZADO;100\n"
        ";;PARALIZADO;10\n"
        ";200;NÃO INICIADO;\n"
    )
    dados = parse_status(texto)
    assert dados['centro_custo'].tolist() == ['100', '200']
    assert dados['percentual'].iloc[1] is None


def test_status_colunas_reordenadas():
    texto = "%;STATUS;CLIENTE\n7,5 %;Finalizado ;Beta\n"
    dados = parse_status(texto)
    assert dados.iloc[0]['cliente'] == 'Beta'
    assert dados.iloc[0]['status'] == 'FINALIZADO'
    assert dados.iloc[0]['percentual'] == 7.5


def test_indice_colunas_ignora_caixa_e_prioriza_primeiro_alias():
    indice = construir_indice_colunas(['cliente', 'BU', 'BUs'], MAPA_COLUNAS_STATUS)
    assert indice['cliente'] == 0
    assert indice['bu'] == 2


def test_decimal_com_virgula_igual_a_ponto():
    assert converter_decimal('7,5') == converter_decimal('7.5') == 7.5
    assert converter_decimal(' 12 ') == 12.0
    assert converter_decimal('abc') == 0.0
    assert converter_decimal('') == 0.0
    assert converter_decimal(None) == 0.0
    assert converter_decimal(float('nan')) == 0.0


def test_normalizar_percentual():
    assert normalizar_percentual('45%') == 45.0
    assert normalizar_percentual(' 7,5 % ') == 7.5
    assert normalizar_percentual('') is None
    assert normalizar_percentual('%') is None
    assert normalizar_percentual('n/d') is None
    assert normalizar_percentual(None) is None


def test_sla_posicional():
    dados = parse_sla(SLA_CSV)
    assert dados['titulo'].tolist() == ['Projeto X', 'Projeto Y']
    assert dados['dias_na_fase'].tolist() == [8.5, 3.0]
    assert dados['entrega_teleinfo'].tolist() == ['2024-02-01', '']


def test_sla_valores_padrao_e_linhas_curtas():
    texto = "cabecalho\n;;;x\nA;B\n\n   \n"
    dados = parse_sla(texto)
    assert len(dados) == 1
    linha = dados.iloc[0]
    assert linha['titulo'] == 'Sem Título'
    assert linha['numero_projeto'] == 'N/A'
    assert len(linha['inicio_fase']) == 10
    assert linha['dias_na_fase'] == 0.0


def test_multifase():
    texto = "Titulo;Projeto;Triagem;Kickoff;Estoque\nAlpha;P-1;1,5;2;x\nCurta;P-2;1;2\n"
    dados = parse_multifase(texto)
    assert len(dados) == 1
    assert dados.iloc[0]['dias_triagem'] == 1.5
    assert dados.iloc[0]['dias_kickoff'] == 2.0
    assert dados.iloc[0]['dias_estoque'] == 0.0


def test_ler_linhas_quebras_mistas():
    cabecalho, linhas = ler_linhas("a;b\r\n1;2\r3;4\n;\n")
    assert cabecalho == ['a', 'b']
    assert linhas == [['1', '2'], ['3', '4']]


def test_ler_linhas_texto_vazio():
    assert ler_linhas('') == ([], [])


def test_decodificar_upload_cp1252():
    texto = 'CLIENTE;STATUS\nJoão;NÃO INICIADO\n'
    assert decodificar_upload(texto.encode('cp1252')) == texto
    assert decodificar_upload(texto.encode('utf-8')) == texto
    assert decodificar_upload(texto) == texto


def test_percentual_nan_nao_aparece():
    dados = parse_status("CLIENTE;%\nAcme;abc\n")
    valor = dados.iloc[0]['percentual']
    assert valor is None or (isinstance(valor, float) and math.isnan(valor))


def test_status_exemplo_com_aliases_tipo_e_produto():
    dados = parse_status("CLIENTE;TIPO;PRODUTO;BUs;C.Custo;STATUS;%\nAcme;A;B;BU TI;10.01;Em Andamento;45%\n")
    assert len(dados) == 1
    linha = dados.iloc[0]
    assert linha['cliente'] == 'Acme'
    assert linha['tipo_projeto'] == 'A'
    assert linha['tipo_produto'] == 'B'
    assert linha['bu'] == 'BU TI'
    assert linha['centro_custo'] == '10.01'
    assert linha['status'] == 'EM ANDAMENTO'
    assert linha['percentual'] == 45


def test_celula_entre_aspas_com_separador():
    texto = (
        'CLIENTE;TIPO DE PROJETO;BUs;C.Custo;STATUS;%\n'
        '"Acme; Filial SP";Implantação;BU TI;10;FINALIZADO;100\n'
    )
    linha = parse_status(texto).iloc[0]
    assert linha['cliente'] == 'Acme; Filial SP'
    assert linha['tipo_projeto'] == 'Implantação'
    assert linha['bu'] == 'BU TI'
    assert linha['centro_custo'] == '10'
    assert linha['status'] == 'FINALIZADO'
    assert linha['percentual'] == 100.0


def test_sla_titulo_entre_aspas():
    dados = parse_sla('Titulo;Numero;Inicio;Dias\n"Rede; fase 2";PN-7;2024-01-01;4,5\n')
    assert dados['titulo'].tolist() == ['Rede; fase 2']
    assert dados['dias_na_fase'].tolist() == [4.5]


def test_aspas_nao_fechadas_geram_erro_de_formato():
    with pytest.raises(pd.errors.ParserError):
        parse_status('CLIENTE;STATUS\n"Acme;FINALIZADO\n')
