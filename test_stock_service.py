import pytest

from nexus.stock.services import StockService, formatar_dias
from nexus.models import ImportInfo
from nexus.utils.exceptions import ValidacaoError, RegistroNaoEncontradoError

SLA_CSV = (
    "Titulo;Numero;Inicio;Dias;Entrega\n"
    "Projeto X;PN-1;2024-01-01;8,5;2024-02-01\n"
    "Projeto Y;PN-2;2024-01-02;6;\n"
    "Projeto Z;PN-3;2024-01-03;2\n"
    "Projeto com nome muito longo;PN-4;2024-01-04;5\n"
)

MULTIFASE_CSV = (
    "Titulo;Projeto;Triagem;Kickoff;Estoque\n"
    "Alpha;P-1;1;2;3\n"
    "Beta;P-2;2,5;0;10\n"
    "Gama;P-3;1;1;1\n"
)


@pytest.fixture
def service(app):
    return StockService()


def test_importacao_sla_ponta_a_ponta(service):
    resultado = service.importar_sla(SLA_CSV.encode('utf-8'))
    assert resultado['total'] == 4

    projetos = service.listar_sla()
    assert [p.numero_projeto for p in projetos] == ['PN-1', 'PN-2', 'PN-3', 'PN-4']
    assert projetos[0].dias_na_fase == 8.5
    assert projetos[0].entrega_teleinfo == '2024-02-01'
    assert projetos[1].entrega_teleinfo is None

    ranking = service.ranking_sla()
    assert ranking[0]['numero_projeto'] == 'PN-1'
    assert ranking[0]['status'] == 'CRITICAL'


def test_reimportacao_substitui_colecao(service):
    service.importar_sla(SLA_CSV)
    service.importar_sla("Titulo;Numero;Inicio;Dias\nNovo;PN-9;2024-03-01;1\n")
    assert [p.numero_projeto for p in service.listar_sla()] == ['PN-9']
    assert service.info_importacao('sla')['total_registros'] == 1


def test_estatisticas_e_distribuicao(service):
    service.importar_sla(SLA_CSV)
    estatisticas = service.estatisticas_sla()
    assert estatisticas == {'total': 4, 'ok': 2, 'alerta': 1, 'atrasados': 1, 'media_dias': 5.4}

    distribuicao = service.distribuicao_sla()
    assert [d['nome'] for d in distribuicao] == ['No Prazo (<=5d)', 'Atenção (>5d)', 'Atrasado (>7d)']
    assert [d['valor'] for d in distribuicao] == [2, 1, 1]


def test_distribuicao_omite_faixas_vazias(service):
    service.importar_sla("T;N;I;D\nA;1;2024-01-01;1\nB;2;2024-01-01;2\n")
    distribuicao = service.distribuicao_sla()
    assert len(distribuicao) == 1
    assert distribuicao[0]['status'] == 'OK'


def test_estatisticas_sem_projetos(service):
    assert service.estatisticas_sla() == {'total': 0, 'ok': 0, 'alerta': 0, 'atrasados': 0, 'media_dias': 0.0}
    assert service.distribuicao_sla() == []
    assert service.ranking_sla() == []


def test_ranking_trunca_titulo(service):
    service.importar_sla(SLA_CSV)
    longo = [r for r in service.ranking_sla() if r['numero_projeto'] == 'PN-4'][0]
    assert longo['nome'] == 'Projeto com nome mui...'
    assert longo['titulo'] == 'Projeto com nome muito longo'


def test_tabela_filtros(service):
    service.importar_sla(SLA_CSV)
    assert len(service.tabela_sla('ALL')) == 4
    assert [p['numero_projeto'] for p in service.tabela_sla('WARNING')] == ['PN-2']
    atrasados = service.tabela_sla('delayed')
    assert [p['numero_projeto'] for p in atrasados] == ['PN-1']
    assert atrasados[0]['rotulo'] == 'Crítico'

    with pytest.raises(ValidacaoError):
        service.tabela_sla('OUTRO')


def test_mensagem_cobranca(service):
    service.importar_sla(SLA_CSV)
    projeto = service.listar_sla()[0]
    cobranca = service.mensagem_cobranca(projeto.id)
    assert cobranca['mensagem'] == "Olá, o projeto PN-1 está com 8.5 dias nesta fase. Por favor, verificar."

    with pytest.raises(RegistroNaoEncontradoError):
        service.mensagem_cobranca('inexistente')


def test_formatar_dias():
    assert formatar_dias(8.0) == '8'
    assert formatar_dias(8.5) == '8.5'
    assert formatar_dias(None) == '0'


def test_multifase(service):
    service.importar_multifase(MULTIFASE_CSV)
    medias = {m['fase']: m['dias'] for m in service.medias_multifase()}
    assert medias == {'Triagem': 1.5, 'Kickoff': 1.0, 'Estoque': 4.67}

    ranking = service.ranking_multifase()
    assert [r['numero_projeto'] for r in ranking] == ['P-2', 'P-1', 'P-3']
    assert ranking[0]['dias_total'] == 12.5


def test_multifase_vazio(service):
    assert all(m['dias'] == 0.0 for m in service.medias_multifase())


def test_registra_nome_do_arquivo(app, service):
    from werkzeug.datastructures import FileStorage
    import io

    arquivo = FileStorage(stream=io.BytesIO(SLA_CSV.encode('utf-8')), filename='sla_marco.csv')
    service.importar_sla(arquivo)
    info = ImportInfo.query.get('sla')
    assert info.nome_arquivo == 'sla_marco.csv'
    assert info.total_registros == 4


def test_estoque_fisico(service):
    estoque = service.estoque_fisico()
    assert estoque['total_skus'] == 5
    assert estoque['valor_total'] == 45 * 1200 + 12 * 450 + 28 * 890 + 3 * 3500 + 8 * 1800
    assert estoque['itens_abaixo_minimo'] == 1
    assert [i['nome'] for i in estoque['itens'] if i['abaixo_minimo']] == ['Cabo CAT6 (300m)']
