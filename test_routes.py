import io

from nexus.commands import seed_gestao_equipes

SLA_CSV = "Titulo;Numero;Inicio;Dias;Entrega\nProjeto X;PN-1;2024-01-01;8,5;2024-02-01\nProjeto Y;PN-2;2024-01-02;1;\n"
STATUS_CSV = "CLIENTE;BUs;STATUS;%\nAcme;BU TI;em andamento;45%\n"


def upload(client, url, conteudo, nome='dados.csv'):
    return client.post(
        url,
        data={'file': (io.BytesIO(conteudo.encode('utf-8')), nome)},
        content_type='multipart/form-data',
    )


def test_index_lista_modulos(client):
    resposta = client.get('/')
    assert resposta.status_code == 200
    assert {m['chave'] for m in resposta.get_json()['modulos']} == {'stock', 'report', 'manager', 'auth'}


def test_rotas_exigem_login(client):
    assert client.get('/stock/api/sla/stats').status_code == 401
    assert client.get('/report/api/status/stats').status_code == 401
    assert client.get('/manager/api/projects').status_code == 401


def test_login_logout(client):
    falha = client.post('/auth/api/login', json={'username': 'admin', 'password': 'errada'})
    assert falha.status_code == 401
    assert falha.get_json()['success'] is False

    ok = client.post('/auth/api/login', json={'username': 'admin@teleinfo.com', 'password': 'senha-admin'})
    assert ok.status_code == 200
    assert 'password' not in ok.get_json()['usuario']
    assert client.get('/auth/api/me').get_json()['usuario']['username'] == 'admin'

    client.post('/auth/api/logout')
    assert client.get('/auth/api/me').status_code == 401


def test_diretorio_de_usuarios_restrito_a_admin(logged_client):
    criado = logged_client.post('/auth/api/users', json={'username': 'ana', 'nome': 'Ana', 'password': '1'})
    assert criado.status_code == 201

    assert logged_client.delete('/auth/api/users/master-01').status_code == 400

    logged_client.post('/auth/api/logout')
    logged_client.post('/auth/api/login', json={'username': 'ana', 'password': '1'})
    assert logged_client.get('/auth/api/users').status_code == 403


def test_fluxo_sla(logged_client):
    resposta = upload(logged_client, '/stock/api/sla/upload', SLA_CSV, 'sla.csv')
    assert resposta.status_code == 200
    assert resposta.get_json()['total'] == 2

    painel = logged_client.get('/stock/api/sla/dashboard').get_json()
    assert painel['arquivo']['nome_arquivo'] == 'sla.csv'
    assert painel['estatisticas']['atrasados'] == 1
    assert painel['ranking'][0]['status'] == 'CRITICAL'

    atrasados = logged_client.get('/stock/api/sla/projects?filter=DELAYED').get_json()['projetos']
    assert [p['numero_projeto'] for p in atrasados] == ['PN-1']

    assert logged_client.get('/stock/api/sla/projects?filter=XYZ').status_code == 400

    cobranca = logged_client.get(f"/stock/api/sla/projects/{atrasados[0]['id']}/cobranca").get_json()
    assert 'PN-1' in cobranca['mensagem']
    assert logged_client.get('/stock/api/sla/projects/nada/cobranca').status_code == 404


def test_upload_sem_arquivo(logged_client):
    assert logged_client.post('/stock/api/sla/upload').status_code == 400
    assert logged_client.post('/report/api/status/upload').status_code == 400


def test_fluxo_status(logged_client):
    resposta = upload(logged_client, '/report/api/status/upload', STATUS_CSV)
    assert resposta.get_json()['total'] == 1

    stats = logged_client.get('/report/api/status/stats?bu=BU%20TI').get_json()
    assert stats['em_andamento'] == 1
    assert stats['media_percentual'] == 45.0

    recusado = upload(logged_client, '/report/api/status/upload', "NOME;STATUS\nX;Y\n")
    assert recusado.status_code == 400
    assert recusado.get_json()['aviso'] == "Erro: Coluna 'CLIENTE' não encontrada."


def test_analise_sem_chave_de_api(logged_client):
    upload(logged_client, '/report/api/status/upload', STATUS_CSV)
    projeto = logged_client.get('/report/api/status/projects').get_json()['projetos'][0]
    resposta = logged_client.post(f"/report/api/status/projects/{projeto['id']}/risk")
    assert resposta.get_json()['analise'] == 'Erro: API Key não configurada.'


def test_projetos_monitorados(logged_client):
    assert logged_client.post('/report/api/detailed', json={'nome': ''}).status_code == 400

    criado = logged_client.post('/report/api/detailed', json={'nome': 'Backbone'}).get_json()['projeto']
    logged_client.post('/report/api/detailed', json={**criado, 'nome': 'Backbone 2'})

    projetos = logged_client.get('/report/api/detailed').get_json()['projetos']
    assert [p['nome'] for p in projetos] == ['Backbone 2']
    assert 'indicadores' in projetos[0]

    assert logged_client.delete(f"/report/api/detailed/{criado['id']}").status_code == 200
    assert logged_client.get(f"/report/api/detailed/{criado['id']}").status_code == 404


def test_apresentacao(logged_client):
    logged_client.post('/report/api/keyfacts', json={'texto': 'Novo contrato'})
    logged_client.post('/report/api/nextsteps', json={'projeto': 'Backbone', 'descricao': 'Kickoff'})
    dados = logged_client.get('/report/api/presentation').get_json()
    assert dados['fatos_relevantes'][0]['texto'] == 'Novo contrato'
    assert dados['proximos_passos'][0]['projeto'] == 'Backbone'
    assert dados['resumo']['total'] == 0


def test_fluxo_escalas(app, logged_client):
    seed_gestao_equipes()
    criado = logged_client.post('/manager/api/schedules', json={
        'funcionario_id': '1', 'projeto_id': 'p1', 'datas': ['2024-03-04'],
    })
    assert criado.status_code == 201
    assert criado.get_json()['escalas'][0]['veiculo'] == 'VT'

    ausencia = logged_client.post('/manager/api/absences', json={
        'funcionario_id': '1', 'tipo': 'Atestado Médico', 'data_inicio': '2024-03-05', 'data_fim': '2024-03-05',
    })
    assert ausencia.status_code == 201

    bloqueado = logged_client.post('/manager/api/schedules', json={
        'funcionario_id': '1', 'projeto_id': 'p1', 'datas': ['2024-03-05'],
    })
    assert bloqueado.status_code == 400
    assert bloqueado.get_json()['success'] is False

    painel = logged_client.get('/manager/api/dashboard?date=2024-03-06').get_json()
    assert painel['total_funcionarios'] == 5
    assert painel['alocacoes_semana'] == 1

    calendario = logged_client.get('/manager/api/calendar?ano=2024&mes=3&funcionario_id=1&data=2024-03-05').get_json()
    assert calendario['ausencia_na_data']['tipo'] == 'Atestado Médico'

    assert logged_client.delete('/manager/api/projects/nao-existe').status_code == 404


def test_estoque_fisico(logged_client):
    dados = logged_client.get('/stock/api/physical').get_json()
    assert dados['itens_abaixo_minimo'] == 1


def test_upload_malformado_responde_400_e_mantem_dados(logged_client):
    upload(logged_client, '/stock/api/sla/upload', SLA_CSV)
    malformado = 'Titulo;Numero;Inicio;Dias\n"Projeto sem fim;PN-9;2024-01-01;3\n'

    resposta = upload(logged_client, '/stock/api/sla/upload', malformado)
    assert resposta.status_code == 400
    assert resposta.get_json() == {'success': False, 'error': 'Formato do arquivo CSV inválido'}
    assert logged_client.get('/stock/api/sla/stats').get_json()['estatisticas']['total'] == 2

    status = upload(logged_client, '/report/api/status/upload', 'CLIENTE;STATUS\n"Acme;FINALIZADO\n')
    assert status.status_code == 400
    assert status.get_json()['error'] == 'Formato do arquivo CSV inválido'


def test_projeto_de_campo_com_id_repetido(logged_client):
    primeiro = logged_client.post('/manager/api/projects', json={'id': 'fixo', 'nome': 'Rede', 'bu': 'BU TI'})
    segundo = logged_client.post('/manager/api/projects', json={'id': 'fixo', 'nome': 'Rede 2', 'bu': 'BU TI'})
    assert primeiro.status_code == 201
    assert segundo.status_code == 201
    ids = {primeiro.get_json()['projeto']['id'], segundo.get_json()['projeto']['id']}
    assert len(ids) == 2 and 'fixo' not in ids

    invalido = logged_client.post('/manager/api/projects', json={'nome': 'Rede 3', 'bu': 'BU X'})
    assert invalido.status_code == 400
    assert invalido.get_json()['success'] is False
