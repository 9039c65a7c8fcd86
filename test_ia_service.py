from unittest.mock import Mock, patch

import requests

from nexus.utils.ia_service import (
    IAService,
    ERRO_SEM_CHAVE,
    ERRO_RESUMO,
    ERRO_RISCO,
    ERRO_AUDITORIA,
    VAZIO_RISCO,
)


def resposta(texto=None, candidatas=True):
    response = Mock()
    response.raise_for_status.return_value = None
    if candidatas:
        response.json.return_value = {'candidates': [{'content': {'parts': [{'text': texto}]}}]}
    else:
        response.json.return_value = {}
    return response


PROJETO = {
    'cliente': 'Acme', 'tipo_projeto': 'Implantação', 'tipo_produto': 'Rede',
    'bu': 'BU TI', 'status': 'EM ANDAMENTO', 'percentual': None,
}

MONITORADO = {
    'nome': 'Backbone', 'inicio': '2024-01-01', 'fim': '2024-06-30',
    'etapas': [{'nome': 'Planejamento', 'perc': 100}],
    'horas_vendidas': {'infra': 100, 'sse': 0, 'ti': 0, 'aut': 0},
    'horas_utilizadas': {'infra': 50, 'sse': 0, 'ti': 0, 'aut': 0},
}


def test_sem_chave_retorna_mensagem_fixa():
    ia = IAService(api_key='')
    assert ia.gerar_resumo_executivo('dados') == ERRO_SEM_CHAVE
    assert ia.gerar_analise_risco(PROJETO) == ERRO_SEM_CHAVE
    assert ia.gerar_auditoria_projeto(MONITORADO) == ERRO_SEM_CHAVE


@patch('nexus.utils.ia_service.requests.post')
def test_resumo_executivo(mock_post):
    mock_post.return_value = resposta('**Tudo certo**')
    ia = IAService(api_key='chave', modelo='gemini-teste')

    assert ia.gerar_resumo_executivo('Projetos: 4') == '**Tudo certo**'

    args, kwargs = mock_post.call_args
    assert 'gemini-teste:generateContent' in args[0]
    assert kwargs['params'] == {'key': 'chave'}
    assert kwargs['json']['generationConfig']['temperature'] == 0.7
    assert 'Projetos: 4' in kwargs['json']['contents'][0]['parts'][0]['text']


@patch('nexus.utils.ia_service.requests.post')
def test_falhas_de_rede_viram_mensagens_fixas(mock_post):
    mock_post.side_effect = requests.ConnectionError('sem rede')
    ia = IAService(api_key='chave')
    assert ia.gerar_resumo_executivo('x') == ERRO_RESUMO
    assert ia.gerar_analise_risco(PROJETO) == ERRO_RISCO
    assert ia.gerar_auditoria_projeto(MONITORADO) == ERRO_AUDITORIA


@patch('nexus.utils.ia_service.requests.post')
def test_resposta_vazia(mock_post):
    mock_post.return_value = resposta(candidatas=False)
    assert IAService(api_key='chave').gerar_analise_risco(PROJETO) == VAZIO_RISCO


@patch('nexus.utils.ia_service.requests.post')
def test_prompt_de_auditoria(mock_post):
    mock_post.return_value = resposta('<p>ok</p>')
    IAService(api_key='chave').gerar_auditoria_projeto(MONITORADO)
    prompt = mock_post.call_args[1]['json']['contents'][0]['parts'][0]['text']
    assert 'Consumo Total de Horas: 50.0% do orçamento.' in prompt
    assert '- Planejamento: 100%' in prompt


@patch('nexus.utils.ia_service.requests.post')
def test_prompt_de_risco_sem_percentual(mock_post):
    mock_post.return_value = resposta('<p>ok</p>')
    IAService(api_key='chave').gerar_analise_risco(PROJETO)
    prompt = mock_post.call_args[1]['json']['contents'][0]['parts'][0]['text']
    assert 'Progresso: 0%' in prompt
    assert 'Cliente: Acme' in prompt


def test_from_config():
    ia = IAService.from_config({'GEMINI_API_KEY': 'k', 'GEMINI_MODEL': None})
    assert ia.configurado
    assert ia.modelo == 'gemini-2.5-flash'
