from flask import jsonify, request, current_app
import pandas as pd
from . import stock_bp, stock_service
from ..utils.decorators import login_required
from ..utils.constants import COLECAO_SLA, COLECAO_MULTIFASE, FILTRO_SLA_TODOS, TOP_N_PADRAO

def _arquivo_da_requisicao():
    """Retorna o arquivo enviado ou uma resposta de erro (arquivo, erro)."""
    if 'file' not in request.files:
        return None, (jsonify({'success': False, 'error': 'Nenhum arquivo enviado'}), 400)
    arquivo = request.files['file']
    if arquivo.filename == '':
        return None, (jsonify({'success': False, 'error': 'Nenhum arquivo selecionado'}), 400)
    return arquivo, None

@stock_bp.route('/api/sla/upload', methods=['POST'])
@login_required
def upload_sla():
    """Importa o CSV de SLA, substituindo os projetos atuais"""
    arquivo, erro = _arquivo_da_requisicao()
    if erro:
        return erro
    try:
        current_app.logger.info(f"Importando CSV de SLA: {arquivo.filename}")
        return jsonify(stock_service.importar_sla(arquivo))
    except pd.errors.ParserError:
        raise
    except Exception as e:
        current_app.logger.error(f"Erro ao importar CSV de SLA: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': f'Erro ao importar arquivo: {str(e)}'}), 500

@stock_bp.route('/api/sla/dashboard')
@login_required
def sla_dashboard():
    """Estatísticas, distribuição e ranking de SLA em uma única chamada"""
    projetos = stock_service.listar_sla()
    n = request.args.get('n', TOP_N_PADRAO, type=int)
    return jsonify({
        'success': True,
        'arquivo': stock_service.info_importacao(COLECAO_SLA),
        'estatisticas': stock_service.estatisticas_sla(projetos),
        'distribuicao': stock_service.distribuicao_sla(projetos),
        'ranking': stock_service.ranking_sla(n, projetos),
    })

@stock_bp.route('/api/sla/stats')
@login_required
def sla_stats():
    return jsonify({'success': True, 'estatisticas': stock_service.estatisticas_sla()})

@stock_bp.route('/api/sla/distribution')
@login_required
def sla_distribution():
    return jsonify({'success': True, 'distribuicao': stock_service.distribuicao_sla()})

@stock_bp.route('/api/sla/ranking')
@login_required
def sla_ranking():
    n = request.args.get('n', TOP_N_PADRAO, type=int)
    return jsonify({'success': True, 'ranking': stock_service.ranking_sla(n)})

@stock_bp.route('/api/sla/projects')
@login_required
def sla_projects():
    """Tabela de monitoramento (filtro: ALL, WARNING ou DELAYED)"""
    filtro = request.args.get('filter', FILTRO_SLA_TODOS)
    # ValidacaoError segue para o error handler (400)
    linhas = stock_service.tabela_sla(filtro)
    return jsonify({'success': True, 'filtro': filtro.upper(), 'projetos': linhas})

@stock_bp.route('/api/sla/projects/<string:projeto_id>/cobranca')
@login_required
def sla_cobranca(projeto_id):
    return jsonify({'success': True, **stock_service.mensagem_cobranca(projeto_id)})

@stock_bp.route('/api/multiphase/upload', methods=['POST'])
@login_required
def upload_multifase():
    arquivo, erro = _arquivo_da_requisicao()
    if erro:
        return erro
    try:
        current_app.logger.info(f"Importando CSV de controle de fases: {arquivo.filename}")
        return jsonify(stock_service.importar_multifase(arquivo))
    except pd.errors.ParserError:
        raise
    except Exception as e:
        current_app.logger.error(f"Erro ao importar CSV de fases: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': f'Erro ao importar arquivo: {str(e)}'}), 500

@stock_bp.route('/api/multiphase/dashboard')
@login_required
def multifase_dashboard():
    projetos = stock_service.listar_multifase()
    n = request.args.get('n', TOP_N_PADRAO, type=int)
    return jsonify({
        'success': True,
        'arquivo': stock_service.info_importacao(COLECAO_MULTIFASE),
        'total': len(projetos),
        'medias': stock_service.medias_multifase(projetos),
        'ranking': stock_service.ranking_multifase(n, projetos),
        'projetos': [p.to_dict() for p in projetos],
    })

@stock_bp.route('/api/physical')
@login_required
def estoque_fisico():
    return jsonify({'success': True, **stock_service.estoque_fisico()})
