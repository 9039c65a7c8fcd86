from flask import jsonify, request, current_app
import pandas as pd
from . import report_bp
from .services import ReportService, indicadores_projeto
from ..utils.decorators import login_required
from ..utils.ia_service import IAService
from ..utils.exceptions import ValidacaoError, RegistroNaoEncontradoError
from ..utils.constants import COLECAO_STATUS

def _service():
    return ReportService(ia=IAService.from_config(current_app.config))

def _erro(e, status):
    return jsonify({'success': False, 'error': str(e)}), status

# --- Planilha de status ---

@report_bp.route('/api/status/upload', methods=['POST'])
@login_required
def upload_status():
    """Importa a planilha de status (cabeçalho localizado pela coluna CLIENTE)"""
    if 'file' not in request.files or request.files['file'].filename == '':
        return jsonify({'success': False, 'error': 'Nenhum arquivo enviado'}), 400
    arquivo = request.files['file']
    try:
        current_app.logger.info(f"Importando relatório de status: {arquivo.filename}")
        resultado = _service().importar_status(arquivo)
        return jsonify(resultado), (200 if resultado['success'] else 400)
    except pd.errors.ParserError:
        raise
    except Exception as e:
        current_app.logger.error(f"Erro ao importar relatório de status: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': f'Erro ao importar arquivo: {str(e)}'}), 500

@report_bp.route('/api/status/stats')
@login_required
def status_stats():
    """Indicadores do painel (filtros opcionais: status e bu)"""
    service = _service()
    estatisticas = service.estatisticas_status(request.args.get('status'), request.args.get('bu'))
    return jsonify({'success': True, 'arquivo': service.info_importacao(COLECAO_STATUS), **estatisticas})

@report_bp.route('/api/status/projects')
@login_required
def status_projects():
    projetos = _service().listar_status(request.args.get('status'), request.args.get('bu'))
    return jsonify({'success': True, 'projetos': [p.to_dict() for p in projetos]})

@report_bp.route('/api/status/projects/<string:projeto_id>/risk', methods=['POST'])
@login_required
def status_risk(projeto_id):
    try:
        return jsonify({'success': True, 'analise': _service().analisar_risco(projeto_id)})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)

@report_bp.route('/api/summary/ai', methods=['POST'])
@login_required
def resumo_executivo():
    return jsonify({'success': True, 'resumo': _service().resumo_executivo()})

# --- Projetos monitorados ---

@report_bp.route('/api/detailed', methods=['GET'])
@login_required
def listar_monitorados():
    projetos = []
    for projeto in _service().listar_monitorados():
        item = projeto.to_dict()
        item['indicadores'] = indicadores_projeto(item)
        projetos.append(item)
    return jsonify({'success': True, 'projetos': projetos})

@report_bp.route('/api/detailed/new', methods=['GET'])
@login_required
def modelo_monitorado():
    return jsonify({'success': True, 'projeto': ReportService.modelo_novo_projeto()})

@report_bp.route('/api/detailed/<string:projeto_id>', methods=['GET'])
@login_required
def obter_monitorado(projeto_id):
    try:
        item = _service().obter_monitorado(projeto_id).to_dict()
        item['indicadores'] = indicadores_projeto(item)
        return jsonify({'success': True, 'projeto': item})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)

@report_bp.route('/api/detailed', methods=['POST'])
@login_required
def salvar_monitorado():
    """Cria (sem id) ou atualiza (com id) um projeto monitorado"""
    try:
        projeto = _service().salvar_monitorado(request.get_json(silent=True))
        return jsonify({'success': True, 'message': 'Projeto salvo com sucesso!', 'projeto': projeto.to_dict()})
    except ValidacaoError as e:
        return _erro(e, 400)
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)
    except Exception as e:
        current_app.logger.error(f"Erro ao salvar projeto monitorado: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao salvar projeto'}), 500

@report_bp.route('/api/detailed/<string:projeto_id>', methods=['DELETE'])
@login_required
def remover_monitorado(projeto_id):
    try:
        _service().remover_monitorado(projeto_id)
        return jsonify({'success': True})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)

@report_bp.route('/api/detailed/<string:projeto_id>/audit', methods=['POST'])
@login_required
def auditar_monitorado(projeto_id):
    try:
        return jsonify({'success': True, 'analise': _service().auditar_monitorado(projeto_id)})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)

# --- Fatos relevantes e próximos passos ---

@report_bp.route('/api/keyfacts', methods=['GET'])
@login_required
def listar_fatos():
    return jsonify({'success': True, 'fatos': [f.to_dict() for f in _service().listar_fatos()]})

@report_bp.route('/api/keyfacts', methods=['POST'])
@login_required
def adicionar_fato():
    data = request.get_json(silent=True) or {}
    try:
        fato = _service().adicionar_fato(data.get('texto'), data.get('logo_url'))
        return jsonify({'success': True, 'fato': fato.to_dict()}), 201
    except ValidacaoError as e:
        return _erro(e, 400)

@report_bp.route('/api/keyfacts/<string:fato_id>', methods=['DELETE'])
@login_required
def remover_fato(fato_id):
    try:
        _service().remover_fato(fato_id)
        return jsonify({'success': True})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)

@report_bp.route('/api/nextsteps', methods=['GET'])
@login_required
def listar_proximos_passos():
    passos = _service().listar_proximos_passos()
    return jsonify({'success': True, 'proximos_passos': [p.to_dict() for p in passos]})

@report_bp.route('/api/nextsteps', methods=['POST'])
@login_required
def adicionar_proximo_passo():
    data = request.get_json(silent=True) or {}
    try:
        passo = _service().adicionar_proximo_passo(data.get('projeto'), data.get('descricao'))
        return jsonify({'success': True, 'proximo_passo': passo.to_dict()}), 201
    except ValidacaoError as e:
        return _erro(e, 400)

@report_bp.route('/api/nextsteps/<string:passo_id>', methods=['DELETE'])
@login_required
def remover_proximo_passo(passo_id):
    try:
        _service().remover_proximo_passo(passo_id)
        return jsonify({'success': True})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)

# --- Apresentação ---

@report_bp.route('/api/presentation')
@login_required
def apresentacao():
    return jsonify({'success': True, **_service().resumo_apresentacao()})
