from datetime import date
from flask import jsonify, request, current_app
from . import manager_bp, manager_service
from .services import parse_data
from ..models import AbsenceType
from ..utils.decorators import login_required
from ..utils.exceptions import ValidacaoError, RegistroNaoEncontradoError
from ..utils.constants import BUS_VALIDAS

def _erro(e, status):
    return jsonify({'success': False, 'error': str(e)}), status

@manager_bp.route('/api/dashboard')
@login_required
def dashboard():
    """Totais, alocações da semana (segunda a domingo) e distribuição por BU"""
    referencia = request.args.get('date')
    painel = manager_service.painel(parse_data(referencia) if referencia else None)
    return jsonify({'success': True, **painel})

@manager_bp.route('/api/options')
@login_required
def opcoes():
    return jsonify({
        'success': True,
        'bus': BUS_VALIDAS,
        'tipos_ausencia': [t.value for t in AbsenceType],
    })

# --- Projetos ---

@manager_bp.route('/api/projects', methods=['GET'])
@login_required
def listar_projetos():
    return jsonify({'success': True, 'projetos': [p.to_dict() for p in manager_service.listar_projetos()]})

@manager_bp.route('/api/projects', methods=['POST'])
@login_required
def adicionar_projeto():
    """Cadastra um projeto de campo (id gerado pelo servidor)"""
    try:
        projeto = manager_service.adicionar_projeto(request.get_json(silent=True))
        return jsonify({'success': True, 'projeto': projeto.to_dict()}), 201
    except ValidacaoError as e:
        return _erro(e, 400)
    except Exception as e:
        current_app.logger.error(f"Erro ao cadastrar projeto de campo: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao cadastrar projeto'}), 500

@manager_bp.route('/api/projects/<string:projeto_id>', methods=['DELETE'])
@login_required
def remover_projeto(projeto_id):
    try:
        manager_service.remover_projeto(projeto_id)
        return jsonify({'success': True})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)
    except Exception as e:
        current_app.logger.error(f"Erro ao remover projeto {projeto_id}: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao remover projeto'}), 500

# --- Funcionários ---

@manager_bp.route('/api/employees', methods=['GET'])
@login_required
def listar_funcionarios():
    funcionarios = manager_service.listar_funcionarios()
    return jsonify({'success': True, 'funcionarios': [f.to_dict() for f in funcionarios]})

@manager_bp.route('/api/employees', methods=['POST'])
@login_required
def adicionar_funcionario():
    data = request.get_json(silent=True) or {}
    try:
        funcionario = manager_service.adicionar_funcionario(data.get('nome'), data.get('cargo'))
        return jsonify({'success': True, 'funcionario': funcionario.to_dict()}), 201
    except ValidacaoError as e:
        return _erro(e, 400)
    except Exception as e:
        current_app.logger.error(f"Erro ao cadastrar funcionário: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao cadastrar funcionário'}), 500

@manager_bp.route('/api/employees/<string:funcionario_id>', methods=['DELETE'])
@login_required
def remover_funcionario(funcionario_id):
    try:
        manager_service.remover_funcionario(funcionario_id)
        return jsonify({'success': True})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)
    except Exception as e:
        current_app.logger.error(f"Erro ao remover funcionário {funcionario_id}: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao remover funcionário'}), 500

# --- Ausências ---

@manager_bp.route('/api/absences', methods=['GET'])
@login_required
def listar_ausencias():
    return jsonify({'success': True, 'ausencias': [a.to_dict() for a in manager_service.listar_ausencias()]})

@manager_bp.route('/api/absences', methods=['POST'])
@login_required
def registrar_ausencia():
    try:
        ausencia = manager_service.registrar_ausencia(request.get_json(silent=True))
        return jsonify({'success': True, 'ausencia': ausencia.to_dict()}), 201
    except ValidacaoError as e:
        return _erro(e, 400)
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)
    except Exception as e:
        current_app.logger.error(f"Erro ao registrar ausência: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao registrar ausência'}), 500

@manager_bp.route('/api/absences/<string:ausencia_id>', methods=['DELETE'])
@login_required
def remover_ausencia(ausencia_id):
    try:
        manager_service.remover_ausencia(ausencia_id)
        return jsonify({'success': True})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)
    except Exception as e:
        current_app.logger.error(f"Erro ao remover ausência {ausencia_id}: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao remover ausência'}), 500

# --- Escalas ---

@manager_bp.route('/api/schedules', methods=['GET'])
@login_required
def listar_escalas():
    return jsonify({'success': True, 'escalas': [e.to_dict() for e in manager_service.listar_escalas()]})

@manager_bp.route('/api/schedules', methods=['POST'])
@login_required
def salvar_escala():
    """Escala um funcionário em um projeto nas datas selecionadas"""
    data = request.get_json(silent=True) or {}
    try:
        escalas = manager_service.salvar_escala(
            data.get('funcionario_id'),
            data.get('projeto_id'),
            data.get('datas') or [],
            veiculo=data.get('veiculo'),
            hora_inicio=data.get('hora_inicio'),
            hora_fim=data.get('hora_fim'),
        )
    except ValidacaoError as e:
        return _erro(e, 400)
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)
    except Exception as e:
        current_app.logger.error(f"Erro ao salvar escala: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao salvar escala'}), 500

    current_app.logger.info(f"{len(escalas)} escala(s) gravada(s) via API")
    return jsonify({'success': True, 'message': 'Escala salva!', 'escalas': [e.to_dict() for e in escalas]}), 201

@manager_bp.route('/api/schedules/<string:escala_id>', methods=['DELETE'])
@login_required
def remover_escala(escala_id):
    try:
        manager_service.remover_escala(escala_id)
        return jsonify({'success': True})
    except RegistroNaoEncontradoError as e:
        return _erro(e, 404)
    except Exception as e:
        current_app.logger.error(f"Erro ao remover escala {escala_id}: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao remover escala'}), 500

@manager_bp.route('/api/report')
@login_required
def relatorio():
    return jsonify({'success': True, 'escalas': manager_service.relatorio_escalas()})

@manager_bp.route('/api/calendar')
@login_required
def calendario():
    """Calendário do mês (ano, mes e funcionario_id opcionais)"""
    hoje = date.today()
    ano = request.args.get('ano', hoje.year, type=int)
    mes = request.args.get('mes', hoje.month, type=int)
    funcionario_id = request.args.get('funcionario_id')
    calendario = manager_service.calendario_mes(ano, mes, funcionario_id)

    if funcionario_id:
        # Data consultada pontualmente (ex.: ao clicar em um dia)
        data = request.args.get('data')
        if data:
            ausencia = manager_service.buscar_ausencia(data, funcionario_id)
            calendario['ausencia_na_data'] = ausencia.to_dict() if ausencia else None
    return jsonify({'success': True, **calendario})
