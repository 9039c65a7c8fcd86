from flask import jsonify, request, session, current_app, g
from . import auth_bp
from .services import AuthService
from ..utils.decorators import login_required, admin_required
from ..utils.exceptions import ValidacaoError, RegistroNaoEncontradoError

@auth_bp.route('/api/login', methods=['POST'])
def login():
    """Autentica por username ou e-mail e abre a sessão."""
    data = request.get_json(silent=True) or request.form
    usuario = AuthService().autenticar(data.get('username'), data.get('password'))
    if usuario is None:
        return jsonify({'success': False, 'error': 'Usuário ou senha inválidos'}), 401

    session.clear()
    session['user_id'] = usuario.id
    return jsonify({'success': True, 'usuario': usuario.to_dict()})

@auth_bp.route('/api/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'success': True})

@auth_bp.route('/api/me')
@login_required
def usuario_atual():
    return jsonify({'success': True, 'usuario': g.usuario.to_dict()})

@auth_bp.route('/api/users', methods=['GET'])
@admin_required()
def listar_usuarios():
    usuarios = AuthService().listar_usuarios()
    return jsonify({'success': True, 'usuarios': [u.to_dict() for u in usuarios]})

@auth_bp.route('/api/users', methods=['POST'])
@admin_required()
def adicionar_usuario():
    try:
        usuario = AuthService().adicionar_usuario(request.get_json(silent=True))
        return jsonify({'success': True, 'usuario': usuario.to_dict()}), 201
    except ValidacaoError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"Erro ao criar usuário: {str(e)}", exc_info=True)
        return jsonify({'success': False, 'error': 'Erro ao criar usuário'}), 500

@auth_bp.route('/api/users/<string:usuario_id>', methods=['DELETE'])
@admin_required()
def remover_usuario(usuario_id):
    try:
        AuthService().remover_usuario(usuario_id)
        return jsonify({'success': True})
    except ValidacaoError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except RegistroNaoEncontradoError as e:
        return jsonify({'success': False, 'error': str(e)}), 404
