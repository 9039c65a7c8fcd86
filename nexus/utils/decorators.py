from functools import wraps
from flask import jsonify, session, current_app, g
from .. import db
from ..models import User

def usuario_da_sessao():
    """Usuário autenticado na sessão atual, ou None."""
    user_id = session.get('user_id')
    if not user_id:
        return None
    return db.session.get(User, user_id)

def login_required(f):
    """
    Exige sessão autenticada; o usuário fica disponível em `g.usuario`.

    Usage:
        @stock_bp.route('/api/sla/stats')
        @login_required
        def sla_stats():
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        usuario = usuario_da_sessao()
        if usuario is None:
            current_app.logger.warning("Acesso sem sessão autenticada")
            return jsonify({'success': False, 'error': 'Autenticação necessária'}), 401
        g.usuario = usuario
        return f(*args, **kwargs)
    return decorated_function

def admin_required(message="Acesso restrito à área administrativa."):
    """
    Decorador para rotas administrativas (perfil ADMIN).

    Args:
        message (str): Mensagem de erro personalizada
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            usuario = usuario_da_sessao()
            if usuario is None:
                return jsonify({'success': False, 'error': 'Autenticação necessária'}), 401
            if not usuario.is_admin:
                current_app.logger.warning(f"Usuário {usuario.username} tentou acessar área administrativa")
                return jsonify({'success': False, 'error': message}), 403
            g.usuario = usuario
            return f(*args, **kwargs)
        return decorated_function
    return decorator
