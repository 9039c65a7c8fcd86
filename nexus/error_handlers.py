from flask import jsonify, current_app
import pandas as pd

from .utils.exceptions import NexusError

def handle_errors(e):
    """Converte exceções não tratadas nas rotas em resposta JSON."""
    status = 500
    if isinstance(e, NexusError):
        msg = str(e)
        status = e.status_code
    elif isinstance(e, pd.errors.ParserError):
        msg = "Formato do arquivo CSV inválido"
        status = 400
    elif isinstance(e, FileNotFoundError):
        msg = "Arquivo de dados não encontrado"
        status = 404
    else:
        msg = f"Erro inesperado: {str(e)}"

    if status >= 500:
        current_app.logger.error(msg, exc_info=True)
    else:
        current_app.logger.warning(msg)
    return jsonify({'success': False, 'error': msg}), status

def register_error_handlers(app):
    app.register_error_handler(NexusError, handle_errors)
    app.register_error_handler(pd.errors.ParserError, handle_errors)
    app.register_error_handler(FileNotFoundError, handle_errors)
