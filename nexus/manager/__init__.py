from flask import Blueprint
from .services import ManagerService

manager_bp = Blueprint('manager', __name__, url_prefix='/manager')

manager_service = ManagerService()

from . import routes
