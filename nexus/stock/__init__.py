from flask import Blueprint
from .services import StockService

stock_bp = Blueprint('stock', __name__, url_prefix='/stock')

stock_service = StockService()

from . import routes
