# nexus/utils/repository.py
"""
Acesso às coleções persistidas.

Cada coleção é lida e gravada por inteiro através de um repositório; os
serviços recebem o repositório em vez de consultar o banco diretamente.
"""
import logging

from .. import db
from .exceptions import RegistroNaoEncontradoError

logger = logging.getLogger(__name__)


class CollectionRepository:
    """Repositório de uma coleção (um modelo SQLAlchemy)."""

    def __init__(self, model, ordem=None):
        self.model = model
        self.nome = model.__tablename__
        self.ordem = ordem if ordem is not None else self._ordem_padrao(model)

    @staticmethod
    def _ordem_padrao(model):
        if hasattr(model, 'posicao'):
            return [model.posicao]
        return []

    def listar(self):
        query = self.model.query
        if self.ordem:
            query = query.order_by(*self.ordem)
        return query.all()

    def filtrar(self, **criterios):
        query = self.model.query.filter_by(**criterios)
        if self.ordem:
            query = query.order_by(*self.ordem)
        return query.all()

    def obter(self, registro_id):
        return db.session.get(self.model, registro_id)

    def obter_ou_erro(self, registro_id):
        registro = self.obter(registro_id)
        if registro is None:
            raise RegistroNaoEncontradoError(self.nome, registro_id)
        return registro

    def contar(self):
        return self.model.query.count()

    def salvar(self, registro):
        try:
            db.session.add(registro)
            db.session.commit()
            return registro
        except Exception:
            db.session.rollback()
            logger.error(f"Erro ao salvar registro em {self.nome}", exc_info=True)
            raise

    def salvar_varios(self, registros):
        try:
            db.session.add_all(registros)
            db.session.commit()
            return registros
        except Exception:
            db.session.rollback()
            logger.error(f"Erro ao salvar registros em {self.nome}", exc_info=True)
            raise

    def remover(self, registro_id):
        registro = self.obter_ou_erro(registro_id)
        try:
            db.session.delete(registro)
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.error(f"Erro ao remover {registro_id} de {self.nome}", exc_info=True)
            raise

    def remover_onde(self, *condicoes):
        """Remove os registros que satisfazem as condições, sem commit."""
        return self.model.query.filter(*condicoes).delete(synchronize_session=False)

    def substituir_todos(self, registros):
        """Substitui a coleção inteira em uma única transação (reimportação)."""
        try:
            removidos = self.model.query.delete()
            db.session.add_all(registros)
            db.session.commit()
            logger.info(f"Coleção {self.nome} substituída: {removidos} removidos, {len(registros)} inseridos")
            return registros
        except Exception:
            db.session.rollback()
            logger.error(f"Erro ao substituir coleção {self.nome}", exc_info=True)
            raise

    def limpar(self):
        return self.substituir_todos([])
