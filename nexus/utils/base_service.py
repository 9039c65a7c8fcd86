import logging
from werkzeug.datastructures import FileStorage

from .. import db
from ..models import ImportInfo
from .csv_parser import decodificar_upload

logger = logging.getLogger(__name__)

class BaseService:
    """Classe base dos serviços que importam e consultam coleções."""

    def ler_upload(self, arquivo):
        """
        Lê o conteúdo de um upload (FileStorage, bytes ou str) como texto.

        Returns:
            tuple: (texto, nome_arquivo)
        """
        if isinstance(arquivo, FileStorage):
            nome = arquivo.filename or 'upload.csv'
            conteudo = arquivo.read()
        else:
            nome = 'upload.csv'
            conteudo = arquivo
        return decodificar_upload(conteudo or b''), nome

    def registrar_importacao(self, chave, nome_arquivo, total_registros):
        """Guarda o nome do último arquivo importado para a coleção."""
        try:
            info = db.session.get(ImportInfo, chave)
            if info is None:
                info = ImportInfo(chave=chave)
                db.session.add(info)
            info.nome_arquivo = nome_arquivo
            info.total_registros = total_registros
            db.session.commit()
            logger.info(f"Importação registrada para {chave}: {nome_arquivo} ({total_registros} registros)")
            return info
        except Exception:
            db.session.rollback()
            logger.error(f"Erro ao registrar importação de {chave}", exc_info=True)
            raise

    def info_importacao(self, chave):
        info = db.session.get(ImportInfo, chave)
        if info is None:
            return {'chave': chave, 'nome_arquivo': 'Nenhum arquivo', 'total_registros': 0, 'importado_em': None}
        return info.to_dict()

    def registros_de_dataframe(self, dados, model):
        """Instancia `model` para cada linha do DataFrame, preservando a ordem do arquivo."""
        return [model.from_row(row, posicao) for posicao, row in enumerate(dados.to_dict(orient='records'))]
