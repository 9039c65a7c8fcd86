# nexus/stock/services.py
import logging

from ..models import SlaProject, MultiPhaseProject
from ..utils.base_service import BaseService
from ..utils.repository import CollectionRepository
from ..utils.exceptions import ValidacaoError
from ..utils.csv_parser import parse_sla, parse_multifase
from ..utils.classificacao import SLAStatus, classificar_sla, cor_sla, rotulo_sla
from ..utils.agregacao import calcular_media, contar_por_classe, top_n, truncar_titulo
from ..utils.constants import (
    ROTULOS_DISTRIBUICAO_SLA,
    FILTRO_SLA_TODOS,
    FILTRO_SLA_ALERTA,
    FILTRO_SLA_ATRASADOS,
    FASES_MULTIFASE,
    CORES_FASES,
    TOP_N_PADRAO,
    LIMITE_TITULO_GRAFICO,
    COLECAO_SLA,
    COLECAO_MULTIFASE,
)

logger = logging.getLogger(__name__)

# Catálogo do almoxarifado (dados de demonstração)
ESTOQUE_FISICO = [
    {'id': '1', 'nome': 'Switch 24p', 'categoria': 'Network', 'quantidade': 45, 'nivel_minimo': 10, 'preco': 1200.0},
    {'id': '2', 'nome': 'Cabo CAT6 (300m)', 'categoria': 'Cabling', 'quantidade': 12, 'nivel_minimo': 15, 'preco': 450.0},
    {'id': '3', 'nome': 'Roteador Wi-Fi 6', 'categoria': 'Network', 'quantidade': 28, 'nivel_minimo': 10, 'preco': 890.0},
    {'id': '4', 'nome': 'Server Rack 42U', 'categoria': 'Infra', 'quantidade': 3, 'nivel_minimo': 2, 'preco': 3500.0},
    {'id': '5', 'nome': 'No-Break 2000VA', 'categoria': 'Power', 'quantidade': 8, 'nivel_minimo': 5, 'preco': 1800.0},
]

FILTROS_SLA = {
    FILTRO_SLA_TODOS: None,
    FILTRO_SLA_ALERTA: SLAStatus.WARNING,
    FILTRO_SLA_ATRASADOS: SLAStatus.CRITICAL,
}

def formatar_dias(dias):
    """8.0 -> '8', 8.5 -> '8.5'."""
    dias = float(dias or 0)
    return str(int(dias)) if dias.is_integer() else str(dias)

class StockService(BaseService):
    """Monitoramento de SLA por fase, controle de fases e almoxarifado."""

    def __init__(self, repo_sla=None, repo_multifase=None):
        super().__init__()
        self.repo_sla = repo_sla or CollectionRepository(SlaProject)
        self.repo_multifase = repo_multifase or CollectionRepository(MultiPhaseProject)

    # --- Importação ---

    def importar_sla(self, arquivo):
        """Substitui os projetos monitorados por SLA pelo conteúdo do arquivo."""
        texto, nome = self.ler_upload(arquivo)
        dados = parse_sla(texto)
        projetos = self.registros_de_dataframe(dados, SlaProject)
        self.repo_sla.substituir_todos(projetos)
        self.registrar_importacao(COLECAO_SLA, nome, len(projetos))
        logger.info(f"Importação de SLA concluída: {len(projetos)} projetos de {nome}")
        return {'success': True, 'total': len(projetos), 'nome_arquivo': nome}

    def importar_multifase(self, arquivo):
        texto, nome = self.ler_upload(arquivo)
        dados = parse_multifase(texto)
        projetos = self.registros_de_dataframe(dados, MultiPhaseProject)
        self.repo_multifase.substituir_todos(projetos)
        self.registrar_importacao(COLECAO_MULTIFASE, nome, len(projetos))
        logger.info(f"Importação de controle de fases concluída: {len(projetos)} projetos de {nome}")
        return {'success': True, 'total': len(projetos), 'nome_arquivo': nome}

    # --- Monitoramento de SLA ---

    def listar_sla(self):
        return self.repo_sla.listar()

    def estatisticas_sla(self, projetos=None):
        """Totais por severidade e média de dias na fase."""
        projetos = self.listar_sla() if projetos is None else projetos
        contagem = contar_por_classe(projetos, lambda p: classificar_sla(p.dias_na_fase), list(SLAStatus))
        return {
            'total': len(projetos),
            'ok': contagem[SLAStatus.OK],
            'alerta': contagem[SLAStatus.WARNING],
            'atrasados': contagem[SLAStatus.CRITICAL],
            'media_dias': round(calcular_media(projetos, 'dias_na_fase'), 1),
        }

    def distribuicao_sla(self, projetos=None):
        """Fatias do gráfico de pizza; severidades sem projetos são omitidas."""
        projetos = self.listar_sla() if projetos is None else projetos
        contagem = contar_por_classe(projetos, lambda p: classificar_sla(p.dias_na_fase), list(SLAStatus))
        return [
            {
                'status': status.value,
                'nome': ROTULOS_DISTRIBUICAO_SLA[status.value],
                'valor': total,
                'cor': cor_sla(status),
            }
            for status, total in contagem.items()
            if total > 0
        ]

    def ranking_sla(self, n=TOP_N_PADRAO, projetos=None):
        """Os `n` projetos há mais tempo na fase atual."""
        projetos = self.listar_sla() if projetos is None else projetos
        ranking = []
        for projeto in top_n(projetos, lambda p: p.dias_na_fase, n):
            status = classificar_sla(projeto.dias_na_fase)
            ranking.append({
                'id': projeto.id,
                'nome': truncar_titulo(projeto.titulo, LIMITE_TITULO_GRAFICO),
                'titulo': projeto.titulo,
                'numero_projeto': projeto.numero_projeto,
                'dias': projeto.dias_na_fase,
                'status': status.value,
                'cor': cor_sla(status),
            })
        return ranking

    def tabela_sla(self, filtro=FILTRO_SLA_TODOS, projetos=None):
        """Linhas da tabela de monitoramento, com severidade calculada."""
        filtro = (filtro or FILTRO_SLA_TODOS).upper()
        if filtro not in FILTROS_SLA:
            raise ValidacaoError(f"Filtro inválido: {filtro}. Use {', '.join(FILTROS_SLA)}")

        projetos = self.listar_sla() if projetos is None else projetos
        alvo = FILTROS_SLA[filtro]

        linhas = []
        for projeto in projetos:
            status = classificar_sla(projeto.dias_na_fase)
            if alvo is not None and status != alvo:
                continue
            linha = projeto.to_dict()
            linha.update({'status': status.value, 'rotulo': rotulo_sla(status), 'cor': cor_sla(status)})
            linhas.append(linha)
        return linhas

    def mensagem_cobranca(self, projeto_id):
        """Texto padrão de cobrança para o responsável pelo projeto."""
        projeto = self.repo_sla.obter_ou_erro(projeto_id)
        return {
            'projeto': projeto.to_dict(),
            'assunto': f"Cobrança - {projeto.titulo}",
            'mensagem': (
                f"Olá, o projeto {projeto.numero_projeto} está com "
                f"{formatar_dias(projeto.dias_na_fase)} dias nesta fase. Por favor, verificar."
            ),
        }

    # --- Controle de fases ---

    def listar_multifase(self):
        return self.repo_multifase.listar()

    def medias_multifase(self, projetos=None):
        """Média de dias por fase, arredondada em 2 casas."""
        projetos = self.listar_multifase() if projetos is None else projetos
        return [
            {
                'fase': nome,
                'campo': campo,
                'dias': round(calcular_media(projetos, campo), 2),
                'cor': CORES_FASES[campo],
            }
            for campo, nome in FASES_MULTIFASE.items()
        ]

    def ranking_multifase(self, n=TOP_N_PADRAO, projetos=None):
        """Projetos com maior soma de dias nas três fases."""
        projetos = self.listar_multifase() if projetos is None else projetos
        ranking = []
        for projeto in top_n(projetos, lambda p: p.dias_total, n):
            item = projeto.to_dict()
            item['nome'] = truncar_titulo(projeto.titulo, LIMITE_TITULO_GRAFICO)
            item['dias_total'] = projeto.dias_total
            ranking.append(item)
        return ranking

    # --- Almoxarifado ---

    def estoque_fisico(self, itens=None):
        itens = ESTOQUE_FISICO if itens is None else itens
        linhas = []
        for item in itens:
            linha = dict(item)
            linha['valor_total'] = item['quantidade'] * item['preco']
            linha['abaixo_minimo'] = item['quantidade'] < item['nivel_minimo']
            linhas.append(linha)
        return {
            'itens': linhas,
            'valor_total': sum(linha['valor_total'] for linha in linhas),
            'itens_abaixo_minimo': sum(1 for linha in linhas if linha['abaixo_minimo']),
            'total_skus': len(linhas),
        }
