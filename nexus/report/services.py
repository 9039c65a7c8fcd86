# nexus/report/services.py
"""
Relatório de status executivo: importação da planilha de status, indicadores
filtráveis, projetos monitorados em detalhe e o resumo de apresentação.
"""
import logging

from ..models import StatusProject, DetailedProject, KeyFact, NextStep, gerar_id
from ..utils.base_service import BaseService
from ..utils.repository import CollectionRepository
from ..utils.exceptions import ColunaNaoEncontradaError, ValidacaoError
from ..utils.csv_parser import parse_status, converter_decimal
from ..utils.classificacao import CategoriaStatus, classificar_status, cor_status, cor_bu
from ..utils.agregacao import calcular_media, contar_por, contar_por_classe
from ..utils.ia_service import IAService
from ..utils.constants import CHAVES_HORAS_BU, ETAPAS_PADRAO, COLECAO_STATUS

logger = logging.getLogger(__name__)

# Categoria -> chave exposta nos indicadores
CHAVES_CATEGORIA = {
    CategoriaStatus.FINALIZADO: 'finalizados',
    CategoriaStatus.EM_ANDAMENTO: 'em_andamento',
    CategoriaStatus.PARALIZADO: 'paralizados',
    CategoriaStatus.NAO_INICIADO: 'nao_iniciados',
}

def horas_vazias():
    return {chave: 0.0 for chave in CHAVES_HORAS_BU}

def normalizar_horas(horas):
    horas = horas or {}
    return {chave: converter_decimal(horas.get(chave)) for chave in CHAVES_HORAS_BU}

def normalizar_etapas(etapas):
    normalizadas = []
    for etapa in etapas or []:
        nome = str(etapa.get('nome') or '').strip()
        if not nome:
            continue
        perc = min(max(converter_decimal(etapa.get('perc')), 0.0), 100.0)
        normalizadas.append({'nome': nome, 'perc': perc})
    return normalizadas

def indicadores_projeto(projeto):
    """Horas totais, consumo do orçamento, estouro por BU e progresso médio das etapas."""
    dados = projeto.to_dict() if hasattr(projeto, 'to_dict') else projeto
    vendidas = normalizar_horas(dados.get('horas_vendidas'))
    utilizadas = normalizar_horas(dados.get('horas_utilizadas'))

    total_vendido = sum(vendidas.values())
    total_utilizado = sum(utilizadas.values())
    etapas = dados.get('etapas') or []

    return {
        'horas_vendidas_total': total_vendido,
        'horas_utilizadas_total': total_utilizado,
        'consumo_percentual': round(total_utilizado / total_vendido * 100, 1) if total_vendido > 0 else 0.0,
        'estouro_por_bu': {chave: utilizadas[chave] > vendidas[chave] for chave in CHAVES_HORAS_BU},
        'progresso_medio': round(calcular_media(etapas, 'perc'), 1),
    }

class ReportService(BaseService):
    """Serviço do módulo de relatório de status."""

    def __init__(self, repo_status=None, repo_monitorados=None, repo_fatos=None, repo_passos=None, ia=None):
        super().__init__()
        self.repo_status = repo_status or CollectionRepository(StatusProject)
        self.repo_monitorados = repo_monitorados or CollectionRepository(DetailedProject, ordem=[DetailedProject.created_at])
        self.repo_fatos = repo_fatos or CollectionRepository(KeyFact, ordem=[KeyFact.created_at])
        self.repo_passos = repo_passos or CollectionRepository(NextStep, ordem=[NextStep.created_at])
        self.ia = ia or IAService()

    # --- Planilha de status ---

    def importar_status(self, arquivo):
        """
        Substitui os projetos do relatório pelo conteúdo do arquivo.

        Sem a coluna CLIENTE nada é gravado; o resultado traz o aviso para o usuário.
        """
        texto, nome = self.ler_upload(arquivo)
        try:
            dados = parse_status(texto)
        except ColunaNaoEncontradaError as e:
            logger.warning(f"Importação de status recusada ({nome}): {e}")
            return {'success': False, 'total': 0, 'nome_arquivo': nome, 'aviso': str(e)}

        projetos = self.registros_de_dataframe(dados, StatusProject)
        self.repo_status.substituir_todos(projetos)
        self.registrar_importacao(COLECAO_STATUS, nome, len(projetos))
        logger.info(f"Importação de status concluída: {len(projetos)} projetos de {nome}")
        return {'success': True, 'total': len(projetos), 'nome_arquivo': nome}

    def listar_status(self, status=None, bu=None):
        return self.filtrar_status(self.repo_status.listar(), status, bu)

    @staticmethod
    def filtrar_status(projetos, status=None, bu=None):
        """Filtros exatos por status e por BU; filtro vazio não restringe."""
        return [
            p for p in projetos
            if (not status or p.status == status) and (not bu or p.bu == bu)
        ]

    @staticmethod
    def contar_categorias(projetos):
        contagem = contar_por_classe(
            projetos, lambda p: classificar_status(p.status), list(CHAVES_CATEGORIA)
        )
        resultado = {chave: contagem[categoria] for categoria, chave in CHAVES_CATEGORIA.items()}
        resultado['total'] = len(projetos)
        return resultado

    def estatisticas_status(self, status=None, bu=None):
        """Indicadores do painel para o recorte filtrado, mais as opções de filtro."""
        todos = self.repo_status.listar()
        filtrados = self.filtrar_status(todos, status, bu)

        estatisticas = self.contar_categorias(filtrados)
        estatisticas['media_percentual'] = round(calcular_media(filtrados, 'percentual'), 1)
        estatisticas['grafico_status'] = [
            {'nome': nome, 'valor': valor, 'cor': cor_status(nome)}
            for nome, valor in contar_por(filtrados, 'status').items()
        ]
        estatisticas['grafico_bu'] = [
            {'nome': nome, 'valor': valor, 'cor': cor_bu(nome)}
            for nome, valor in contar_por(filtrados, 'bu').items()
        ]
        estatisticas['opcoes'] = {
            'status': sorted({p.status for p in todos}),
            'bus': sorted({p.bu for p in todos}),
        }
        estatisticas['filtros'] = {'status': status or None, 'bu': bu or None}
        return estatisticas

    def analisar_risco(self, projeto_id):
        projeto = self.repo_status.obter_ou_erro(projeto_id)
        return self.ia.gerar_analise_risco(projeto)

    def resumo_executivo(self):
        """Resumo em linguagem natural dos indicadores atuais."""
        estatisticas = self.estatisticas_status()
        contexto = (
            f"Projetos no relatório: {estatisticas['total']}. "
            f"Finalizados: {estatisticas['finalizados']}, em andamento: {estatisticas['em_andamento']}, "
            f"paralizados: {estatisticas['paralizados']}, não iniciados: {estatisticas['nao_iniciados']}. "
            f"Progresso médio: {estatisticas['media_percentual']}%. "
            f"Projetos monitorados em detalhe: {self.repo_monitorados.contar()}."
        )
        return self.ia.gerar_resumo_executivo(contexto)

    # --- Projetos monitorados ---

    def listar_monitorados(self):
        return self.repo_monitorados.listar()

    def obter_monitorado(self, projeto_id):
        return self.repo_monitorados.obter_ou_erro(projeto_id)

    @staticmethod
    def modelo_novo_projeto():
        """Formulário inicial de um projeto monitorado."""
        return {
            'id': '',
            'nome': '',
            'inicio': '',
            'fim': '',
            'centro_custo': '',
            'etapas': [{'nome': nome, 'perc': 0} for nome in ETAPAS_PADRAO],
            'horas_vendidas': horas_vazias(),
            'horas_utilizadas': horas_vazias(),
            'dados_producao': [],
        }

    def salvar_monitorado(self, dados):
        """
        Cria (sem id) ou substitui (com id existente) um projeto monitorado.

        Raises:
            ValidacaoError: nome ausente
            RegistroNaoEncontradoError: id informado inexistente
        """
        dados = dados or {}
        nome = (dados.get('nome') or '').strip()
        if not nome:
            raise ValidacaoError('Nome obrigatório')

        projeto_id = dados.get('id')
        if projeto_id:
            projeto = self.repo_monitorados.obter_ou_erro(projeto_id)
            logger.info(f"Atualizando projeto monitorado {projeto_id}")
        else:
            projeto = DetailedProject(id=gerar_id('det'))
            logger.info(f"Criando projeto monitorado '{nome}'")

        projeto.nome = nome
        projeto.inicio = dados.get('inicio') or None
        projeto.fim = dados.get('fim') or None
        projeto.centro_custo = dados.get('centro_custo') or None
        etapas = dados.get('etapas')
        projeto.set_etapas(normalizar_etapas(etapas) if etapas is not None else
                           [{'nome': n, 'perc': 0.0} for n in ETAPAS_PADRAO])
        projeto.set_horas_vendidas(normalizar_horas(dados.get('horas_vendidas')))
        projeto.set_horas_utilizadas(normalizar_horas(dados.get('horas_utilizadas')))
        projeto.set_dados_producao(dados.get('dados_producao'))
        return self.repo_monitorados.salvar(projeto)

    def remover_monitorado(self, projeto_id):
        self.repo_monitorados.remover(projeto_id)

    def auditar_monitorado(self, projeto_id):
        return self.ia.gerar_auditoria_projeto(self.obter_monitorado(projeto_id))

    # --- Fatos relevantes e próximos passos ---

    def listar_fatos(self):
        return self.repo_fatos.listar()

    def adicionar_fato(self, texto, logo_url=None):
        texto = (texto or '').strip()
        if not texto:
            raise ValidacaoError('Texto do fato relevante é obrigatório')
        return self.repo_fatos.salvar(KeyFact(id=gerar_id('fact'), texto=texto, logo_url=logo_url or None))

    def remover_fato(self, fato_id):
        self.repo_fatos.remover(fato_id)

    def listar_proximos_passos(self):
        return self.repo_passos.listar()

    def adicionar_proximo_passo(self, projeto, descricao):
        projeto = (projeto or '').strip()
        descricao = (descricao or '').strip()
        if not projeto or not descricao:
            raise ValidacaoError('Projeto e descrição são obrigatórios')
        return self.repo_passos.salvar(NextStep(id=gerar_id('step'), projeto=projeto, descricao=descricao))

    def remover_proximo_passo(self, passo_id):
        self.repo_passos.remover(passo_id)

    # --- Apresentação ---

    def resumo_apresentacao(self):
        """Conteúdo dos slides do status report integrado."""
        monitorados = []
        for projeto in self.listar_monitorados():
            item = projeto.to_dict()
            item['indicadores'] = indicadores_projeto(item)
            monitorados.append(item)

        return {
            'resumo': self.contar_categorias(self.repo_status.listar()),
            'arquivo': self.info_importacao(COLECAO_STATUS),
            'fatos_relevantes': [f.to_dict() for f in self.listar_fatos()],
            'projetos_monitorados': monitorados,
            'proximos_passos': [p.to_dict() for p in self.listar_proximos_passos()],
        }
