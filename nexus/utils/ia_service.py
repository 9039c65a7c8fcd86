# nexus/utils/ia_service.py
"""
Geração de textos analíticos (resumo executivo, análise de risco e auditoria
de projeto) via API REST do Gemini.

Falhas nunca propagam: cada operação devolve uma mensagem fixa de erro, que
é exibida no lugar da análise.
"""
import logging
from datetime import date

import requests

from .constants import CHAVES_HORAS_BU

logger = logging.getLogger(__name__)

GEMINI_URL = 'https://generativelanguage.googleapis.com/v1beta/models/{modelo}:generateContent'
MODELO_PADRAO = 'gemini-2.5-flash'
TIMEOUT_PADRAO = 30

ERRO_SEM_CHAVE = "Erro: API Key não configurada."
ERRO_RESUMO = "Erro ao conectar com a IA."
ERRO_RISCO = "Erro ao gerar análise de risco."
ERRO_AUDITORIA = "Erro ao gerar análise detalhada."

VAZIO_RESUMO = "Não foi possível gerar o resumo."
VAZIO_RISCO = "Análise indisponível."
VAZIO_AUDITORIA = "Análise detalhada indisponível."


class IAService:
    """Cliente mínimo do endpoint generateContent."""

    def __init__(self, api_key=None, modelo=None, timeout=TIMEOUT_PADRAO, session=None):
        self.api_key = api_key or ''
        self.modelo = modelo or MODELO_PADRAO
        self.timeout = timeout
        self.session = session or requests

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config.get('GEMINI_API_KEY'),
            modelo=config.get('GEMINI_MODEL'),
            timeout=config.get('GEMINI_TIMEOUT', TIMEOUT_PADRAO),
        )

    @property
    def configurado(self):
        return bool(self.api_key)

    def _gerar(self, prompt, temperatura):
        """Envia o prompt e retorna o texto da primeira candidata ('' se não houver)."""
        payload = {
            'contents': [{'parts': [{'text': prompt}]}],
            'generationConfig': {'temperature': temperatura},
        }
        response = self.session.post(
            GEMINI_URL.format(modelo=self.modelo),
            params={'key': self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()

        candidatas = response.json().get('candidates') or []
        if not candidatas:
            return ''
        partes = (candidatas[0].get('content') or {}).get('parts') or []
        return ''.join(parte.get('text', '') for parte in partes)

    def _executar(self, prompt, temperatura, msg_vazio, msg_erro):
        if not self.configurado:
            logger.warning("Chave da API do Gemini não configurada")
            return ERRO_SEM_CHAVE
        try:
            texto = self._gerar(prompt, temperatura)
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Erro na chamada ao Gemini: {e}", exc_info=True)
            return msg_erro
        return texto or msg_vazio

    def gerar_resumo_executivo(self, contexto):
        prompt = (
            "Você é um assistente executivo sênior de uma plataforma de TI chamada Teleinfo Nexus.\n\n"
            "Analise os seguintes dados brutos do sistema e forneça um resumo executivo de 1 parágrafo "
            "(max 50 palavras) em Português do Brasil.\n"
            "Foque em anomalias ou sucessos. Use formatação Markdown (negrito) para destaques.\n\n"
            f"Dados:\n{contexto}"
        )
        return self._executar(prompt, 0.7, VAZIO_RESUMO, ERRO_RESUMO)

    def gerar_analise_risco(self, projeto):
        """Análise de risco de uma linha do relatório de status (dict ou StatusProject)."""
        dados = projeto.to_dict() if hasattr(projeto, 'to_dict') else projeto
        percentual = dados.get('percentual')
        prompt = (
            "Você é um Gerente de Projetos Sênior da Teleinfo.\n"
            "Analise o seguinte projeto (linha de CSV) e identifique riscos potenciais, "
            "sugestões de ação e um breve status.\n"
            "Seja direto e profissional.\n\n"
            "Dados do Projeto:\n"
            f"Cliente: {dados.get('cliente', '')}\n"
            f"Tipo: {dados.get('tipo_projeto', '')}\n"
            f"Produto: {dados.get('tipo_produto', '')}\n"
            f"BU: {dados.get('bu', '')}\n"
            f"Status Atual: {dados.get('status', '')}\n"
            f"Progresso: {percentual if percentual is not None else 0}%\n\n"
            "Responda em Português do Brasil, formatado em HTML simples "
            "(sem tags html/body, apenas p, strong, ul, li)."
        )
        return self._executar(prompt, 0.5, VAZIO_RISCO, ERRO_RISCO)

    def gerar_auditoria_projeto(self, projeto, hoje=None):
        """Auditoria de cronograma e horas de um projeto monitorado (dict ou DetailedProject)."""
        dados = projeto.to_dict() if hasattr(projeto, 'to_dict') else projeto
        vendidas = dados.get('horas_vendidas') or {}
        utilizadas = dados.get('horas_utilizadas') or {}

        total_vendido = sum(float(vendidas.get(chave) or 0) for chave in CHAVES_HORAS_BU)
        total_utilizado = sum(float(utilizadas.get(chave) or 0) for chave in CHAVES_HORAS_BU)
        consumo = f"{total_utilizado / total_vendido * 100:.1f}" if total_vendido > 0 else '0'

        etapas = '\n'.join(f"- {etapa.get('nome')}: {etapa.get('perc')}%" for etapa in dados.get('etapas') or [])
        hoje = (hoje or date.today()).strftime('%d/%m/%Y')

        prompt = (
            "Atue como um Auditor de Projetos. Analise detalhadamente o projeto abaixo.\n\n"
            f"Nome: {dados.get('nome', '')}\n"
            f"Datas: {dados.get('inicio', '')} até {dados.get('fim', '')}\n\n"
            f"Etapas:\n{etapas}\n\n"
            "Horas (Vendidas vs Utilizadas):\n"
            f"- Infra: {vendidas.get('infra', 0)} vs {utilizadas.get('infra', 0)}\n"
            f"- Segurança: {vendidas.get('sse', 0)} vs {utilizadas.get('sse', 0)}\n"
            f"- TI: {vendidas.get('ti', 0)} vs {utilizadas.get('ti', 0)}\n"
            f"- Automação: {vendidas.get('aut', 0)} vs {utilizadas.get('aut', 0)}\n\n"
            f"Consumo Total de Horas: {consumo}% do orçamento.\n\n"
            "Forneça:\n"
            f"1. Análise de Cronograma (está atrasado baseada na data de hoje: {hoje}?)\n"
            "2. Análise Financeira/Horas (estourou orçamento em alguma BU?)\n"
            "3. Recomendações Críticas.\n\n"
            "Responda em Português do Brasil, formatado em HTML simples."
        )
        return self._executar(prompt, 0.5, VAZIO_AUDITORIA, ERRO_AUDITORIA)
