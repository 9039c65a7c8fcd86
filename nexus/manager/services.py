# nexus/manager/services.py
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

import holidays

from ..models import ManagerProject, Employee, Schedule, Absence, AbsenceType, gerar_id
from ..utils.base_service import BaseService
from ..utils.repository import CollectionRepository
from ..utils.exceptions import ValidacaoError
from ..utils.agregacao import contar_por
from ..utils.constants import (
    BUS_VALIDAS,
    CORES_BU_PROJETO,
    COR_BU_EQUIPES_PADRAO,
    VEICULO_PADRAO,
    HORA_INICIO_PADRAO,
    HORA_FIM_PADRAO,
    DIAS_SEMANA,
)

logger = logging.getLogger(__name__)

def parse_data(valor, campo='data') -> date:
    """Converte 'YYYY-MM-DD' (ou date) em date; ValidacaoError se inválida."""
    if isinstance(valor, date):
        return valor
    try:
        return datetime.strptime(str(valor or '').strip(), '%Y-%m-%d').date()
    except ValueError:
        raise ValidacaoError(f"Data inválida em '{campo}': {valor}")

def inicio_da_semana(referencia: date) -> date:
    """Segunda-feira da semana de `referencia`."""
    return referencia - timedelta(days=referencia.weekday())

class ManagerService(BaseService):
    """Escalas de funcionários em projetos de campo."""

    def __init__(self, repo_projetos=None, repo_funcionarios=None, repo_escalas=None, repo_ausencias=None):
        super().__init__()
        self.repo_projetos = repo_projetos or CollectionRepository(ManagerProject, ordem=[ManagerProject.nome])
        self.repo_funcionarios = repo_funcionarios or CollectionRepository(Employee, ordem=[Employee.nome])
        self.repo_escalas = repo_escalas or CollectionRepository(Schedule, ordem=[Schedule.data, Schedule.hora_inicio])
        self.repo_ausencias = repo_ausencias or CollectionRepository(Absence, ordem=[Absence.data_inicio])

    # --- Projetos ---

    def listar_projetos(self):
        return self.repo_projetos.listar()

    def adicionar_projeto(self, dados):
        dados = dados or {}
        nome = (dados.get('nome') or '').strip()
        bu = (dados.get('bu') or '').strip()
        if not nome:
            raise ValidacaoError('Nome do projeto é obrigatório')
        if bu not in BUS_VALIDAS:
            raise ValidacaoError(f"BU inválida: '{bu}'. Opções: {', '.join(BUS_VALIDAS)}")

        try:
            horas = float(dados.get('horas_vendidas') or 0)
            funcionarios = int(dados.get('funcionarios_vendidos') or 0)
        except (TypeError, ValueError):
            raise ValidacaoError('Horas e funcionários vendidos devem ser numéricos')

        projeto = ManagerProject(
            id=gerar_id('mp'),
            nome=nome,
            centro_custo=dados.get('centro_custo') or '',
            numero_os=dados.get('numero_os') or '',
            cliente=dados.get('cliente') or '',
            local=dados.get('local') or '',
            bu=bu,
            horas_vendidas=horas,
            funcionarios_vendidos=funcionarios,
            endereco=dados.get('endereco') or '',
            cor=CORES_BU_PROJETO.get(bu, COR_BU_EQUIPES_PADRAO),
        )
        logger.info(f"Projeto de campo '{nome}' cadastrado ({bu})")
        return self.repo_projetos.salvar(projeto)

    def remover_projeto(self, projeto_id):
        self.repo_projetos.obter_ou_erro(projeto_id)
        self.repo_escalas.remover_onde(Schedule.projeto_id == projeto_id)
        self.repo_projetos.remover(projeto_id)

    # --- Funcionários ---

    def listar_funcionarios(self):
        return self.repo_funcionarios.listar()

    def adicionar_funcionario(self, nome, cargo=''):
        nome = (nome or '').strip()
        if not nome:
            raise ValidacaoError('Nome do funcionário é obrigatório')
        funcionario = Employee(id=gerar_id('emp'), nome=nome, cargo=(cargo or '').strip())
        return self.repo_funcionarios.salvar(funcionario)

    def remover_funcionario(self, funcionario_id):
        self.repo_funcionarios.obter_ou_erro(funcionario_id)
        self.repo_escalas.remover_onde(Schedule.funcionario_id == funcionario_id)
        self.repo_ausencias.remover_onde(Absence.funcionario_id == funcionario_id)
        self.repo_funcionarios.remover(funcionario_id)

    # --- Ausências ---

    def listar_ausencias(self):
        return self.repo_ausencias.listar()

    def registrar_ausencia(self, dados):
        dados = dados or {}
        funcionario_id = dados.get('funcionario_id')
        if not funcionario_id or not dados.get('data_inicio') or not dados.get('data_fim'):
            raise ValidacaoError('Campos obrigatórios.')
        self.repo_funcionarios.obter_ou_erro(funcionario_id)

        inicio = parse_data(dados['data_inicio'], 'data_inicio')
        fim = parse_data(dados['data_fim'], 'data_fim')
        if fim < inicio:
            raise ValidacaoError('A data final deve ser igual ou posterior à inicial')

        try:
            tipo = AbsenceType(dados.get('tipo') or AbsenceType.FERIAS.value)
        except ValueError:
            raise ValidacaoError(f"Tipo de ausência inválido: {dados.get('tipo')}")

        ausencia = Absence(
            id=gerar_id('abs'),
            funcionario_id=funcionario_id,
            tipo=tipo,
            data_inicio=inicio.isoformat(),
            data_fim=fim.isoformat(),
            motivo=dados.get('motivo') or None,
        )
        logger.info(f"Ausência registrada para {funcionario_id}: {tipo.value} de {inicio} a {fim}")
        return self.repo_ausencias.salvar(ausencia)

    def remover_ausencia(self, ausencia_id):
        self.repo_ausencias.remover(ausencia_id)

    def buscar_ausencia(self, data, funcionario_id) -> Optional[Absence]:
        """Ausência do funcionário que cobre a data, se houver."""
        if not funcionario_id:
            return None
        data = parse_data(data).isoformat()
        for ausencia in self.repo_ausencias.filtrar(funcionario_id=funcionario_id):
            if ausencia.cobre(data):
                return ausencia
        return None

    # --- Escalas ---

    def listar_escalas(self):
        return self.repo_escalas.listar()

    def salvar_escala(self, funcionario_id, projeto_id, datas: List[str], veiculo=VEICULO_PADRAO,
                      hora_inicio=HORA_INICIO_PADRAO, hora_fim=HORA_FIM_PADRAO):
        """
        Escala o funcionário no projeto nas datas informadas.

        Escalas anteriores do mesmo funcionário nessas datas são substituídas.

        Raises:
            ValidacaoError: campos ausentes ou data coberta por ausência
        """
        if not funcionario_id or not projeto_id or not datas:
            raise ValidacaoError('Preencha todos os campos e selecione dias.')

        funcionario = self.repo_funcionarios.obter_ou_erro(funcionario_id)
        projeto = self.repo_projetos.obter_ou_erro(projeto_id)
        datas = sorted({parse_data(d).isoformat() for d in datas})

        conflitos = []
        for data in datas:
            ausencia = self.buscar_ausencia(data, funcionario_id)
            if ausencia is not None:
                conflitos.append(f"{data} ({ausencia.tipo.value})")
        if conflitos:
            raise ValidacaoError(f"{funcionario.nome} está ausente em: {', '.join(conflitos)}")

        novas = [
            Schedule(
                id=gerar_id('sch'),
                data=data,
                projeto_id=projeto.id,
                funcionario_id=funcionario.id,
                veiculo=veiculo or VEICULO_PADRAO,
                numero_os=projeto.numero_os or None,
                hora_inicio=hora_inicio or HORA_INICIO_PADRAO,
                hora_fim=hora_fim or HORA_FIM_PADRAO,
            )
            for data in datas
        ]

        substituidas = self.repo_escalas.remover_onde(
            Schedule.funcionario_id == funcionario.id,
            Schedule.data.in_(datas),
        )
        self.repo_escalas.salvar_varios(novas)
        logger.info(f"Escala salva: {funcionario.nome} em {projeto.nome}, {len(novas)} dia(s), {substituidas} substituída(s)")
        return novas

    def remover_escala(self, escala_id):
        self.repo_escalas.remover(escala_id)

    # --- Painel e relatórios ---

    def grafico_semanal(self, referencia: Optional[date] = None):
        """Alocações por projeto em cada dia da semana (segunda a domingo)."""
        segunda = inicio_da_semana(referencia or date.today())
        dias = [segunda + timedelta(days=i) for i in range(7)]
        projetos = self.listar_projetos()

        escalas = [e for e in self.listar_escalas() if dias[0].isoformat() <= e.data <= dias[-1].isoformat()]

        pontos = []
        for dia in dias:
            do_dia = [e for e in escalas if e.data == dia.isoformat()]
            pontos.append({
                'nome': DIAS_SEMANA[dia.weekday()],
                'data': dia.isoformat(),
                'fim_de_semana': dia.weekday() >= 5,
                'alocacoes': {p.id: sum(1 for e in do_dia if e.projeto_id == p.id) for p in projetos},
            })

        return {
            'inicio': dias[0].isoformat(),
            'fim': dias[-1].isoformat(),
            'dias': pontos,
            'projetos': [{'id': p.id, 'nome': p.nome, 'cor': p.cor} for p in projetos],
            'total_semana': len(escalas),
        }

    def distribuicao_bu(self):
        projetos = self.listar_projetos()
        return [
            {'nome': bu, 'valor': total, 'cor': CORES_BU_PROJETO.get(bu, COR_BU_EQUIPES_PADRAO)}
            for bu, total in contar_por(projetos, 'bu').items()
        ]

    def painel(self, referencia: Optional[date] = None):
        semanal = self.grafico_semanal(referencia)
        return {
            'total_projetos': self.repo_projetos.contar(),
            'total_funcionarios': self.repo_funcionarios.contar(),
            'alocacoes_semana': semanal['total_semana'],
            'grafico_semanal': semanal,
            'distribuicao_bu': self.distribuicao_bu(),
        }

    def relatorio_escalas(self):
        """Escalas em ordem cronológica, com nomes de funcionário e projeto."""
        funcionarios = {f.id: f.nome for f in self.listar_funcionarios()}
        projetos = {p.id: p.nome for p in self.listar_projetos()}

        linhas = []
        for escala in sorted(self.listar_escalas(), key=lambda e: e.data):
            linha = escala.to_dict()
            linha['funcionario'] = funcionarios.get(escala.funcionario_id, '')
            linha['projeto'] = projetos.get(escala.projeto_id, '')
            linha['horario'] = f"{escala.hora_inicio} - {escala.hora_fim}"
            linhas.append(linha)
        return linhas

    def calendario_mes(self, ano: int, mes: int, funcionario_id=None):
        """Dias do mês com fim de semana, feriado nacional e ausência do funcionário."""
        if not 1 <= mes <= 12:
            raise ValidacaoError(f"Mês inválido: {mes}")

        feriados = holidays.Brazil(years=ano)
        ausencias = self.repo_ausencias.filtrar(funcionario_id=funcionario_id) if funcionario_id else []
        escalados = set()
        if funcionario_id:
            escalados = {e.data for e in self.repo_escalas.filtrar(funcionario_id=funcionario_id)}

        dias = []
        for numero in range(1, calendar.monthrange(ano, mes)[1] + 1):
            dia = date(ano, mes, numero)
            data = dia.isoformat()
            ausencia = next((a for a in ausencias if a.cobre(data)), None)
            dias.append({
                'data': data,
                'dia': numero,
                'dia_semana': DIAS_SEMANA[dia.weekday()],
                'fim_de_semana': dia.weekday() >= 5,
                'feriado': feriados.get(dia),
                'ausencia': ausencia.tipo.value if ausencia else None,
                'escalado': data in escalados,
            })
        return {'ano': ano, 'mes': mes, 'dias': dias}
