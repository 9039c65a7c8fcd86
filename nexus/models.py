# -*- coding: utf-8 -*-
from . import db  # Importa a instância db de nexus/__init__.py
from datetime import datetime
import enum
import json
import math
import uuid
import pytz

# Define o fuso horário brasileiro
br_timezone = pytz.timezone('America/Sao_Paulo')

def get_brasilia_now():
    """Retorna datetime atual no fuso horário de Brasília."""
    return datetime.now(br_timezone)

def gerar_id(prefixo=None):
    """Gera um identificador curto, opcionalmente prefixado ('proj-1a2b3c4d')."""
    sufixo = uuid.uuid4().hex[:12]
    return f'{prefixo}-{sufixo}' if prefixo else sufixo

def _texto_ou_none(valor):
    if valor is None:
        return None
    if isinstance(valor, float) and math.isnan(valor):
        return None
    valor = str(valor).strip()
    return valor or None

def _float_ou_none(valor):
    if valor is None:
        return None
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(numero) else numero

class UserRole(enum.Enum):
    ADMIN = 'ADMIN'
    USER = 'USER'

class AbsenceType(enum.Enum):
    FERIAS = 'Férias'
    ATESTADO = 'Atestado Médico'
    TREINAMENTO = 'Treinamento'
    TROCA_TURNO = 'Troca de Turno'
    INTEGRACAO = 'Integração'
    FALTA = 'Falta'
    ABONAR = 'Abonar'

# --- Coleções importadas via CSV ---

class SlaProject(db.Model):
    """Projeto monitorado pelo tempo de permanência na fase atual."""
    __tablename__ = 'sla_project'

    id = db.Column(db.String(40), primary_key=True)
    posicao = db.Column(db.Integer, nullable=False, default=0)  # Ordem do arquivo importado
    titulo = db.Column(db.String(255), nullable=False, default='Sem Título')
    numero_projeto = db.Column(db.String(80), nullable=False, default='N/A')
    inicio_fase = db.Column(db.String(40))
    dias_na_fase = db.Column(db.Float, nullable=False, default=0.0)
    entrega_teleinfo = db.Column(db.String(40), nullable=True)

    def __repr__(self):
        return f'<SlaProject {self.numero_projeto} {self.dias_na_fase}d>'

    def to_dict(self):
        return {
            'id': self.id,
            'titulo': self.titulo,
            'numero_projeto': self.numero_projeto,
            'inicio_fase': self.inicio_fase,
            'dias_na_fase': self.dias_na_fase,
            'entrega_teleinfo': self.entrega_teleinfo,
        }

    @classmethod
    def from_row(cls, row, posicao):
        return cls(
            id=gerar_id('proj'),
            posicao=posicao,
            titulo=row['titulo'],
            numero_projeto=row['numero_projeto'],
            inicio_fase=row['inicio_fase'],
            dias_na_fase=float(row['dias_na_fase']),
            entrega_teleinfo=_texto_ou_none(row.get('entrega_teleinfo')),
        )

class MultiPhaseProject(db.Model):
    """Projeto com o tempo gasto em cada uma das três fases controladas."""
    __tablename__ = 'multi_phase_project'

    id = db.Column(db.String(40), primary_key=True)
    posicao = db.Column(db.Integer, nullable=False, default=0)
    titulo = db.Column(db.String(255), nullable=False, default='')
    numero_projeto = db.Column(db.String(80), nullable=False, default='')
    dias_triagem = db.Column(db.Float, nullable=False, default=0.0)
    dias_kickoff = db.Column(db.Float, nullable=False, default=0.0)
    dias_estoque = db.Column(db.Float, nullable=False, default=0.0)

    def __repr__(self):
        return f'<MultiPhaseProject {self.numero_projeto}>'

    @property
    def dias_total(self):
        return (self.dias_triagem or 0) + (self.dias_kickoff or 0) + (self.dias_estoque or 0)

    def to_dict(self):
        return {
            'id': self.id,
            'titulo': self.titulo,
            'numero_projeto': self.numero_projeto,
            'dias_triagem': self.dias_triagem,
            'dias_kickoff': self.dias_kickoff,
            'dias_estoque': self.dias_estoque,
        }

    @classmethod
    def from_row(cls, row, posicao):
        return cls(
            id=gerar_id('phase'),
            posicao=posicao,
            titulo=row['titulo'],
            numero_projeto=row['numero_projeto'],
            dias_triagem=float(row['dias_triagem']),
            dias_kickoff=float(row['dias_kickoff']),
            dias_estoque=float(row['dias_estoque']),
        )

class StatusProject(db.Model):
    """Linha do relatório de status (planilha de acompanhamento por cliente)."""
    __tablename__ = 'status_project'

    id = db.Column(db.String(40), primary_key=True)
    posicao = db.Column(db.Integer, nullable=False, default=0)
    cliente = db.Column(db.String(255), nullable=False, default='')
    tipo_projeto = db.Column(db.String(150), nullable=False, default='')
    tipo_produto = db.Column(db.String(150), nullable=False, default='')
    bu = db.Column(db.String(80), nullable=False, default='')
    centro_custo = db.Column(db.String(80), nullable=False, default='')
    status = db.Column(db.String(120), nullable=False, default='')
    percentual = db.Column(db.Float, nullable=True)  # None quando a planilha não informa

    def __repr__(self):
        return f'<StatusProject {self.cliente} {self.status}>'

    def to_dict(self):
        return {
            'id': self.id,
            'cliente': self.cliente,
            'tipo_projeto': self.tipo_projeto,
            'tipo_produto': self.tipo_produto,
            'bu': self.bu,
            'centro_custo': self.centro_custo,
            'status': self.status,
            'percentual': self.percentual,
        }

    @classmethod
    def from_row(cls, row, posicao):
        return cls(
            id=gerar_id('status'),
            posicao=posicao,
            cliente=row['cliente'],
            tipo_projeto=row['tipo_projeto'],
            tipo_produto=row['tipo_produto'],
            bu=row['bu'],
            centro_custo=row['centro_custo'],
            status=row['status'],
            percentual=_float_ou_none(row.get('percentual')),
        )

class ImportInfo(db.Model):
    """Último arquivo importado por coleção."""
    __tablename__ = 'import_info'

    chave = db.Column(db.String(40), primary_key=True)
    nome_arquivo = db.Column(db.String(255), nullable=False, default='Nenhum arquivo')
    total_registros = db.Column(db.Integer, nullable=False, default=0)
    importado_em = db.Column(db.DateTime, default=get_brasilia_now, onupdate=get_brasilia_now)

    def to_dict(self):
        return {
            'chave': self.chave,
            'nome_arquivo': self.nome_arquivo,
            'total_registros': self.total_registros,
            'importado_em': self.importado_em.isoformat() if self.importado_em else None,
        }

# --- Relatório de status: projetos monitorados e apresentação ---

class DetailedProject(db.Model):
    """Projeto acompanhado em detalhe: etapas, horas vendidas x utilizadas por BU e produção."""
    __tablename__ = 'detailed_project'

    id = db.Column(db.String(40), primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    inicio = db.Column(db.String(20))
    fim = db.Column(db.String(20))
    centro_custo = db.Column(db.String(80))
    etapas = db.Column(db.Text, nullable=False, default='[]')  # JSON [{nome, perc}]
    horas_vendidas = db.Column(db.Text, nullable=False, default='{}')  # JSON {infra, sse, ti, aut}
    horas_utilizadas = db.Column(db.Text, nullable=False, default='{}')
    dados_producao = db.Column(db.Text, nullable=True)  # JSON [{data, meta, realizado}]
    created_at = db.Column(db.DateTime, default=get_brasilia_now)
    updated_at = db.Column(db.DateTime, default=get_brasilia_now, onupdate=get_brasilia_now)

    def __repr__(self):
        return f'<DetailedProject {self.nome}>'

    def get_etapas(self):
        try:
            return json.loads(self.etapas) if self.etapas else []
        except (TypeError, ValueError):
            return []

    def set_etapas(self, etapas):
        self.etapas = json.dumps(etapas or [], ensure_ascii=False)

    def get_horas_vendidas(self):
        try:
            return json.loads(self.horas_vendidas) if self.horas_vendidas else {}
        except (TypeError, ValueError):
            return {}

    def set_horas_vendidas(self, horas):
        self.horas_vendidas = json.dumps(horas or {})

    def get_horas_utilizadas(self):
        try:
            return json.loads(self.horas_utilizadas) if self.horas_utilizadas else {}
        except (TypeError, ValueError):
            return {}

    def set_horas_utilizadas(self, horas):
        self.horas_utilizadas = json.dumps(horas or {})

    def get_dados_producao(self):
        try:
            return json.loads(self.dados_producao) if self.dados_producao else []
        except (TypeError, ValueError):
            return []

    def set_dados_producao(self, dados):
        self.dados_producao = json.dumps(dados) if dados else None

    def to_dict(self):
        return {
            'id': self.id,
            'nome': self.nome,
            'inicio': self.inicio,
            'fim': self.fim,
            'centro_custo': self.centro_custo,
            'etapas': self.get_etapas(),
            'horas_vendidas': self.get_horas_vendidas(),
            'horas_utilizadas': self.get_horas_utilizadas(),
            'dados_producao': self.get_dados_producao(),
        }

class KeyFact(db.Model):
    __tablename__ = 'key_fact'

    id = db.Column(db.String(40), primary_key=True)
    texto = db.Column(db.Text, nullable=False)
    logo_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, default=get_brasilia_now)

    def to_dict(self):
        return {'id': self.id, 'texto': self.texto, 'logo_url': self.logo_url}

class NextStep(db.Model):
    __tablename__ = 'next_step'

    id = db.Column(db.String(40), primary_key=True)
    projeto = db.Column(db.String(255), nullable=False)
    descricao = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=get_brasilia_now)

    def to_dict(self):
        return {'id': self.id, 'projeto': self.projeto, 'descricao': self.descricao}

# --- Usuários ---

class User(db.Model):
    __tablename__ = 'user'

    id = db.Column(db.String(40), primary_key=True)
    username = db.Column(db.String(150), nullable=False, unique=True, index=True)
    nome = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.USER)
    avatar = db.Column(db.String(500), nullable=True)
    password = db.Column(db.String(255), nullable=False)  # Hash (werkzeug)
    created_at = db.Column(db.DateTime, default=get_brasilia_now)

    def __repr__(self):
        return f'<User {self.username}>'

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    def to_dict(self):
        """Serializa o usuário sem a senha."""
        return {
            'id': self.id,
            'username': self.username,
            'nome': self.nome,
            'email': self.email,
            'role': self.role.value if self.role else None,
            'avatar': self.avatar,
        }

# --- Gestão de equipes (escalas) ---

class ManagerProject(db.Model):
    """Projeto de campo para o qual os funcionários são escalados."""
    __tablename__ = 'manager_project'

    id = db.Column(db.String(40), primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    centro_custo = db.Column(db.String(80), nullable=False, default='')
    numero_os = db.Column(db.String(80), nullable=False, default='')
    cliente = db.Column(db.String(255), nullable=False, default='')
    local = db.Column(db.String(255), nullable=False, default='')
    bu = db.Column(db.String(80), nullable=False)
    horas_vendidas = db.Column(db.Float, nullable=False, default=0.0)
    funcionarios_vendidos = db.Column(db.Integer, nullable=False, default=0)
    endereco = db.Column(db.String(500), nullable=False, default='')
    cor = db.Column(db.String(20), nullable=False, default='#8884d8')

    def __repr__(self):
        return f'<ManagerProject {self.nome}>'

    def to_dict(self):
        return {
            'id': self.id,
            'nome': self.nome,
            'centro_custo': self.centro_custo,
            'numero_os': self.numero_os,
            'cliente': self.cliente,
            'local': self.local,
            'bu': self.bu,
            'horas_vendidas': self.horas_vendidas,
            'funcionarios_vendidos': self.funcionarios_vendidos,
            'endereco': self.endereco,
            'cor': self.cor,
        }

class Employee(db.Model):
    __tablename__ = 'employee'

    id = db.Column(db.String(40), primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    cargo = db.Column(db.String(150), nullable=False, default='')

    def __repr__(self):
        return f'<Employee {self.nome}>'

    def to_dict(self):
        return {'id': self.id, 'nome': self.nome, 'cargo': self.cargo}

class Schedule(db.Model):
    """Alocação de um funcionário em um projeto em um dia."""
    __tablename__ = 'schedule'

    id = db.Column(db.String(40), primary_key=True)
    data = db.Column(db.String(10), nullable=False, index=True)  # YYYY-MM-DD
    projeto_id = db.Column(db.String(40), db.ForeignKey('manager_project.id', ondelete='CASCADE'), nullable=False)
    funcionario_id = db.Column(db.String(40), db.ForeignKey('employee.id', ondelete='CASCADE'), nullable=False)
    veiculo = db.Column(db.String(40), nullable=False, default='VT')
    numero_os = db.Column(db.String(80), nullable=True)
    hora_inicio = db.Column(db.String(5), nullable=False, default='07:00')
    hora_fim = db.Column(db.String(5), nullable=False, default='17:00')

    def __repr__(self):
        return f'<Schedule {self.data} {self.funcionario_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'data': self.data,
            'projeto_id': self.projeto_id,
            'funcionario_id': self.funcionario_id,
            'veiculo': self.veiculo,
            'numero_os': self.numero_os,
            'hora_inicio': self.hora_inicio,
            'hora_fim': self.hora_fim,
        }

class Absence(db.Model):
    __tablename__ = 'absence'

    id = db.Column(db.String(40), primary_key=True)
    funcionario_id = db.Column(db.String(40), db.ForeignKey('employee.id', ondelete='CASCADE'), nullable=False)
    tipo = db.Column(db.Enum(AbsenceType), nullable=False, default=AbsenceType.FERIAS)
    data_inicio = db.Column(db.String(10), nullable=False)
    data_fim = db.Column(db.String(10), nullable=False)
    motivo = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<Absence {self.funcionario_id} {self.data_inicio}..{self.data_fim}>'

    def cobre(self, data):
        """Indica se a data (YYYY-MM-DD) está dentro do período de ausência."""
        return self.data_inicio <= data <= self.data_fim

    def to_dict(self):
        return {
            'id': self.id,
            'funcionario_id': self.funcionario_id,
            'tipo': self.tipo.value if self.tipo else None,
            'data_inicio': self.data_inicio,
            'data_fim': self.data_fim,
            'motivo': self.motivo,
        }
