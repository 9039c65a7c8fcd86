# Separador padrão dos arquivos importados
SEPARADOR_CSV = ';'

# Encodings tentados na decodificação dos uploads
ENCODINGS_UPLOAD = ['utf-8', 'cp1252', 'latin1']

# Limites de SLA (dias na fase)
SLA_DIAS_ALERTA = 5
SLA_DIAS_CRITICO = 7

# Tamanho padrão dos rankings exibidos nos gráficos
TOP_N_PADRAO = 10
LIMITE_TITULO_GRAFICO = 20

# Cores para visualização do SLA
CORES_SLA = {
    'OK': '#22c55e',
    'WARNING': '#eab308',
    'CRITICAL': '#ef4444'
}

ROTULOS_SLA = {
    'OK': 'No Prazo',
    'WARNING': 'Atenção',
    'CRITICAL': 'Crítico'
}

ROTULOS_DISTRIBUICAO_SLA = {
    'OK': 'No Prazo (<=5d)',
    'WARNING': 'Atenção (>5d)',
    'CRITICAL': 'Atrasado (>7d)'
}

# Filtros da tabela de SLA
FILTRO_SLA_TODOS = 'ALL'
FILTRO_SLA_ALERTA = 'WARNING'
FILTRO_SLA_ATRASADOS = 'DELAYED'

# Coluna usada para localizar o cabeçalho do relatório de status
COLUNA_MARCADORA_STATUS = 'CLIENTE'

# Cabeçalho externo -> campo interno (relatório de status).
# Vários cabeçalhos podem apontar para o mesmo campo; vale o primeiro encontrado.
MAPA_COLUNAS_STATUS = {
    'CLIENTE': 'cliente',
    'TIPO DE PROJETO': 'tipo_projeto',
    'TIPO': 'tipo_projeto',
    'TIPO DE PRODUTO': 'tipo_produto',
    'PRODUTO': 'tipo_produto',
    'BUs': 'bu',
    'BU': 'bu',
    'C.Custo': 'centro_custo',
    'CENTRO DE CUSTO': 'centro_custo',
    'STATUS': 'status',
    '%': 'percentual',
}

CAMPOS_STATUS = ['cliente', 'tipo_projeto', 'tipo_produto', 'bu', 'centro_custo', 'status', 'percentual']

# Layout posicional dos CSVs de SLA (cabeçalho ignorado)
COLUNAS_SLA = ['titulo', 'numero_projeto', 'inicio_fase', 'dias_na_fase', 'entrega_teleinfo']
MINIMO_COLUNAS_SLA = 4

COLUNAS_MULTIFASE = ['titulo', 'numero_projeto', 'dias_triagem', 'dias_kickoff', 'dias_estoque']
MINIMO_COLUNAS_MULTIFASE = 5
FASES_MULTIFASE = {
    'dias_triagem': 'Triagem',
    'dias_kickoff': 'Kickoff',
    'dias_estoque': 'Estoque'
}
CORES_FASES = {
    'dias_triagem': '#3b82f6',
    'dias_kickoff': '#8b5cf6',
    'dias_estoque': '#f59e0b'
}

# Categorias do relatório de status (comparação por prefixo)
STATUS_FINALIZADO = 'FINALIZADO'
STATUS_EM_ANDAMENTO = 'EM ANDAMENTO'
STATUS_PARALIZADO = 'PARALIZADO'
STATUS_NAO_INICIADO = 'NÃO INICIADO'

CORES_STATUS = {
    'FINALIZADO': '#22c55e',
    'EM ANDAMENTO': '#3b82f6',
    'PARALIZADO': '#ef4444',
    'NÃO INICIADO': '#eab308',
    'DESCONHECIDO': '#6b7280'
}

# Unidades de negócio
BU_INFRA = 'BU Infraestrutura'
BU_SEGURANCA = 'BU Segurança'
BU_TI = 'BU TI'
BU_AUTOMACAO = 'BU Automação'
BUS_VALIDAS = [BU_INFRA, BU_SEGURANCA, BU_TI, BU_AUTOMACAO]

# Cor da BU por palavra-chave (ordem importa: 'TI' casaria com outras)
CORES_BU_PALAVRA_CHAVE = [
    ('INFRAESTRUTURA', '#f97316'),
    ('SEGURANÇA', '#10b981'),
    ('TI', '#0b5ed7'),
    ('AUTOMAÇÃO', '#6b7280'),
]
COR_BU_PADRAO = '#8b949e'
# Gráfico de distribuição por BU da gestão de equipes
COR_BU_EQUIPES_PADRAO = '#8884d8'

# Texto exibido quando o campo de agrupamento está vazio
ROTULO_VAZIO = 'N/A'

# Chaves de horas por BU nos projetos monitorados
CHAVES_HORAS_BU = ['infra', 'sse', 'ti', 'aut']
ETAPAS_PADRAO = ['Planejamento', 'Execução', 'Entrega']

# Chaves de coleções importadas (nome do último arquivo)
COLECAO_SLA = 'sla'
COLECAO_MULTIFASE = 'multifase'
COLECAO_STATUS = 'status'

# Cor dos projetos de campo por BU (gestão de equipes)
CORES_BU_PROJETO = {
    BU_INFRA: '#f97316',
    BU_SEGURANCA: '#22c55e',
    BU_TI: '#3b82f6',
    BU_AUTOMACAO: '#a855f7'
}

# Escalas
VEICULO_PADRAO = 'VT'
HORA_INICIO_PADRAO = '07:00'
HORA_FIM_PADRAO = '17:00'
DIAS_SEMANA = ['Seg', 'Ter', 'Qua', 'Qui', 'Sex', 'Sáb', 'Dom']  # date.weekday()
