from nexus.utils.agregacao import calcular_media, contar_por, contar_por_classe, top_n, truncar_titulo


def test_media_lista_vazia_e_zero():
    assert calcular_media([], 'dias') == 0.0


def test_media_nulo_como_zero():
    registros = [{'perc': 50}, {'perc': None}, {'perc': 100}]
    assert calcular_media(registros, 'perc') == 50.0
    assert calcular_media(registros, 'perc', nulo_como_zero=False) == 75.0


def test_media_somente_nulos_sem_zero():
    assert calcular_media([{'perc': None}], 'perc', nulo_como_zero=False) == 0.0


def test_contar_por_preserva_ordem_e_rotulo_vazio():
    registros = [{'bu': 'TI'}, {'bu': ''}, {'bu': 'Infra'}, {'bu': 'TI'}, {'bu': None}]
    contagem = contar_por(registros, 'bu')
    assert list(contagem.items()) == [('TI', 2), ('N/A', 2), ('Infra', 1)]


def test_contar_por_vazio():
    assert contar_por([], 'bu') == {}


def test_contar_por_classe_inclui_zeros():
    contagem = contar_por_classe([1, 2, 8], lambda x: 'alto' if x > 5 else 'baixo', ['baixo', 'medio', 'alto'])
    assert contagem == {'baixo': 2, 'medio': 0, 'alto': 1}


def test_top_n_estavel():
    registros = [('a', 3), ('b', 5), ('c', 3), ('d', 1)]
    assert top_n(registros, lambda r: r[1], 3) == [('b', 5), ('a', 3), ('c', 3)]


def test_truncar_titulo():
    assert truncar_titulo('Curto', 20) == 'Curto'
    assert truncar_titulo('Um título bem comprido demais', 20) == 'Um título bem compri...'
    assert truncar_titulo(None, 20) == ''
