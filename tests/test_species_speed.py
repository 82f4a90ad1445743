import math

from app.services.speed_chart import bar_color, render_speed_chart, tick_step, y_axis_max
from app.utils.animal_speed import AnimalSpeed, load_animal_speeds, parse_animal_rows

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


def test_parse_rows_coerces_speed():
    data = parse_animal_rows([
        {'name': 'Cheetah', 'speed': '120', 'diet': 'Carnivore'},
        {'name': 'Sloth', 'speed': 'slow', 'diet': 'herbivore'},
        {'name': 'Ghost', 'speed': 'nan', 'diet': ''},
    ])
    assert data[0] == AnimalSpeed('Cheetah', 120.0, 'carnivore')
    assert data[1].speed == 0.0
    assert data[2].speed == 0.0
    assert not math.isnan(data[2].speed)


def test_load_bundled_csv(app):
    data = load_animal_speeds(app.config['SPECIES_SPEED_CSV'])
    assert len(data) > 25
    assert data[0].name == 'Cheetah'
    assert {d.diet for d in data} <= {'herbivore', 'omnivore', 'carnivore'}


def test_load_csv_from_path(tmp_path):
    path = tmp_path / 'animals.csv'
    path.write_text('name,speed,diet\nHorse,70,Herbivore\n', encoding='utf-8')
    assert load_animal_speeds(str(path)) == [AnimalSpeed('Horse', 70.0, 'herbivore')]


def test_y_axis_rounds_up_to_ten():
    assert y_axis_max([AnimalSpeed('a', 88, 'herbivore')]) == 90
    assert y_axis_max([AnimalSpeed('a', 120, 'carnivore')]) == 120
    assert y_axis_max([AnimalSpeed('a', 0, 'herbivore')]) == 120
    assert y_axis_max([]) == 120


def test_tick_step_limits_labels():
    assert tick_step(10) == 1
    assert tick_step(50) == 2
    assert tick_step(100) == 4


def test_bar_colors_by_diet():
    assert bar_color('herbivore') == '#22c55e'
    assert bar_color('omnivore') == '#eab308'
    assert bar_color('carnivore') == '#f97316'
    assert bar_color('insectivore') == '#888888'


def test_render_chart_png():
    png = render_speed_chart([
        AnimalSpeed('Cheetah', 120, 'carnivore'),
        AnimalSpeed('Horse', 70, 'herbivore'),
        AnimalSpeed('Ostrich', 70, 'omnivore'),
    ])
    assert png.startswith(PNG_SIGNATURE)


def test_species_speed_page(client, login):
    login()
    response = client.get('/species-speed')
    assert response.status_code == 200
    assert b'/species-speed/chart.png' in response.data


def test_species_speed_chart_route(client, login):
    login()
    response = client.get('/species-speed/chart.png')
    assert response.status_code == 200
    assert response.mimetype == 'image/png'
    assert response.data.startswith(PNG_SIGNATURE)


def test_species_speed_chart_without_data(app, client, login, tmp_path):
    empty = tmp_path / 'empty.csv'
    empty.write_text('name,speed,diet\n', encoding='utf-8')
    app.config['SPECIES_SPEED_CSV'] = str(empty)
    login()
    assert client.get('/species-speed/chart.png').status_code == 404
    assert b'No speed data is available.' in client.get('/species-speed').data


def test_species_speed_missing_csv(app, client, login, tmp_path):
    app.config['SPECIES_SPEED_CSV'] = str(tmp_path / 'missing.csv')
    login()
    assert client.get('/species-speed/chart.png').status_code == 404


def test_species_speed_unreadable_csv(app, client, login, tmp_path):
    broken = tmp_path / 'broken.csv'
    broken.write_bytes(b'name,speed,diet\nCheetah,120,\xff\xfe\n')
    app.config['SPECIES_SPEED_CSV'] = str(broken)
    login()
    assert client.get('/species-speed/chart.png').status_code == 404
    assert b'No speed data is available.' in client.get('/species-speed').data


def test_species_speed_chart_is_not_publicly_cached(client, login):
    login()
    response = client.get('/species-speed/chart.png')
    assert response.headers['Cache-Control'].startswith('private')
