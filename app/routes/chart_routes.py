"""Species speed chart page and its PNG rendering."""

import csv
import logging

from flask import Blueprint, render_template, current_app, send_file, abort
from flask_login import login_required
from io import BytesIO

from app.utils.animal_speed import load_animal_speeds

logger = logging.getLogger(__name__)

charts_bp = Blueprint('charts', __name__)


def _load_chart_data():
    path = current_app.config['SPECIES_SPEED_CSV']
    try:
        return load_animal_speeds(path)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Could not read species speed CSV {path}: {e}")
        return []


@charts_bp.route('')
@login_required
def species_speed():
    data = _load_chart_data()
    return render_template('species_speed/index.html', title='Species Speed', animal_count=len(data))


@charts_bp.route('/chart.png')
@login_required
def species_speed_chart():
    """Bar chart PNG (404 when there is nothing to draw)."""
    from app.services.speed_chart import render_speed_chart

    data = _load_chart_data()
    if not data:
        abort(404)

    png = render_speed_chart(data)
    response = send_file(BytesIO(png), mimetype='image/png')
    response.headers['Cache-Control'] = 'private, max-age=3600'
    return response
