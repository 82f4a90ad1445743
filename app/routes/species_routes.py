"""
Species routes for the Biodiversity Hub application.
Handles the searchable species list, details, add/edit with Wikipedia
pre-fill, and delete confirmation.
"""

import logging

from flask import Blueprint, render_template, request, redirect, url_for, abort
from flask_login import login_required, current_user

from app.debug_utils import debug_route, debug_log
from app.forms import SpeciesForm, ConfirmForm
from app.services import species_service
from app.services.wikipedia_service import fetch_wikipedia_summary, WikipediaLookupError
from app.supabase_client import SupabaseError
from app.utils.notifications import flash_toast, flash_backend_error, ERROR
from app.utils.species_search import filter_species

logger = logging.getLogger(__name__)

species_bp = Blueprint('species', __name__)


def _get_species_or_404(species_id):
    try:
        species = species_service.get_species(species_id)
    except SupabaseError as e:
        logger.error(f"Error loading species {species_id}: {e}")
        flash_backend_error(e)
        abort(redirect(url_for('species.species_list')))
    if species is None:
        abort(404)
    return species


def _require_author(species):
    if not species.is_authored_by(current_user.get_id()):
        abort(403)


def _prefill_from_wikipedia(form):
    """Fill description and image from the best matching Wikipedia article."""
    query = form.wiki_query.data
    if not query:
        return
    try:
        result = fetch_wikipedia_summary(query)
    except WikipediaLookupError as e:
        logger.warning(f"Wikipedia lookup failed for '{query}': {e}")
        flash_toast("Search failed", "Could not reach Wikipedia. Please try again.", ERROR)
        return
    if result is None:
        flash_toast(
            "No article found",
            "No Wikipedia article matched your search. Try a different scientific or common name.",
            ERROR,
        )
        return

    form.description.data = result.extract
    if result.thumbnail_url:
        form.image.data = result.thumbnail_url
    debug_log(f"Wikipedia pre-fill from '{result.title}'", "SPECIES")
    flash_toast("Wikipedia data loaded", "Description and image have been filled from Wikipedia.")


@species_bp.route('')
@login_required
@debug_route('SPECIES')
def species_list():
    """All species, newest first, filtered by the ?q= search text."""
    query = request.args.get('q', '')
    try:
        all_species = species_service.list_species()
    except SupabaseError as e:
        logger.error(f"Error loading species list: {e}")
        flash_backend_error(e)
        all_species = []

    return render_template(
        'species/list.html',
        title='Species List',
        species=filter_species(all_species, query),
        total_count=len(all_species),
        query=query,
        user_id=current_user.get_id(),
    )


@species_bp.route('/<int:species_id>')
@login_required
def species_detail(species_id):
    species = _get_species_or_404(species_id)
    return render_template(
        'species/detail.html',
        title=species.scientific_name,
        species=species,
        is_author=species.is_authored_by(current_user.get_id()),
    )


@species_bp.route('/add', methods=['GET', 'POST'])
@login_required
@debug_route('SPECIES')
def add_species():
    form = SpeciesForm()

    if request.method == 'POST':
        if form.wants_wikipedia_search():
            _prefill_from_wikipedia(form)
        elif form.validate_on_submit():
            payload = form.to_payload()
            try:
                species_service.create_species(current_user.get_id(), payload)
            except SupabaseError as e:
                logger.error(f"Error adding species: {e}")
                flash_backend_error(e)
            else:
                flash_toast("New species added!", f"Successfully added {payload['scientific_name']}.")
                return redirect(url_for('species.species_list'))

    return render_template('species/form.html', title='Add Species', form=form, species=None)


@species_bp.route('/<int:species_id>/edit', methods=['GET', 'POST'])
@login_required
@debug_route('SPECIES')
def edit_species(species_id):
    species = _get_species_or_404(species_id)
    _require_author(species)

    form = SpeciesForm(data=SpeciesForm.initial_data(species))
    form.submit.label.text = 'Save Changes'

    if request.method == 'POST':
        if form.wants_wikipedia_search():
            _prefill_from_wikipedia(form)
        elif form.validate_on_submit():
            payload = form.to_payload()
            try:
                species_service.update_species(species_id, payload)
            except SupabaseError as e:
                logger.error(f"Error updating species {species_id}: {e}")
                flash_backend_error(e)
            else:
                flash_toast("Species updated", f"Successfully updated {payload['scientific_name']}.")
                return redirect(url_for('species.species_detail', species_id=species_id))

    return render_template('species/form.html', title='Edit Species', form=form, species=species)


@species_bp.route('/<int:species_id>/delete', methods=['GET', 'POST'])
@login_required
@debug_route('SPECIES')
def delete_species(species_id):
    """Confirmation page on GET, single-row delete on POST."""
    species = _get_species_or_404(species_id)
    _require_author(species)

    form = ConfirmForm()
    if form.validate_on_submit():
        try:
            species_service.delete_species(species_id)
        except SupabaseError as e:
            logger.error(f"Error deleting species {species_id}: {e}")
            flash_backend_error(e)
            return redirect(url_for('species.species_detail', species_id=species_id))
        flash_toast("Species deleted", f"{species.scientific_name} has been removed.")
        return redirect(url_for('species.species_list'))

    return render_template('species/delete_confirm.html', title='Delete species?', species=species, form=form)
