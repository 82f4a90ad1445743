import re
from typing import Tuple

from flask import Blueprint, render_template, redirect, url_for, request, current_app
from flask_login import login_user, logout_user, current_user

from .auth_session import clear_session, load_session, store_session
from .debug_utils import debug_route, debug_auth
from .forms import SignInForm, ConfirmForm
from .supabase_client import SupabaseError, pop_code_verifier
from .utils.notifications import flash_toast, flash_backend_error, ERROR

auth = Blueprint('auth', __name__)

RATE_LIMIT_PATTERN = re.compile(r'rate limit|too many requests', re.IGNORECASE)


def classify_sign_in_error(message: str) -> Tuple[str, str]:
    """Title and description shown for a failed sign-in request."""
    if RATE_LIMIT_PATTERN.search(message or ""):
        return (
            "Too many sign-in attempts",
            "Supabase limits how many sign-in emails can be sent. Please wait a few minutes "
            "and try again, or use a different email.",
        )
    return "Something went wrong.", message


@auth.route('/login', methods=['POST'])
@debug_route('AUTH')
def login():
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    form = SignInForm()
    if not form.validate_on_submit():
        debug_auth(f"Sign-in form rejected: {form.errors}")
        return render_template('index.html', title='Sign In', form=form)

    email = form.email.data.lower()
    connector = current_app.extensions['supabase']
    try:
        connector.sign_in_with_otp(
            email,
            redirect_to=url_for('auth.callback', _external=True),
        )
    except SupabaseError as e:
        current_app.logger.warning(f"Sign-in link request failed for {email}: {e}")
        title, description = classify_sign_in_error(e.message)
        flash_toast(title, description, ERROR)
        return redirect(url_for('main.index'))

    debug_auth(f"Sign-in link sent to {email}")
    flash_toast("Check your email", "We sent you a login link. Be sure to check your spam too.")
    return redirect(url_for('main.index'))


@auth.route('/callback')
@debug_route('AUTH')
def callback():
    """Finish the email link sign-in and start a server-side session."""
    error_description = request.args.get('error_description')
    if error_description:
        flash_toast("Something went wrong.", error_description, ERROR)
        return redirect(url_for('main.index'))

    connector = current_app.extensions['supabase']
    code = request.args.get('code')
    token_hash = request.args.get('token_hash')
    try:
        if code:
            verifier = pop_code_verifier()
            if not verifier:
                flash_toast("Something went wrong.",
                            "This sign-in link was opened in a different browser. Request a new link here.", ERROR)
                return redirect(url_for('main.index'))
            auth_session = connector.exchange_code_for_session(code, verifier)
        elif token_hash:
            auth_session = connector.verify_otp(token_hash, request.args.get('type', 'email'))
        else:
            flash_toast("Something went wrong.", "The sign-in link is incomplete.", ERROR)
            return redirect(url_for('main.index'))
    except SupabaseError as e:
        current_app.logger.warning(f"Sign-in callback failed: {e}")
        flash_backend_error(e)
        return redirect(url_for('main.index'))

    store_session(auth_session)
    login_user(auth_session.user)
    debug_auth(f"User signed in: {auth_session.user.id}")
    return redirect(url_for('species.species_list'))


@auth.route('/logout', methods=['POST'])
def logout():
    form = ConfirmForm()
    if not form.validate_on_submit():
        return redirect(url_for('main.index'))

    auth_session = load_session()
    if auth_session is not None:
        try:
            current_app.extensions['supabase'].sign_out(auth_session.access_token)
        except SupabaseError as e:
            # The local session is dropped regardless
            current_app.logger.info(f"Backend sign-out failed: {e}")

    clear_session()
    logout_user()
    return redirect(url_for('main.index'))
