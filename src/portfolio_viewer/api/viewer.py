"""
Viewer Blueprint.

Routes:
- / - Access gate (GET form, POST submit)
- /<code> - Deep link, same as submitting the code on the gate
- /walkthrough - Current walkthrough screen (GET) and navigation actions (POST)
- /exit - Leave the walkthrough and return to an empty gate
"""
import logging
from flask import (
    Blueprint, current_app, flash, redirect, render_template,
    request, session, url_for
)

from ..access_gate import GateErrorKind, GateResult
from ..extensions import limiter
from ..models import Section, mask_access_code
from ..viewer_session import SessionStore, ViewerSession
from ..walkthrough import Action, InvalidTransition

logger = logging.getLogger(__name__)

viewer_bp = Blueprint('viewer', __name__)

SESSION_KEY = 'viewer_session_id'
STORE_KEY = 'viewer_sessions'

# Deep-link failures answer with a status matching the reason
DEEP_LINK_STATUS = {
    GateErrorKind.INVALID_FORMAT: 400,
    GateErrorKind.NOT_FOUND: 404,
    GateErrorKind.UNAVAILABLE: 503,
    GateErrorKind.BUSY: 409,
}

SCREEN_TEMPLATES = {
    Section.INTRO: 'intro.html',
    Section.MAIN_MENU: 'menu.html',
    Section.END: 'end.html',
}


def _gate_rate_limit() -> str:
    return current_app.config['GATE_RATE_LIMIT']


# ============================================================================
# Session helpers
# ============================================================================

def _store() -> SessionStore:
    return current_app.extensions[STORE_KEY]


def _current_viewer() -> ViewerSession | None:
    return _store().get(session.get(SESSION_KEY))


def _viewer_for_submit() -> ViewerSession:
    """Existing viewer session for this browser, or a fresh one."""
    viewer = _store().get_or_create(session.get(SESSION_KEY))
    session[SESSION_KEY] = viewer.session_id
    return viewer


def _render_gate(result: GateResult | None = None, code: str = '', status: int = 200):
    return render_template(
        'gate.html',
        error=result.error if result else None,
        code=code,
    ), status


# ============================================================================
# Access Gate
# ============================================================================

@viewer_bp.route('/', methods=['GET', 'POST'])
@limiter.limit(_gate_rate_limit, methods=['POST'])
def gate():
    """Access gate: enter a 6-character code."""
    if request.method == 'POST':
        code = request.form.get('code', '')
        viewer = _viewer_for_submit()
        result = viewer.open(code)

        if result.success:
            return redirect(url_for('viewer.walkthrough'))

        return _render_gate(result, code=code)

    viewer = _current_viewer()
    if viewer and viewer.is_resolved:
        return redirect(url_for('viewer.walkthrough'))

    return _render_gate()


@viewer_bp.route('/<code>')
@limiter.limit(_gate_rate_limit)
def deep_link(code):
    """Direct link with an embedded code; behaves like submitting the gate form."""
    logger.info(f"Deep link for code {mask_access_code(code)}")
    viewer = _viewer_for_submit()
    result = viewer.open(code)

    if result.success:
        return redirect(url_for('viewer.walkthrough'))

    return _render_gate(result, code=code, status=DEEP_LINK_STATUS.get(result.kind, 400))


@viewer_bp.route('/exit', methods=['POST'])
def exit_walkthrough():
    """Leave the walkthrough; the next visit starts at an empty gate."""
    viewer = _current_viewer()
    if viewer:
        viewer.reset()
    return redirect(url_for('viewer.gate'))


# ============================================================================
# Walkthrough
# ============================================================================

@viewer_bp.route('/walkthrough', methods=['GET', 'POST'])
def walkthrough():
    """Current walkthrough screen and navigation."""
    viewer = _current_viewer()
    if not viewer or not viewer.is_resolved:
        return redirect(url_for('viewer.gate'))

    controller = viewer.walkthrough

    if request.method == 'POST':
        try:
            action = Action(request.form.get('action', ''))
        except ValueError:
            flash('Unknown action', 'error')
            return redirect(url_for('viewer.walkthrough'))

        target = None
        raw_section = request.form.get('section')
        if raw_section:
            try:
                target = Section(raw_section)
            except ValueError:
                flash('Unknown section', 'error')
                return redirect(url_for('viewer.walkthrough'))

        try:
            controller.apply(action, target)
        except InvalidTransition as e:
            logger.warning(f"Rejected walkthrough action: {e}")
            flash('That step is not available from here.', 'error')

        return redirect(url_for('viewer.walkthrough'))

    template = SCREEN_TEMPLATES.get(controller.section, 'section.html')
    return render_template(
        template,
        portfolio=viewer.portfolio,
        Action=Action,
        Section=Section,
        **controller.screen_context(),
    )
