"""
Wizard routes.

A single endpoint drives the three-step flow:
1. API Setup      (setup_api)
2. Matching       (match_assignments, proceed_to_canvas)
3. Canvas Update  (update_canvas)
plus reset_wizard / back_to_step, and the AJAX side channels
(update_date, chat, suggest) that answer with JSON.
"""
import logging

from flask import Blueprint, current_app, jsonify, make_response, render_template, request

from canvas_wizard.config import config, AI_PROVIDERS, DEFAULT_AI_PROVIDER
from canvas_wizard.errors import WizardError, ValidationError, ConfigurationError
from canvas_wizard.session_store import WizardContext, coerce_step
from canvas_wizard.services.ai_gateway import AIGateway
from canvas_wizard.services.audit import audit_log, get_audit_logs
from canvas_wizard.services.canvas_service import update_canvas_assignments
from canvas_wizard.services.dates import normalize_due_date
from canvas_wizard.services.schedule_service import generate_fall_2025_schedule

logger = logging.getLogger(__name__)

wizard_bp = Blueprint('wizard', __name__)

STEP_TITLES = {
    1: "API Setup",
    2: "Match Assignments",
    3: "Update Canvas",
}

# Step to land on when an action fails; other actions keep the step they started on
FAILURE_STEPS = {
    'match_assignments': 2,
}


def _gateway_for(session):
    if not session.has_ai_key:
        raise ConfigurationError("No API keys configured")
    return AIGateway.from_keys(session.gemini_key, session.claude_key, session.ai_provider)


# ═══════════════════════════════════════════════════════
# FORM ACTIONS
# ═══════════════════════════════════════════════════════

def setup_api(ctx, form):
    s = ctx.session
    s.gemini_key = form.get('gemini_api_key', '').strip()
    s.claude_key = form.get('claude_api_key', '').strip()
    provider = form.get('ai_provider', DEFAULT_AI_PROVIDER)
    s.ai_provider = provider if provider in AI_PROVIDERS else DEFAULT_AI_PROVIDER

    if not s.has_ai_key:
        raise ValidationError("Please provide at least one API key")

    s.current_step = 2
    ctx.success = "API keys configured successfully!"
    configured = [name for name, key in (('gemini', s.gemini_key), ('claude', s.claude_key)) if key]
    audit_log("SETUP_API", f"providers={','.join(configured)} preferred={s.ai_provider}")


def match_assignments(ctx, form):
    s = ctx.session
    s.assignment_list = form.get('assignment_list', '')
    if not s.assignment_list.strip():
        raise ValidationError("Please paste your Canvas assignment list")
    if not s.has_ai_key:
        raise ConfigurationError("No AI API keys configured. Please go back to Step 1.")

    schedule = generate_fall_2025_schedule()
    s.due_dates = schedule

    gateway = _gateway_for(s)
    matches = gateway.match_assignments(s.assignment_list, schedule)
    s.matches = matches
    s.current_step = 2
    ctx.success = f"Fall 2025 schedule generated! {len(matches)} assignments matched with dates."
    audit_log("MATCH_ASSIGNMENTS", f"matches={len(matches)}")


def proceed_to_canvas(ctx, form):
    if not ctx.session.matches:
        raise ValidationError("No matches available. Please complete the matching step first.")
    ctx.session.current_step = 3


def update_canvas(ctx, form):
    s = ctx.session
    canvas_url = form.get('canvas_url', '').strip()
    api_token = form.get('api_token', '').strip()
    course_id = form.get('course_id', '').strip()

    if not canvas_url or not api_token or not course_id:
        raise ValidationError("Please provide Canvas URL, API token, and Course ID")
    if not s.matches:
        raise ValidationError("No matches available. Please complete the matching step first.")

    updated_count, errors = update_canvas_assignments(canvas_url, api_token, course_id, s.matches)
    s.canvas_errors = errors
    s.current_step = 3
    ctx.success = f"Canvas update completed! Updated {updated_count} assignments successfully."
    audit_log("UPDATE_CANVAS", f"course={course_id} updated={updated_count} errors={len(errors)}")


def reset_wizard(ctx, form):
    ctx.reset()
    ctx.success = "Wizard reset. Starting fresh!"
    audit_log("RESET_WIZARD")


def back_to_step(ctx, form):
    target = coerce_step(form.get('target_step', '1'), default=None)
    if target is None:
        raise ValidationError(f"Invalid step: {form.get('target_step')}")
    ctx.session.current_step = target
    ctx.success = f"Moved back to step {target}"


ACTION_HANDLERS = {
    'setup_api': setup_api,
    'match_assignments': match_assignments,
    'proceed_to_canvas': proceed_to_canvas,
    'update_canvas': update_canvas,
    'reset_wizard': reset_wizard,
    'back_to_step': back_to_step,
}


def dispatch_action(ctx, action, form):
    """Run one form action; failures become ctx.error and pin the step."""
    if not action:
        return
    start_step = ctx.session.current_step
    try:
        handler = ACTION_HANDLERS.get(action)
        if handler is None:
            raise ValidationError(f"Unknown action: {action}")
        handler(ctx, form)
    except WizardError as e:
        ctx.error = str(e)
        ctx.session.current_step = FAILURE_STEPS.get(action, start_step)
        logger.info("Action %s failed: %s", action, e)
    except Exception as e:
        logger.exception("Unexpected error in action %s", action)
        ctx.error = f"Unexpected error: {e}"
        ctx.session.current_step = FAILURE_STEPS.get(action, start_step)


# ═══════════════════════════════════════════════════════
# AJAX SIDE CHANNELS
# ═══════════════════════════════════════════════════════

def ajax_update_date(ctx, form):
    try:
        index = int(form.get('index', -1))
    except (TypeError, ValueError):
        index = -1
    new_date = form.get('date', '').strip()
    matches = ctx.session.matches

    if index < 0 or not new_date or index >= len(matches):
        return {"error": "Invalid parameters"}, 400

    try:
        formatted = normalize_due_date(new_date)
    except ValueError:
        return {"error": f"Invalid date: {new_date}"}, 400

    matches[index]['matched_due_date'] = formatted
    return {"success": True, "matched_due_date": formatted}, 200


def ajax_chat(ctx, form):
    s = ctx.session
    if not s.has_ai_key:
        return {"error": "No API keys configured"}, 400
    question = form.get('question', '').strip()
    if not question:
        return {"error": "Please enter a question"}, 400

    response = _gateway_for(s).chat(question, s.assignment_list, s.due_dates, s.matches)
    return {"response": response}, 200


def ajax_suggest(ctx, form):
    s = ctx.session
    if not s.has_ai_key:
        return {"error": "No API keys configured"}, 400
    assignment_list = form.get('assignment_list', '') or s.assignment_list
    if not assignment_list.strip():
        return {"error": "Please paste your Canvas assignment list"}, 400

    schedule = s.due_dates or generate_fall_2025_schedule()
    response = _gateway_for(s).suggest(assignment_list, schedule)
    return {"response": response}, 200


AJAX_HANDLERS = {
    'update_date': ajax_update_date,
    'chat': ajax_chat,
    'suggest': ajax_suggest,
}

# AJAX requests that change the session; the others never save it
AJAX_SESSION_WRITES = frozenset({'update_date'})


def dispatch_ajax(ctx, name, form):
    """Run one AJAX handler and return (payload, status); never raises."""
    handler = AJAX_HANDLERS.get(name)
    if handler is None:
        return {"error": f"Unknown request: {name}"}, 400
    try:
        return handler(ctx, form)
    except ConfigurationError as e:
        return {"error": str(e)}, 400
    except WizardError as e:
        logger.warning("AJAX %s failed: %s", name, e)
        return {"error": str(e)}, 502
    except Exception as e:
        logger.exception("Unexpected error in AJAX %s", name)
        return {"error": f"Unexpected error: {e}"}, 500


# ═══════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════

def _load_context():
    store = current_app.config['WIZARD_SESSION_STORE']
    return WizardContext.load(store, request.cookies.get(config.session_cookie))


def _finish(response, ctx, save=True):
    if save:
        ctx.save()
    response.set_cookie(config.session_cookie, ctx.session_id, httponly=True, samesite='Lax')
    return response


@wizard_bp.route('/', methods=['GET', 'POST'])
def wizard():
    """Render the current step, applying a form action or AJAX request first."""
    ctx = _load_context()

    if request.method == 'POST':
        ajax = request.form.get('ajax')
        if ajax:
            payload, status = dispatch_ajax(ctx, ajax, request.form)
            response = jsonify(payload)
            response.status_code = status
            return _finish(response, ctx, save=ajax in AJAX_SESSION_WRITES)
        dispatch_action(ctx, request.form.get('action', ''), request.form)

    # Canvas errors are shown once
    canvas_errors = ctx.session.canvas_errors
    ctx.session.canvas_errors = []

    html = render_template(
        'wizard.html',
        s=ctx.session,
        step=ctx.session.current_step,
        step_titles=STEP_TITLES,
        error=ctx.error,
        success=ctx.success,
        canvas_errors=canvas_errors,
        canvas_url=request.form.get('canvas_url') or config.default_canvas_url,
        course_id=request.form.get('course_id', ''),
    )
    return _finish(make_response(html), ctx)


@wizard_bp.route('/api/audit-log')
def audit_log_entries():
    """Recent audit log entries, newest first."""
    try:
        limit = int(request.args.get('limit', 100))
    except ValueError:
        return jsonify({"error": "limit must be an integer"}), 400
    return jsonify({"entries": get_audit_logs(limit)})
