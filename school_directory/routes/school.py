from flask import Blueprint, render_template, request, redirect, url_for, jsonify, current_app
from werkzeug.exceptions import RequestEntityTooLarge
from school_directory.models.school import UploadedImage
from school_directory.services.directory_service import filter_schools, directory_stats
from school_directory.services.school_api import FetchError
from school_directory.services.submission_service import SchoolSubmission, SubmissionStatus
from school_directory.utils.school_validator import FIELDS, IMAGE_TOO_LARGE_MESSAGE

bp = Blueprint('school', __name__, url_prefix='/schools')

def get_api():
    return current_app.extensions['school_api']

def form_values():
    """Collect the add-school fields from the current request"""
    values = {field: request.form.get(field, '') for field in FIELDS if field != 'image'}
    values['image'] = UploadedImage.from_file_storage(request.files.get('image'))
    return values

@bp.route('/')
def index():
    search_query = request.args.get('search_query', '').strip()

    try:
        schools = get_api().fetch_schools()
    except FetchError as e:
        current_app.logger.error(f"Could not load schools: {e.message}")
        return render_template('school/index.html', error=e.message, search_query=search_query,
                               schools=[], filtered_schools=[], stats=None)

    filtered_schools = filter_schools(schools, search_query)
    stats = directory_stats(schools) if schools else None

    return render_template('school/index.html', error=None, search_query=search_query,
                           schools=schools, filtered_schools=filtered_schools, stats=stats)

@bp.route('/add', methods=['GET', 'POST'])
def add():
    with SchoolSubmission(get_api(), success_delay=current_app.config['SUCCESS_REDIRECT_DELAY']) as submission:
        if request.method == 'POST':
            submission.update(form_values())
            state = submission.submit()

            if state.status is SubmissionStatus.SUCCEEDED:
                current_app.logger.info(f"School added from {request.remote_addr}")
            elif state.status is SubmissionStatus.FAILED:
                current_app.logger.warning(f"School submission failed: {state.message}")

        return render_template('school/add.html',
                               values=submission.values, errors=submission.visible_errors,
                               state=submission.state)

@bp.route('/add/reset', methods=['POST'])
def reset():
    return redirect(url_for('school.add'))

@bp.route('/validate', methods=['POST'])
def validate():
    """Live revalidation for the fields the user has touched so far"""
    touched = [field for field in request.form.getlist('touched') if field in FIELDS]
    values = form_values()

    submission = SchoolSubmission(get_api())
    for field in touched:
        submission.update_field(field, values[field])

    return jsonify({
        'valid': submission.is_valid,
        'errors': submission.visible_errors,
    })

@bp.errorhandler(RequestEntityTooLarge)
def upload_too_large(error):
    current_app.logger.warning("Rejected oversized school upload")
    errors = {'image': IMAGE_TOO_LARGE_MESSAGE}
    if request.endpoint == 'school.validate':
        return jsonify({'valid': False, 'errors': errors}), 413

    submission = SchoolSubmission(get_api())
    return render_template('school/add.html', values=submission.values,
                           errors=errors, state=submission.state), 413
