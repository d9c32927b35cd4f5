from flask import Blueprint, redirect, url_for, jsonify

bp = Blueprint('main', __name__)

@bp.route('/')
def index():
    return redirect(url_for('school.index'))

@bp.route('/health')
def health():
    """Liveness probe"""
    return jsonify({'status': 'ok'})
