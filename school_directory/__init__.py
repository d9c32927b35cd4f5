from flask import Flask
from config import Config
from school_directory.services.school_api import SchoolApiClient

school_api = SchoolApiClient()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    school_api.init_app(app)

    with app.app_context():
        from school_directory.routes import main, school

        # Register blueprints
        app.register_blueprint(main.bp)
        app.register_blueprint(school.bp)

        # Register error handlers
        register_error_handlers(app)

    @app.context_processor
    def inject_settings():
        return {
            'asset_base_url': app.config['SCHOOLS_ASSET_URL'],
            'success_redirect_delay': app.config['SUCCESS_REDIRECT_DELAY'],
        }

    return app

def register_error_handlers(app):
    """Register global error handlers"""
    from flask import render_template
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(404)
    def not_found_error(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def internal_error(error):
        return render_template('errors/500.html'), 500

    @app.errorhandler(Exception)
    def handle_exception(e):
        # HTTP errors keep their own status and response
        if isinstance(e, HTTPException):
            return e

        app.logger.error(f'Unhandled exception: {str(e)}')
        return render_template('errors/500.html'), 500
