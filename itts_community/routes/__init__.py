import logging

logger = logging.getLogger(__name__)


def register_routes(app):
    """Register all API blueprints"""
    from itts_community.health import health_bp
    from itts_community.routes.admin_access import access_bp
    from itts_community.routes.admin_content import content_bp
    from itts_community.routes.admin_events import events_bp
    from itts_community.routes.admin_registrations import registrations_bp
    from itts_community.routes.auth import auth_bp
    from itts_community.routes.public import public_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(public_bp)
    app.register_blueprint(access_bp)
    app.register_blueprint(registrations_bp)
    app.register_blueprint(events_bp)
    app.register_blueprint(content_bp)

    logger.info("Registered API blueprints")
    return app
