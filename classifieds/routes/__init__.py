"""Routes package for the classifieds application."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .listings import listings_bp
    from .my_listings import my_bp
    from .messages import messages_bp
    from .admin import admin_bp
    from .categories import categories_bp

    app.register_blueprint(listings_bp, url_prefix='/api/listings')
    app.register_blueprint(my_bp, url_prefix='/api/my')
    app.register_blueprint(messages_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(categories_bp, url_prefix='/api/categories')
