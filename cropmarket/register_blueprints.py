"""
Centralized Blueprint Registration
All blueprints MUST be registered inside register_all_blueprints(app)
"""


def register_all_blueprints(app):

    # Root
    from cropmarket.routes.root.root_routes import root_bp
    app.register_blueprint(root_bp)

    # Auth
    from cropmarket.routes.auth.auth_routes import auth_bp
    app.register_blueprint(auth_bp)

    # Crops + uploaded images
    from cropmarket.routes.crops.crop_routes import crop_bp
    from cropmarket.routes.media_routes import media_bp
    app.register_blueprint(crop_bp)
    app.register_blueprint(media_bp)

    # Contracts
    from cropmarket.routes.contract.contract_routes import contract_bp
    app.register_blueprint(contract_bp)

    app.logger.info("All blueprints registered")
