from marketplace.routes.auth import auth_bp
from marketplace.routes.users import user_bp
from marketplace.routes.vendors import vendor_bp
from marketplace.routes.category import category_bp
from marketplace.routes.subcategory import subcategory_bp
from marketplace.routes.products import product_bp
from marketplace.routes.subscription import subscription_bp
from marketplace.routes.wallet import wallet_bp
from marketplace.routes.cash_out import cash_out_bp
from marketplace.routes.admin import admin_bp


def register_blueprints(app):
    """Register all blueprints"""
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api/users')
    app.register_blueprint(vendor_bp, url_prefix='/api/vendors')
    app.register_blueprint(category_bp, url_prefix='/api/category')
    app.register_blueprint(subcategory_bp, url_prefix='/api/subcategory')
    app.register_blueprint(product_bp, url_prefix='/api/products')
    app.register_blueprint(subscription_bp, url_prefix='/api/subscription')
    app.register_blueprint(wallet_bp, url_prefix='/api/wallet')
    app.register_blueprint(cash_out_bp, url_prefix='/api/cashout-requests')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
