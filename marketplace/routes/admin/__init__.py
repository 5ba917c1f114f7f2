from flask import Blueprint
from .dashboard_routes import dashboard_admin_bp
from .order_routes import order_admin_bp
from .user_routes import user_admin_bp
from .vendor_routes import vendor_admin_bp

admin_bp = Blueprint("admin", __name__)

# Dashboard, transactions, employees, orders and deliveries sit directly under /api/admin
admin_bp.register_blueprint(dashboard_admin_bp)
admin_bp.register_blueprint(order_admin_bp)
admin_bp.register_blueprint(user_admin_bp, url_prefix="/users")
admin_bp.register_blueprint(vendor_admin_bp, url_prefix="/vendors")
