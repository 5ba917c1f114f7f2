import os

import click
from dotenv import load_dotenv

# Load environment variables before the config module reads them
load_dotenv()

from marketplace import create_app, db
from marketplace.enums import UserType
from marketplace.models.user import User
from marketplace.seed import seed_orders, order_summary

# Create app instance
app = create_app()


@app.cli.command()
def init_db():
    """Initialize database"""
    db.create_all()
    print('Database initialized successfully!')


@app.cli.command()
def drop_db():
    """Drop all tables"""
    if input('Are you sure you want to drop all tables? (yes/no): ') == 'yes':
        db.drop_all()
        print('Database dropped successfully!')
    else:
        print('Operation cancelled')


@app.cli.command()
@click.option('--phone', prompt='Admin phone number')
@click.option('--email', prompt='Admin email', default='', show_default=False)
@click.option('--name', default='System Administrator')
@click.password_option()
def create_admin(phone, email, name, password):
    """Create admin user"""
    if User.query.filter_by(phone_number=phone).first():
        print('Phone number already exists')
        return

    if email and User.query.filter_by(email=email).first():
        print('Email already exists')
        return

    admin = User(
        name=name,
        email=email or None,
        phone_number=phone,
        type=UserType.ADMIN,
        is_verified=True,
        is_active=True,
    )
    admin.set_password(password)

    db.session.add(admin)
    db.session.commit()

    print('Admin user created successfully!')


@app.cli.command('seed-orders')
def seed_orders_command():
    """Replace marketplace data with sample users, vendors, products and orders"""
    counts = seed_orders()
    for name, count in counts.items():
        print(f'{name}: {count}')
    print('Sample data seeded successfully!')


@app.cli.command('verify-orders')
def verify_orders_command():
    """Print order counts per status and vendor"""
    summary = order_summary()
    print(f"Total orders: {summary['total']}")
    for status, count in summary['by_status'].items():
        print(f'  {status}: {count}')
    for vendor, count in summary['by_vendor'].items():
        print(f'  {vendor}: {count}')


if __name__ == '__main__':
    app.run(
        host=os.getenv('HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', 5000)),
        debug=os.getenv('DEBUG', 'True') == 'True'
    )
