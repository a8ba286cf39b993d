from app import create_app, db
import os

config_name = os.environ.get('FLASK_ENV', 'production')
app = create_app(config_name)

# Tables are created on startup; the catalog itself is loaded with `flask seed-catalog`.
with app.app_context():
    try:
        db.create_all()
    except Exception as e:
        app.logger.error(f"Startup table creation failed: {e}")

if __name__ == "__main__":
    app.run()
