# backend/wsgi.py
# FLASK_APP entrypoint: `python -m flask --app wsgi.py run`
from app import create_app

app = create_app()
