"""Development entry point: ``python app.py``.

Production runs the factory under a WSGI server, e.g.
``gunicorn --threads 8 "hackathon_admin.main:create_app()"``.
"""
import os

from hackathon_admin.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5001")), threaded=True)
