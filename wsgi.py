# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# Punto de entrada para servidores WSGI como Gunicorn.
#
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/              <- Directorio de trabajo
#   ├── wsgi.py             <- Este archivo
#   ├── pyproject.toml
#   └── restaurante_crm/    <- Paquete Python
#       ├── main.py         <- create_app()
#       ├── app_container.py
#       ├── models/
#       ├── services/
#       └── repositories/
#
# La configuración se toma de variables de entorno (CRM_DATA_DIR,
# CRM_SECRET_KEY, GEMINI_API_KEY, ...), ver restaurante_crm/main.py
# ==============================================================================

from restaurante_crm.main import HOST, PORT, create_app

app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host=HOST, port=PORT)
