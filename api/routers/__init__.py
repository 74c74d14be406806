# api/routers/__init__.py
