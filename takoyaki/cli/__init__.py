# takoyaki/cli/__init__.py
